# This file is part of lsst-votable.
#
# Developed for the LSST Data Management System.
# This product includes software developed by the LSST Project
# (https://www.lsst.org).
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

from __future__ import annotations

__all__ = ("Time", "TimeModel")

from typing import Annotated, Any, Literal

import astropy.time
import pydantic
import pydantic_core.core_schema as pcs


class TimeModel(pydantic.BaseModel):
    """Model for a scalar time as seconds since the Unix epoch."""

    value: float
    scale: Literal["utc"] = "utc"
    format: Literal["unix"] = "unix"


class _TimeSerialization:
    """Pydantic hooks that store an `astropy.time.Time` as a `TimeModel`.

    Instants are always written as UTC seconds since the Unix epoch, whatever
    the scale of the original object; validation accepts either a `TimeModel`
    (or its JSON form) or an existing `astropy.time.Time` instance.
    """

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: pydantic.GetCoreSchemaHandler
    ) -> pcs.CoreSchema:
        from_model_schema = pcs.chain_schema(
            [
                TimeModel.__pydantic_core_schema__,
                pcs.no_info_plain_validator_function(cls.from_model),
            ]
        )
        return pcs.json_or_python_schema(
            json_schema=from_model_schema,
            python_schema=pcs.union_schema([pcs.is_instance_schema(astropy.time.Time), from_model_schema]),
            serialization=pcs.plain_serializer_function_ser_schema(cls.to_model, info_arg=False),
        )

    @classmethod
    def from_model(cls, model: TimeModel) -> astropy.time.Time:
        return astropy.time.Time(model.value, scale=model.scale, format=model.format)

    @classmethod
    def to_model(cls, time: astropy.time.Time) -> TimeModel:
        # Times built from VOTable epochs are UTC already; 'unix' converts
        # anything else.
        return TimeModel(value=float(time.unix))


type Time = Annotated[astropy.time.Time, _TimeSerialization]
