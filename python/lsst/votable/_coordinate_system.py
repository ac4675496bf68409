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

__all__ = ("CoordinateSystem",)

from collections.abc import Mapping
from logging import getLogger
from typing import TYPE_CHECKING, Any

import pydantic

from ._epochs import parse_epoch
from ._errors import InvalidEpochError, UnsupportedFrameError
from ._serialization import Time
from ._vocabularies import ReferenceFrame, ReferencePosition

if TYPE_CHECKING:
    import astropy.coordinates
    import astropy.time

_LOG = getLogger(__name__)


class CoordinateSystem(pydantic.BaseModel):
    """A celestial coordinate system, as declared by a ``COOSYS`` element."""

    id: str | None = None
    """Identifier used by ``FIELD/@ref`` to point at this system."""

    system: ReferenceFrame | None = None
    """Reference frame of the coordinate system."""

    equinox: Time | None = None
    """Equinox of the coordinate system."""

    epoch: Time | None = None
    """Epoch of the positions."""

    reference_position: ReferencePosition | None = None
    """Spatial origin of the coordinate system."""

    model_config = pydantic.ConfigDict(frozen=True)

    @classmethod
    def from_attributes(cls, attributes: Mapping[str, str]) -> CoordinateSystem:
        """Construct from the attributes of a ``COOSYS`` element.

        Unrecognized frames and positions resolve to ``UNKNOWN``, and
        malformed ``equinox`` or ``epoch`` values are logged and dropped.
        """
        system = attributes.get("system")
        reference_position = attributes.get("refposition")
        return cls(
            id=attributes.get("ID"),
            system=ReferenceFrame.from_string(system) if system is not None else None,
            equinox=_parse_optional_epoch(attributes, "equinox"),
            epoch=_parse_optional_epoch(attributes, "epoch"),
            reference_position=(
                ReferencePosition.from_string(reference_position) if reference_position is not None else None
            ),
        )

    def to_astropy_frame(self) -> astropy.coordinates.BaseCoordinateFrame:
        """Construct an equivalent `astropy.coordinates` frame.

        Raises
        ------
        UnsupportedFrameError
            Raised if the reference frame is not set or has no Astropy
            equivalent.
        """
        from astropy.coordinates import frame_transform_graph

        name = self.system.to_astropy_name() if self.system is not None else None
        if name is None:
            raise UnsupportedFrameError(f"Reference frame {self.system} has no Astropy equivalent.")
        kwargs: dict[str, Any] = {}
        if self.system in (ReferenceFrame.FK4, ReferenceFrame.FK5) and self.equinox is not None:
            kwargs["equinox"] = self.equinox
        if self.system is ReferenceFrame.FK4 and self.epoch is not None:
            kwargs["obstime"] = self.epoch
        return frame_transform_graph.lookup_name(name)(**kwargs)

    def __str__(self) -> str:
        return "\n".join(
            [
                f"Coordinate system [{self.id}]:",
                f"- System:             {_format_optional(self.system)}",
                f"- Equinox:            {_format_time(self.equinox)}",
                f"- Epoch:              {_format_time(self.epoch)}",
                f"- Reference position: {_format_optional(self.reference_position)}",
            ]
        )


def _parse_optional_epoch(attributes: Mapping[str, str], name: str) -> astropy.time.Time | None:
    if (value := attributes.get(name)) is None:
        return None
    try:
        return parse_epoch(value)
    except InvalidEpochError as err:
        _LOG.warning("Ignoring COOSYS %s attribute: %s", name, err)
        return None


def _format_optional(value: object) -> str:
    return str(value) if value is not None else "None"


def _format_time(value: astropy.time.Time | None) -> str:
    return value.isot if value is not None else "None"
