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

__all__ = ("METADATA_COLUMNS", "ColumnMetadata", "make_metadata_table")

from collections.abc import Iterable, Mapping
from logging import getLogger

import astropy.table
import astropy.units
import numpy as np
import pydantic

from ._datatypes import Datatype

_LOG = getLogger(__name__)

METADATA_COLUMNS = ("name", "datatype", "ucd", "unit", "description")
"""Names of the columns of a metadata table, one row per ``FIELD``."""


class ColumnMetadata(pydantic.BaseModel):
    """A model that describes a column of a VOTable, as declared by a
    ``FIELD`` element.
    """

    name: str
    """Name of the column."""

    datatype: str = "char"
    """Declared VOTable datatype, exactly as written in the document."""

    ucd: str | None = None
    """Unified Content Descriptor of the column."""

    unit: str | None = None
    """Unit string of the column (VOUnit syntax)."""

    description: str | None = None
    """Extended description of the column."""

    id: str | None = None
    """XML ``ID`` of the ``FIELD``."""

    arraysize: str | None = None
    """Declared array size, e.g. ``"*"`` for variable-length strings."""

    ref: str | None = None
    """ID of another element (usually a ``COOSYS``) this column refers to."""

    null: str | None = None
    """Cell text that represents a null value (``VALUES/@null``)."""

    @classmethod
    def from_attributes(cls, attributes: Mapping[str, str]) -> ColumnMetadata:
        """Construct from the attributes of a ``FIELD`` element."""
        return cls(
            name=attributes.get("name", ""),
            datatype=attributes.get("datatype", "char"),
            ucd=attributes.get("ucd"),
            unit=attributes.get("unit"),
            id=attributes.get("ID"),
            arraysize=attributes.get("arraysize"),
            ref=attributes.get("ref"),
        )

    def resolve_datatype(self) -> Datatype:
        """Return the datatype cells of this column are converted to.

        Unrecognized datatypes and non-character arrays cannot be
        represented as scalar columns, so they fall back to `Datatype.CHAR`
        (raw cell text).
        """
        datatype = Datatype.from_string(self.datatype)
        if datatype is None:
            _LOG.warning("Unsupported datatype %r for column %r; keeping raw text.", self.datatype, self.name)
            return Datatype.CHAR
        if not datatype.is_text and self.arraysize not in (None, "1"):
            _LOG.warning(
                "Array column %r (%s[%s]) is not supported; keeping raw text.",
                self.name,
                self.datatype,
                self.arraysize,
            )
            return Datatype.CHAR
        return datatype

    def make_unit(self) -> astropy.units.UnitBase | None:
        """Parse the unit string, returning `None` if there is none.

        Strings that are not valid VOUnits are returned as
        `astropy.units.UnrecognizedUnit` rather than rejected.
        """
        if not self.unit:
            return None
        return astropy.units.Unit(self.unit, format="vounit", parse_strict="silent")

    def update_column(self, column: astropy.table.Column) -> None:
        """Update the unit, description and UCD of an astropy column from
        this object.
        """
        column.unit = self.make_unit()
        column.description = self.description
        if self.ucd is not None:
            column.meta["ucd"] = self.ucd

    def to_row(self) -> dict[str, str | None]:
        """Return the values of this object for a metadata-table row."""
        return {name: getattr(self, name) for name in METADATA_COLUMNS}


def make_metadata_table(fields: Iterable[ColumnMetadata]) -> astropy.table.Table:
    """Make a table with one row per column descriptor.

    Parameters
    ----------
    fields
        Column descriptors, in declaration order.

    Returns
    -------
    table
        Table with object-dtype columns ``name``, ``datatype``, ``ucd``,
        ``unit`` and ``description``; absent values are `None`.
    """
    rows = [field.to_row() for field in fields]
    columns = []
    for name in METADATA_COLUMNS:
        data = np.empty(len(rows), dtype=object)
        data[:] = [row[name] for row in rows]
        columns.append(astropy.table.Column(data, name=name, dtype=object))
    return astropy.table.Table(columns)
