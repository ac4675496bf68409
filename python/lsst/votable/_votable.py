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

__all__ = ("VOTable",)

import os
from collections.abc import Callable, Sequence
from typing import Any

import astropy.table
import numpy as np

from ._columns import ColumnMetadata, make_metadata_table
from ._coordinate_system import CoordinateSystem
from ._parser import ParserOptions, parse


class VOTable:
    """Tabular data read from a VOTable document, with its column metadata.

    Parameters
    ----------
    table
        Data table, one column per entry in ``fields``.  An empty table is
        created if not provided.
    fields
        Column descriptors, in the same order as the columns of ``table``.
    description
        Document description.
    coordinate_system
        Coordinate system the positions in the table refer to.

    Notes
    -----
    Most operations are delegated to the underlying `astropy.table.Table`,
    available as `table`; this class adds the VOTable metadata that Astropy
    tables do not model directly.
    """

    def __init__(
        self,
        table: astropy.table.Table | None = None,
        fields: Sequence[ColumnMetadata] = (),
        *,
        description: str | None = None,
        coordinate_system: CoordinateSystem | None = None,
    ):
        self._table = table if table is not None else astropy.table.Table()
        self._fields = list(fields)
        if len(self._fields) != len(self._table.columns):
            raise ValueError(
                f"Got {len(self._fields)} column descriptor(s) for {len(self._table.columns)} column(s)."
            )
        self._description = description
        self._coordinate_system = coordinate_system

    @classmethod
    def from_bytes(cls, data: bytes | str, options: ParserOptions | None = None) -> VOTable:
        """Parse a VOTable document held in memory.

        See `parse` for the exceptions that may be raised.
        """
        result = parse(data, options)
        return cls(
            result.data,
            result.fields,
            description=result.description,
            coordinate_system=result.coordinate_system,
        )

    @classmethod
    def read(cls, path: str | os.PathLike[str], options: ParserOptions | None = None) -> VOTable:
        """Read a VOTable document from a file."""
        with open(path, "rb") as stream:
            return cls.from_bytes(stream.read(), options)

    @property
    def description(self) -> str:
        """Description of the document (``""`` if it has none)."""
        return self._description or ""

    @property
    def coordinate_system(self) -> CoordinateSystem | None:
        """Coordinate system declared by the document, if any."""
        return self._coordinate_system

    @property
    def columns(self) -> list[str]:
        """Names of the data columns."""
        return list(self._table.colnames)

    @property
    def row_count(self) -> int:
        """Number of rows."""
        return len(self._table)

    @property
    def is_empty(self) -> bool:
        """Whether the table has no rows."""
        return len(self._table) == 0

    @property
    def fields(self) -> list[ColumnMetadata]:
        """Column descriptors, in column order (a copy)."""
        return list(self._fields)

    @property
    def metadata(self) -> astropy.table.Table:
        """A new table with one row of metadata per column."""
        return make_metadata_table(self._fields)

    @property
    def table(self) -> astropy.table.Table:
        """The underlying data table.

        Adding or removing columns through this object directly bypasses the
        column metadata; use `add_column` instead.
        """
        return self._table

    def __len__(self) -> int:
        return len(self._table)

    def __str__(self) -> str:
        return f"VOTable({len(self._fields)} column(s), {len(self._table)} row(s))"

    def __repr__(self) -> str:
        return f"VOTable(columns={self.columns!r}, row_count={self.row_count})"

    def row(self, index: int) -> astropy.table.Row:
        """Return the row at the given index."""
        return self._table[index]

    def column_metadata(self, name: str) -> ColumnMetadata:
        """Return the descriptor of the column with the given name.

        Raises
        ------
        KeyError
            Raised if there is no such column.
        """
        try:
            index = self._table.colnames.index(name)
        except ValueError:
            raise KeyError(name) from None
        return self._fields[index]

    def filter(self, predicate: Callable[[astropy.table.Row], bool]) -> VOTable:
        """Return a new table with only the rows for which ``predicate``
        returns `True`.

        The new table shares column descriptors, description and coordinate
        system with this one.
        """
        keep = np.array([bool(predicate(row)) for row in self._table], dtype=bool)
        return VOTable(
            self._table[keep],
            self._fields,
            description=self._description,
            coordinate_system=self._coordinate_system,
        )

    def add_column(self, values: Sequence[Any] | np.ndarray, metadata: ColumnMetadata) -> None:
        """Append a column and its descriptor.

        Parameters
        ----------
        values
            Column values; must have one entry per row unless the table has
            no columns yet.
        metadata
            Descriptor of the new column; its name is used as the column name.
        """
        column = astropy.table.Column(values, name=metadata.name)
        metadata.update_column(column)
        self._table.add_column(column)
        self._fields.append(metadata)
