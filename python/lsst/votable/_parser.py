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

"""Streaming parser that turns a VOTable document into Astropy tables.

The parser is an `lxml` parser target: lxml tokenizes the document and calls
`VOTableTableBuilder.start`, `~VOTableTableBuilder.data` and
`~VOTableTableBuilder.end` in document order.  All per-document state lives
in a `ParseContext`, so every call to `parse` is independent.
"""

from __future__ import annotations

__all__ = (
    "InvalidCellPolicy",
    "ParseContext",
    "ParserOptions",
    "ParsingResult",
    "VOTableTableBuilder",
    "parse",
)

import dataclasses
import enum
from collections.abc import Mapping
from logging import getLogger
from typing import Any, ClassVar, Literal

import astropy.table
import numpy as np
from lxml import etree

from ._columns import ColumnMetadata, make_metadata_table
from ._coordinate_system import CoordinateSystem
from ._errors import InvalidCellError, RowLengthError, VOTableParsingError
from ._paths import path_matches

_LOG = getLogger(__name__)


class InvalidCellPolicy(enum.StrEnum):
    """What to do with ``TD`` text that cannot be converted to its column's
    datatype.
    """

    RAISE = "RAISE"
    """Abort the parse with `InvalidCellError`."""

    MASK = "MASK"
    """Mask the cell and record the error in `ParsingResult.cell_errors`."""


@dataclasses.dataclass(frozen=True)
class ParserOptions:
    """Configuration options for `parse`."""

    invalid_cells: InvalidCellPolicy = InvalidCellPolicy.RAISE
    """Policy for cells that cannot be converted to their declared datatype.

    Rows with the wrong number of cells always raise `RowLengthError`.
    """

    coordinate_system_paths: tuple[str, ...] = ("VOTABLE/COOSYS", "VOTABLE/DEFINITIONS/COOSYS")
    """Path patterns (see `path_matches`) at which ``COOSYS`` elements are
    loaded.  ``COOSYS`` elements anywhere else are ignored.
    """

    DEFAULT: ClassVar[ParserOptions]
    """Default options."""


ParserOptions.DEFAULT = ParserOptions()


@dataclasses.dataclass(frozen=True)
class ParsingResult:
    """The tables and metadata extracted from a VOTable document."""

    metadata: astropy.table.Table
    """Table with one row per ``FIELD`` and columns ``name``, ``datatype``,
    ``ucd``, ``unit`` and ``description``.
    """

    data: astropy.table.Table
    """Table with one typed column per ``FIELD`` and one row per ``TR``."""

    coordinate_system: CoordinateSystem | None = None
    """The last ``COOSYS`` declared at a recognized path, if any."""

    description: str | None = None
    """Text of the ``DESCRIPTION`` element directly under ``VOTABLE``."""

    fields: tuple[ColumnMetadata, ...] = ()
    """Full column descriptors, in declaration order."""

    cell_errors: tuple[InvalidCellError, ...] = ()
    """Cells that were masked because they could not be converted.

    Always empty unless `InvalidCellPolicy.MASK` was used.
    """


class _ColumnBuilder:
    """Accumulates the converted cells of one column."""

    def __init__(self, metadata: ColumnMetadata, name: str):
        self.metadata = metadata
        self.name = name
        self.datatype = metadata.resolve_datatype()
        self.values: list[Any] = []
        self.mask: list[bool] = []

    def convert(self, text: str) -> Any:
        """Convert cell text, returning `None` for nulls and raising
        `ValueError` for invalid text.
        """
        if text == self.metadata.null:
            return None
        return self.datatype.convert(text)

    def append(self, value: Any) -> None:
        self.values.append(self.datatype.fill_value if value is None else value)
        self.mask.append(value is None)

    def finish(self) -> astropy.table.Column:
        data = np.array(self.values, dtype=self.datatype.to_numpy())
        if any(self.mask):
            column = astropy.table.MaskedColumn(data, name=self.name, mask=self.mask)
        else:
            column = astropy.table.Column(data, name=self.name)
        self.metadata.update_column(column)
        return column


@dataclasses.dataclass
class ParseContext:
    """Mutable state of a single parse.

    A context must only ever be used for one document.
    """

    options: ParserOptions = ParserOptions.DEFAULT

    path: list[str] = dataclasses.field(default_factory=list)
    """Names of the open elements, from the root."""

    text: list[str] | None = None
    """Character data fragments of the open ``TD`` or ``DESCRIPTION``, or
    `None` if no text is being collected.
    """

    in_field: bool = False
    in_table_data: bool = False
    in_tr: bool = False
    skipping_table: bool = False
    n_tables: int = 0

    field: ColumnMetadata | None = None
    row: list[str] | None = None
    fields: list[ColumnMetadata] = dataclasses.field(default_factory=list)
    columns: list[_ColumnBuilder] | None = None
    n_rows: int = 0

    coordinate_system: CoordinateSystem | None = None
    description: str | None = None
    cell_errors: list[InvalidCellError] = dataclasses.field(default_factory=list)

    def take_text(self) -> str:
        """Return the stripped text collected so far and stop collecting."""
        text = "".join(self.text) if self.text is not None else ""
        self.text = None
        return text.strip()

    def describe_location(self) -> str:
        return "/".join(self.path)


def route_description(context: ParseContext) -> Literal["document", "field"] | None:
    """Decide where the text of a closing ``DESCRIPTION`` belongs.

    Text belongs to the document when the element directly enclosing the
    ``DESCRIPTION`` is ``VOTABLE``, to the open ``FIELD`` if there is one, and
    is discarded otherwise.  Must be called while ``DESCRIPTION`` is still the
    last element of the context's path.
    """
    if context.path[-2:-1] == ["VOTABLE"]:
        return "document"
    if context.in_field:
        return "field"
    return None


def _make_column_names(fields: list[ColumnMetadata]) -> list[str]:
    names: list[str] = []
    seen: set[str] = set()
    for index, field in enumerate(fields):
        base = field.name or field.id or f"col{index}"
        name = base
        suffix = 1
        while name in seen:
            name = f"{base}_{suffix}"
            suffix += 1
        if name != field.name:
            _LOG.warning("Column %d (FIELD name=%r) is loaded as %r.", index, field.name, name)
        seen.add(name)
        names.append(name)
    return names


class VOTableTableBuilder:
    """An `lxml` parser target that builds a `ParsingResult`.

    Parameters
    ----------
    options
        Configuration options.
    """

    def __init__(self, options: ParserOptions = ParserOptions.DEFAULT):
        self._context = ParseContext(options=options)

    @property
    def context(self) -> ParseContext:
        """The state of the parse so far."""
        return self._context

    def start(self, tag: str, attrib: Mapping[str, str]) -> None:
        ctx = self._context
        name = etree.QName(tag).localname
        ctx.path.append(name)
        match name:
            case "VOTABLE" | "RESOURCE" | "DATA" | "INFO" | "DEFINITIONS":
                pass
            case "TABLE":
                ctx.n_tables += 1
                if ctx.n_tables > 1:
                    _LOG.warning(
                        "Skipping TABLE #%d at %s; only the first is loaded.",
                        ctx.n_tables,
                        ctx.describe_location(),
                    )
                    ctx.skipping_table = True
            case "COOSYS":
                self._start_coordinate_system(attrib)
            case "FIELD":
                if not ctx.skipping_table:
                    ctx.in_field = True
                    ctx.field = ColumnMetadata.from_attributes(attrib)
            case "VALUES":
                if ctx.in_field and ctx.field is not None:
                    ctx.field.null = attrib.get("null")
            case "DESCRIPTION":
                ctx.text = []
            case "TABLEDATA":
                if not ctx.skipping_table:
                    ctx.in_table_data = True
                    self._ensure_columns()
            case "TR":
                if not ctx.skipping_table:
                    ctx.in_tr = True
                    ctx.row = []
            case "TD":
                ctx.text = []
            case "BINARY" | "BINARY2" | "FITS":
                _LOG.warning(
                    "%s serialization at %s is not supported; no rows are loaded from it.",
                    name,
                    ctx.describe_location(),
                )
            case "STREAM":
                if (encoding := attrib.get("encoding")) is not None:
                    _LOG.info("Found STREAM with encoding %s.", encoding)
            case _:
                _LOG.debug("Unhandled element start: %s", ctx.describe_location())

    def data(self, text: str) -> None:
        if self._context.text is not None:
            self._context.text.append(text)

    def end(self, tag: str) -> None:
        ctx = self._context
        name = etree.QName(tag).localname
        match name:
            case "FIELD":
                if ctx.in_field and ctx.field is not None:
                    if ctx.columns is None:
                        ctx.fields.append(ctx.field)
                    else:
                        _LOG.warning(
                            "Ignoring FIELD %r declared after the table data at %s.",
                            ctx.field.name,
                            ctx.describe_location(),
                        )
                ctx.in_field = False
                ctx.field = None
            case "DESCRIPTION":
                self._end_description()
            case "TD":
                text = ctx.take_text()
                if ctx.in_tr and ctx.row is not None:
                    ctx.row.append(text)
            case "TR":
                if ctx.in_tr and ctx.row is not None:
                    self._finish_row(ctx.row)
                ctx.in_tr = False
                ctx.row = None
            case "TABLEDATA":
                ctx.in_table_data = False
            case "TABLE":
                ctx.skipping_table = False
            case _:
                pass
        ctx.path.pop()

    def close(self) -> ParsingResult:
        ctx = self._context
        self._ensure_columns()
        assert ctx.columns is not None, "Guaranteed by _ensure_columns."
        data = astropy.table.Table([column.finish() for column in ctx.columns])
        _LOG.info("Loaded VOTable with %d column(s) and %d row(s).", len(ctx.fields), ctx.n_rows)
        return ParsingResult(
            metadata=make_metadata_table(ctx.fields),
            data=data,
            coordinate_system=ctx.coordinate_system,
            description=ctx.description,
            fields=tuple(ctx.fields),
            cell_errors=tuple(ctx.cell_errors),
        )

    def _start_coordinate_system(self, attrib: Mapping[str, str]) -> None:
        ctx = self._context
        if not any(path_matches(pattern, ctx.path) for pattern in ctx.options.coordinate_system_paths):
            _LOG.warning("Skipping COOSYS element at unrecognized path %s.", ctx.describe_location())
            return
        if ctx.coordinate_system is not None:
            _LOG.debug("COOSYS at %s replaces the previously loaded one.", ctx.describe_location())
        ctx.coordinate_system = CoordinateSystem.from_attributes(attrib)
        _LOG.debug("Parsed COOSYS element:\n%s", ctx.coordinate_system)

    def _end_description(self) -> None:
        ctx = self._context
        text = ctx.take_text()
        match route_description(ctx):
            case "document":
                ctx.description = text
            case "field":
                assert ctx.field is not None, "Guaranteed by in_field."
                ctx.field.description = text
            case None:
                _LOG.debug("Discarding DESCRIPTION at %s.", ctx.describe_location())

    def _ensure_columns(self) -> None:
        ctx = self._context
        if ctx.columns is None:
            names = _make_column_names(ctx.fields)
            ctx.columns = [_ColumnBuilder(field, name) for field, name in zip(ctx.fields, names)]

    def _finish_row(self, row: list[str]) -> None:
        ctx = self._context
        self._ensure_columns()
        assert ctx.columns is not None, "Guaranteed by _ensure_columns."
        if len(row) != len(ctx.columns):
            raise RowLengthError(ctx.n_rows, len(ctx.columns), len(row))
        # Convert the whole row before appending so columns never end up with
        # different lengths.
        values: list[Any] = []
        for column, text in zip(ctx.columns, row):
            try:
                values.append(column.convert(text))
            except ValueError as err:
                error = InvalidCellError(ctx.n_rows, column.name, text, column.metadata.datatype, str(err))
                if ctx.options.invalid_cells is InvalidCellPolicy.RAISE:
                    raise error from err
                _LOG.warning("%s; masking it.", error)
                ctx.cell_errors.append(error)
                values.append(None)
        for column, value in zip(ctx.columns, values):
            column.append(value)
        ctx.n_rows += 1


def parse(data: bytes | str, options: ParserOptions | None = None) -> ParsingResult:
    """Parse a VOTable document.

    Parameters
    ----------
    data
        The complete document.  Strings are encoded as UTF-8 first.
    options
        Configuration options; defaults to `ParserOptions.DEFAULT`.

    Returns
    -------
    result
        The metadata and data tables, coordinate system and description.

    Raises
    ------
    VOTableParsingError
        Raised if the document is empty or not well-formed XML.
    TableDataError
        Raised if a row has the wrong number of cells, or (with the default
        `InvalidCellPolicy.RAISE`) a cell cannot be converted.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    if not data.strip():
        raise VOTableParsingError("Cannot parse an empty document.")
    builder = VOTableTableBuilder(options if options is not None else ParserOptions.DEFAULT)
    parser = etree.XMLParser(target=builder, resolve_entities=False, no_network=True)
    try:
        return etree.fromstring(data, parser)
    except etree.XMLSyntaxError as err:
        raise VOTableParsingError(f"VOTable parsing failed: {err}") from err
