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

__all__ = (
    "InvalidCellError",
    "InvalidEpochError",
    "RowLengthError",
    "TableDataError",
    "UnsupportedFrameError",
    "VOTableError",
    "VOTableParsingError",
)


class VOTableError(RuntimeError):
    """Base class for errors raised while reading a VOTable document."""


class VOTableParsingError(VOTableError):
    """Exception raised when a document is not well-formed XML.

    The underlying `lxml.etree.XMLSyntaxError` is chained as the cause.
    """


class TableDataError(VOTableError, ValueError):
    """Base class for errors in the ``TABLEDATA`` content of a document."""


class InvalidCellError(TableDataError):
    """Exception raised (or recorded) when the text of a ``TD`` element
    cannot be converted to the declared datatype of its column.

    Parameters
    ----------
    row
        Index of the row (zero-indexed, counting only loaded rows).
    column
        Name of the column.
    text
        Raw (whitespace-stripped) cell text.
    datatype
        Declared VOTable datatype of the column.
    reason
        Description of the conversion failure.
    """

    def __init__(self, row: int, column: str, text: str, datatype: str, reason: str = ""):
        message = f"Cannot convert {text!r} to {datatype} in row {row}, column {column!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.row = row
        self.column = column
        self.text = text
        self.datatype = datatype

    def __reduce__(self) -> tuple:
        return (type(self), (self.row, self.column, self.text, self.datatype))


class RowLengthError(TableDataError):
    """Exception raised when a ``TR`` element does not have exactly one
    ``TD`` per ``FIELD``.
    """

    def __init__(self, row: int, expected: int, actual: int):
        super().__init__(f"Row {row} has {actual} cell(s); expected {expected} (one per FIELD).")
        self.row = row
        self.expected = expected
        self.actual = actual

    def __reduce__(self) -> tuple:
        return (type(self), (self.row, self.expected, self.actual))


class InvalidEpochError(ValueError):
    """Exception raised when an epoch string is not of the form ``B<year>``
    or ``J<year>``.
    """

    def __init__(self, epoch: str):
        super().__init__(f"Invalid epoch string {epoch!r}.")
        self.epoch = epoch

    def __reduce__(self) -> tuple:
        return (type(self), (self.epoch,))


class UnsupportedFrameError(NotImplementedError):
    """Exception raised when a reference frame has no Astropy equivalent."""
