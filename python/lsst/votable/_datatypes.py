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

__all__ = ("Datatype",)

import enum
import re
from typing import Any

import numpy as np

_TRUE_STRINGS = frozenset({"t", "true", "1"})
_FALSE_STRINGS = frozenset({"f", "false", "0"})

_INTEGER_PATTERN = re.compile(r"[+-]?(?:0[xX][0-9a-fA-F]+|[0-9]+)", re.ASCII)
_REAL_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|nan)", re.ASCII | re.IGNORECASE
)


class Datatype(enum.StrEnum):
    """Enumeration of the ``FIELD/@datatype`` values defined by VOTable."""

    BOOLEAN = "boolean"
    BIT = "bit"
    UNSIGNED_BYTE = "unsignedByte"
    SHORT = "short"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    FLOAT_COMPLEX = "floatComplex"
    DOUBLE_COMPLEX = "doubleComplex"
    CHAR = "char"
    UNICODE_CHAR = "unicodeChar"

    @classmethod
    def from_string(cls, raw: str) -> Datatype | None:
        """Look up a datatype by its VOTable name, returning `None` if it is
        not recognized.
        """
        try:
            return cls(raw)
        except ValueError:
            return None

    def to_numpy(self) -> type:
        """Convert an enumeration member to the corresponding numpy scalar
        type object.

        Returns
        -------
        scalar_type
            Numpy scalar type, e.g. `numpy.int16`.  Character types map to
            `numpy.str_`.
        """
        return _NUMPY_TYPES[self]

    @property
    def is_text(self) -> bool:
        """Whether cells of this type are kept as strings."""
        return self is Datatype.CHAR or self is Datatype.UNICODE_CHAR

    @property
    def fill_value(self) -> Any:
        """Placeholder stored under masked (null) cells."""
        kind = np.dtype(self.to_numpy()).kind
        match kind:
            case "b":
                return False
            case "U":
                return ""
            case "f" | "c":
                return np.nan
        return 0

    def convert(self, text: str) -> Any:
        """Convert the (whitespace-stripped) text of a ``TD`` element.

        Parameters
        ----------
        text
            Cell text.

        Returns
        -------
        value
            Python scalar for the cell, or `None` if the cell is null
            (empty, or ``?`` for booleans).  Character cells are returned
            unchanged and are never null.

        Raises
        ------
        ValueError
            Raised if the text is not valid for this datatype.
        """
        if self.is_text:
            return text
        if not text:
            return None
        match self:
            case Datatype.BOOLEAN:
                return _convert_boolean(text)
            case Datatype.BIT:
                if text not in ("0", "1"):
                    raise ValueError("bit values must be 0 or 1")
                return text == "1"
            case Datatype.FLOAT:
                return _convert_real(text, np.float32)
            case Datatype.DOUBLE:
                return _convert_real(text, np.float64)
            case Datatype.FLOAT_COMPLEX:
                return _convert_complex(text, np.float32)
            case Datatype.DOUBLE_COMPLEX:
                return _convert_complex(text, np.float64)
        return _convert_integer(text, np.iinfo(self.to_numpy()))


_NUMPY_TYPES: dict[Datatype, type] = {
    Datatype.BOOLEAN: np.bool_,
    Datatype.BIT: np.bool_,
    Datatype.UNSIGNED_BYTE: np.uint8,
    Datatype.SHORT: np.int16,
    Datatype.INT: np.int32,
    Datatype.LONG: np.int64,
    Datatype.FLOAT: np.float32,
    Datatype.DOUBLE: np.float64,
    Datatype.FLOAT_COMPLEX: np.complex64,
    Datatype.DOUBLE_COMPLEX: np.complex128,
    Datatype.CHAR: np.str_,
    Datatype.UNICODE_CHAR: np.str_,
}


def _convert_boolean(text: str) -> bool | None:
    if text == "?":
        return None
    lowered = text.lower()
    if lowered in _TRUE_STRINGS:
        return True
    if lowered in _FALSE_STRINGS:
        return False
    raise ValueError("boolean values must be one of T, F, true, false, 1, 0 or ?")


def _convert_integer(text: str, info: np.iinfo) -> int:
    if _INTEGER_PATTERN.fullmatch(text) is None:
        raise ValueError("not a decimal or hexadecimal integer")
    unsigned = text.lstrip("+-")
    if unsigned[:2].lower() == "0x":
        value = int(text, 16)
    else:
        value = int(text)
    if not (info.min <= value <= info.max):
        raise ValueError(f"value out of range [{info.min}, {info.max}]")
    return value


def _convert_real(text: str, scalar_type: type[np.floating]) -> float:
    if _REAL_PATTERN.fullmatch(text) is None:
        raise ValueError("not a floating-point number")
    value = float(text)
    # Only an explicit Inf may convert to an infinity.
    with np.errstate(over="ignore"):
        overflows = bool(np.isinf(scalar_type(value)))
    if overflows and text.lstrip("+-").lower() != "inf":
        raise ValueError(f"value out of range for {np.dtype(scalar_type).name}")
    return value


def _convert_complex(text: str, scalar_type: type[np.floating]) -> complex:
    parts = text.split()
    if len(parts) != 2:
        raise ValueError("complex values must be two whitespace-separated numbers")
    return complex(_convert_real(parts[0], scalar_type), _convert_real(parts[1], scalar_type))
