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

__all__ = ("assert_times_close", "make_votable_document")

import unittest
from collections.abc import Iterable, Mapping, Sequence
from xml.sax.saxutils import escape, quoteattr

import astropy.time
import numpy as np


def assert_times_close(
    tc: unittest.TestCase,
    a: astropy.time.Time,
    b: astropy.time.Time,
    atol_seconds: float = 1e-3,
) -> None:
    """Test that two instants are almost equal.

    Parameters
    ----------
    tc
        Test case object with assert methods to use.
    a
        Instant to compare.
    b
        Instant to compare.
    atol_seconds
        Absolute tolerance in seconds.
    """
    tc.assertTrue(
        np.allclose(a.unix, b.unix, rtol=0.0, atol=atol_seconds), msg=f"{a.isot} != {b.isot}"
    )


def _format_attributes(attributes: Mapping[str, str]) -> str:
    return "".join(f" {key}={quoteattr(value)}" for key, value in attributes.items())


def make_votable_document(
    fields: Iterable[Mapping[str, str]],
    rows: Iterable[Sequence[str]] = (),
    *,
    description: str | None = None,
    coosys: Mapping[str, str] | None = None,
    namespace: str | None = None,
) -> bytes:
    """Make a minimal single-table VOTable document.

    Parameters
    ----------
    fields
        Attributes of each ``FIELD``.  A ``description`` key is written as a
        nested ``DESCRIPTION`` element instead of an attribute.
    rows
        Cell text for each ``TR``.
    description
        Text of a ``DESCRIPTION`` element directly under ``VOTABLE``.
    coosys
        Attributes of a ``COOSYS`` element directly under ``VOTABLE``.
    namespace
        Default XML namespace for the document.

    Returns
    -------
    document
        UTF-8 encoded document.
    """
    root_attributes = {"version": "1.4"}
    if namespace is not None:
        root_attributes["xmlns"] = namespace
    lines = ['<?xml version="1.0" encoding="UTF-8"?>', f"<VOTABLE{_format_attributes(root_attributes)}>"]
    if description is not None:
        lines.append(f"  <DESCRIPTION>{escape(description)}</DESCRIPTION>")
    if coosys is not None:
        lines.append(f"  <COOSYS{_format_attributes(coosys)}/>")
    lines.extend(["  <RESOURCE>", "    <TABLE>"])
    for field in fields:
        attributes = dict(field)
        field_description = attributes.pop("description", None)
        if field_description is None:
            lines.append(f"      <FIELD{_format_attributes(attributes)}/>")
        else:
            lines.append(f"      <FIELD{_format_attributes(attributes)}>")
            lines.append(f"        <DESCRIPTION>{escape(field_description)}</DESCRIPTION>")
            lines.append("      </FIELD>")
    lines.extend(["      <DATA>", "        <TABLEDATA>"])
    for row in rows:
        cells = "".join(f"<TD>{escape(cell)}</TD>" for cell in row)
        lines.append(f"          <TR>{cells}</TR>")
    lines.extend(["        </TABLEDATA>", "      </DATA>", "    </TABLE>", "  </RESOURCE>", "</VOTABLE>", ""])
    return "\n".join(lines).encode("utf-8")
