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

"""Conversions between absolute instants and the day counts and year-based
epochs used in astronomy.

Instants are represented as `astropy.time.Time` objects.  All conversions go
through seconds since the Unix epoch (``Time.unix``), which is how the
constants below are defined; they are not a substitute for Astropy's own
``jd``/``byear``/``jyear`` formats, which account for time scales.
"""

from __future__ import annotations

__all__ = (
    "from_besselian_epoch",
    "from_julian_date",
    "from_julian_epoch",
    "from_modified_julian_date",
    "parse_epoch",
    "to_besselian_epoch",
    "to_julian_date",
    "to_julian_epoch",
    "to_modified_julian_date",
)

import math

import astropy.time
import numpy as np
import numpy.typing as npt

from ._errors import InvalidEpochError

SECONDS_PER_DAY = 86400.0
JD_UNIX_EPOCH = 2440587.5
"""Julian Date of 1970-01-01T00:00:00."""

MJD_OFFSET = 2400000.5
JD2000 = 2451545.0
JD1900 = 2415020.31352
JULIAN_YEAR = 365.25
"""Length of the Julian year in days."""

BESSELIAN_YEAR = 365.242198781
"""Length of the Besselian (tropical) year in days."""

type FloatLike = float | npt.NDArray[np.floating]


def to_julian_date(time: astropy.time.Time) -> FloatLike:
    """Return the Julian Date of an instant."""
    return time.unix / SECONDS_PER_DAY + JD_UNIX_EPOCH


def to_modified_julian_date(time: astropy.time.Time) -> FloatLike:
    """Return the Modified Julian Date of an instant."""
    return to_julian_date(time) - MJD_OFFSET


def to_besselian_epoch(time: astropy.time.Time) -> FloatLike:
    """Return the Besselian epoch (in Besselian years) of an instant."""
    return 1900.0 + (to_julian_date(time) - JD1900) / BESSELIAN_YEAR


def to_julian_epoch(time: astropy.time.Time) -> FloatLike:
    """Return the Julian epoch (in Julian years) of an instant."""
    return 2000.0 + (to_julian_date(time) - JD2000) / JULIAN_YEAR


def from_julian_date(julian_date: FloatLike) -> astropy.time.Time:
    """Construct an instant from a Julian Date."""
    return astropy.time.Time((julian_date - JD_UNIX_EPOCH) * SECONDS_PER_DAY, format="unix", scale="utc")


def from_modified_julian_date(modified_julian_date: FloatLike) -> astropy.time.Time:
    """Construct an instant from a Modified Julian Date."""
    return from_julian_date(modified_julian_date + MJD_OFFSET)


def from_besselian_epoch(besselian_epoch: FloatLike) -> astropy.time.Time:
    """Construct an instant from a Besselian epoch in Besselian years."""
    return from_julian_date(JD1900 + (besselian_epoch - 1900.0) * BESSELIAN_YEAR)


def from_julian_epoch(julian_epoch: FloatLike) -> astropy.time.Time:
    """Construct an instant from a Julian epoch in Julian years."""
    return from_julian_date(JD2000 + (julian_epoch - 2000.0) * JULIAN_YEAR)


def parse_epoch(epoch: str) -> astropy.time.Time:
    """Parse an epoch string like ``B1950.0`` or ``J2000.0``.

    Parameters
    ----------
    epoch
        String with a ``B`` (Besselian) or ``J`` (Julian) prefix followed by
        a floating-point year.

    Returns
    -------
    time
        The corresponding instant.

    Raises
    ------
    InvalidEpochError
        Raised if the prefix is not recognized or the year is not a finite
        number.
    """
    prefix, year_str = epoch[:1], epoch[1:]
    if prefix not in ("B", "J"):
        raise InvalidEpochError(epoch)
    try:
        year = float(year_str)
    except ValueError:
        raise InvalidEpochError(epoch) from None
    if not math.isfinite(year):
        raise InvalidEpochError(epoch)
    if prefix == "B":
        return from_besselian_epoch(year)
    return from_julian_epoch(year)
