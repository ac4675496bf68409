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

__all__ = ("ReferenceFrame", "ReferencePosition")

import enum
from logging import getLogger

_LOG = getLogger(__name__)


class ReferenceFrame(enum.StrEnum):
    """Reference frames of the IVOA Reference Frame Vocabulary
    (https://www.ivoa.net/rdf/refframe/2022-02-22/refframe.html).

    These are the values of the ``system`` attribute of ``COOSYS``.
    """

    AZ_EL = "AZ_EL"
    """Horizontal (azimuth/elevation) coordinates."""

    BODY = "BODY"
    """Generic body-centric coordinates."""

    ECLIPTIC = "ECLIPTIC"
    """Ecliptic coordinates; the ecliptic of J2000.0 is assumed."""

    EQUATORIAL = "EQUATORIAL"
    """Equatorial coordinates; only for old, pre-FK4 positions."""

    FK4 = "FK4"
    """FK4 equatorial coordinates (B1950.0 equinox unless specified)."""

    FK5 = "FK5"
    """FK5 equatorial coordinates (J2000.0 equinox unless specified)."""

    GALACTIC = "GALACTIC"
    """Galactic coordinates, modern definition."""

    GALACTIC_I = "GALACTIC_I"
    """Old, pre-1958 Galactic coordinates."""

    GENERIC_GALACTIC = "GENERIC_GALACTIC"
    """Umbrella term for all Galactic coordinates."""

    ICRS = "ICRS"
    """International Celestial Reference System."""

    SUPER_GALACTIC = "SUPER_GALACTIC"
    """Supergalactic coordinates."""

    UNKNOWN = "UNKNOWN"
    """Unknown frame; a last resort for data that cannot be combined."""

    ECLIPTIC_FK4 = "ecl_FK4"
    """Ecliptic coordinates for the FK4 ecliptic (of B1950.0)."""

    ECLIPTIC_FK5 = "ecl_FK5"
    """Ecliptic coordinates for the FK5 ecliptic (of J2000.0)."""

    @classmethod
    def from_string(cls, raw: str) -> ReferenceFrame:
        """Resolve a ``COOSYS/@system`` value.

        Canonical tags are tried first, then the aliases deprecated by
        VOTable 1.4; anything else resolves to `UNKNOWN`.
        """
        try:
            return cls(raw)
        except ValueError:
            pass
        if (frame := _DEPRECATED_FRAMES.get(raw)) is not None:
            _LOG.debug("Resolved deprecated reference frame %r to %s.", raw, frame)
            return frame
        _LOG.debug("Unrecognized reference frame %r.", raw)
        return cls.UNKNOWN

    @property
    def parent(self) -> ReferenceFrame | None:
        """The umbrella frame this frame belongs to, if any."""
        match self:
            case self.FK4 | self.FK5 | self.ICRS:
                return ReferenceFrame.EQUATORIAL
            case self.ECLIPTIC_FK4 | self.ECLIPTIC_FK5:
                return ReferenceFrame.ECLIPTIC
            case self.GALACTIC | self.GALACTIC_I:
                return ReferenceFrame.GENERIC_GALACTIC
        return None

    def to_astropy_name(self) -> str | None:
        """Return the name of the equivalent `astropy.coordinates` frame, or
        `None` if there is no direct equivalent.
        """
        return _ASTROPY_FRAME_NAMES.get(self)


_DEPRECATED_FRAMES = {
    "barycentric": ReferenceFrame.ICRS,
    "eq_FK4": ReferenceFrame.FK4,
    "eq_FK5": ReferenceFrame.FK5,
    "galactic": ReferenceFrame.GALACTIC,
    "supergalactic": ReferenceFrame.SUPER_GALACTIC,
}

_ASTROPY_FRAME_NAMES = {
    ReferenceFrame.ICRS: "icrs",
    ReferenceFrame.FK4: "fk4",
    ReferenceFrame.FK5: "fk5",
    ReferenceFrame.GALACTIC: "galactic",
    ReferenceFrame.SUPER_GALACTIC: "supergalactic",
}


class ReferencePosition(enum.StrEnum):
    """Reference positions of the IVOA Reference Position Vocabulary
    (https://www.ivoa.net/rdf/refposition/2019-03-15/refposition.html).
    """

    BARYCENTER = "BARYCENTER"
    """The barycenter of the solar system."""

    EMBARYCENTER = "EMBARYCENTER"
    """The barycenter of the Earth-Moon system."""

    GEOCENTER = "GEOCENTER"
    """The center of the Earth."""

    HELIOCENTER = "HELIOCENTER"
    """The center of the Sun."""

    TOPOCENTER = "TOPOCENTER"
    """The location of the instrument that made the observation."""

    UNKNOWN = "UNKNOWN"
    """Unknown reference position."""

    @classmethod
    def from_string(cls, raw: str) -> ReferencePosition:
        """Resolve a ``COOSYS/@refposition`` value, falling back to
        `UNKNOWN`.
        """
        try:
            return cls(raw)
        except ValueError:
            _LOG.debug("Unrecognized reference position %r.", raw)
            return cls.UNKNOWN
