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

__all__ = ("path_matches",)

from collections.abc import Sequence

WILDCARD = "*"


def path_matches(pattern: str, path: Sequence[str]) -> bool:
    """Test whether a slash-separated element-name pattern matches a path.

    Parameters
    ----------
    pattern
        Element names separated by ``/``.  A ``*`` segment skips forward to
        the next occurrence of the literal segment that follows it; a
        trailing ``*`` matches the rest of the path.  Empty segments are
        ignored.
    path
        Element names from the document root to the current element.

    Returns
    -------
    matches
        Whether the pattern matches.

    Notes
    -----
    Without wildcards the pattern must have exactly as many segments as the
    path.  With wildcards the match is greedy and never backtracks, and it
    succeeds once every pattern segment has been consumed, even if the path
    continues beyond that point.
    """
    parts = [part for part in pattern.split("/") if part]
    if WILDCARD not in parts:
        return len(parts) == len(path) and all(a == b for a, b in zip(parts, path))
    i = 0
    j = 0
    while i < len(parts) and j < len(path):
        part = parts[i]
        if part == WILDCARD:
            if i == len(parts) - 1:
                return True
            i += 1
            target = parts[i]
            while j < len(path) and path[j] != target:
                j += 1
        elif part == path[j]:
            i += 1
            j += 1
        else:
            return False
    return i == len(parts) or (i == len(parts) - 1 and parts[-1] == WILDCARD)
