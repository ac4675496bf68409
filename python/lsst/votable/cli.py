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

"""Command-line summary of a VOTable document."""

from __future__ import annotations

__all__ = ("main",)

import logging

import click

from ._errors import VOTableError
from ._parser import InvalidCellPolicy, ParserOptions
from ._votable import VOTable


def format_votable(votable: VOTable, max_rows: int) -> str:
    """Return a human-readable summary of a table's metadata and first
    ``max_rows`` rows.
    """
    lines = [str(votable)]
    if votable.description:
        lines.extend(["", votable.description])
    if votable.coordinate_system is not None:
        lines.extend(["", str(votable.coordinate_system)])
    lines.extend(["", "Columns:"])
    lines.extend(votable.metadata.pformat(max_lines=-1, max_width=-1))
    if max_rows > 0 and not votable.is_empty:
        lines.extend(["", "Data:"])
        lines.extend(votable.table[:max_rows].pformat(max_lines=-1, max_width=-1))
    return "\n".join(lines)


@click.command("votable-show")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--max-rows", default=10, show_default=True, help="Number of data rows to print.")
@click.option("--mask-invalid", is_flag=True, help="Mask cells that do not match their datatype.")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging threshold.",
)
def main(path: str, max_rows: int, mask_invalid: bool, log_level: str) -> None:
    """Print the description, coordinate system, column metadata and first
    rows of the VOTable at PATH.
    """
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    options = ParserOptions(
        invalid_cells=InvalidCellPolicy.MASK if mask_invalid else InvalidCellPolicy.RAISE
    )
    try:
        votable = VOTable.read(path, options)
    except VOTableError as err:
        raise click.ClickException(str(err)) from err
    click.echo(format_votable(votable, max_rows))


if __name__ == "__main__":
    main()
