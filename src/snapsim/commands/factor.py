"""snapsim factor command -- reduction factor for a width x height pair."""

from __future__ import annotations

import click

from snapsim.commands._helpers import min_dimension_option, write_result
from snapsim.size import Size


@click.command("factor")
@click.argument("width", type=click.IntRange(min=0))
@click.argument("height", type=click.IntRange(min=0))
@min_dimension_option
@click.option("--json", "use_json", is_flag=True, help="JSON output.")
def factor_cmd(width: int, height: int, min_dimension: int, use_json: bool) -> None:
    """Show the reduction factor and reduced size for WIDTH x HEIGHT."""
    size = Size(width, height)
    factor = size.reduction_factor(min_dimension)
    write_result(
        {
            "size": size,
            "factor": factor,
            "scaled": size.scaled(factor) if factor else None,
            "reduced_area": size.reduced_area(factor) if factor else None,
        },
        use_json,
    )
