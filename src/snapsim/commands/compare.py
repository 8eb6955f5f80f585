"""snapsim compare command -- scale-aware similarity of two images."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from snapsim.commands._helpers import fail, load_snapshot, min_dimension_option, size_dict
from snapsim.image_compare import CompareResult, compare_snapshots


def _json_output(result: CompareResult) -> str:
    return json.dumps(
        {
            "similarity": result.similarity,
            "matches": result.matches,
            "threshold": result.threshold,
            "left_size": size_dict(result.left_size),
            "right_size": size_dict(result.right_size),
            "left_compared": size_dict(result.left_compared),
            "right_compared": size_dict(result.right_compared),
            "left_factor": result.left_factor,
            "right_factor": result.right_factor,
            "scaled_versions": result.scaled_versions,
            "diff_image": str(result.diff_image) if result.diff_image else None,
        }
    )


@click.command("compare")
@click.argument("left")
@click.argument("right")
@min_dimension_option
@click.option(
    "--threshold",
    default=1.0,
    type=click.FloatRange(0.0, 1.0),
    show_default=True,
    help="Minimum similarity to count as a match.",
)
@click.option(
    "--diff-output",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write diff visualization PNG.",
)
@click.option("--json", "use_json", is_flag=True, help="JSON output.")
def compare_cmd(
    left: str,
    right: str,
    min_dimension: int,
    threshold: float,
    diff_output: Path | None,
    use_json: bool,
) -> None:
    """Compare two images, given as file paths or base64 text.

    Both images are reduced to a small canonical size first, so scaled
    copies of the same image match. Exit 0 if the similarity reaches the
    threshold, exit 1 if not, exit 2 on error (unreadable or invalid image).
    """
    try:
        result = compare_snapshots(
            load_snapshot(left),
            load_snapshot(right),
            min_dimension=min_dimension,
            threshold=threshold,
            diff_output=diff_output,
        )
    except (ValueError, OSError) as exc:
        fail(str(exc))

    if use_json:
        click.echo(_json_output(result))
    elif result.matches:
        click.echo(f"match (similarity {result.similarity:.4f})")
    else:
        click.echo(f"diff: similarity {result.similarity:.4f} < {result.threshold:.4f}")

    sys.exit(0 if result.matches else 1)
