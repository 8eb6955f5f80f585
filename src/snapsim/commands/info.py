"""snapsim info and render commands."""

from __future__ import annotations

import click

from snapsim.commands._helpers import load_snapshot, min_dimension_option, write_result


@click.command("info")
@click.argument("image")
@min_dimension_option
@click.option("--json", "use_json", is_flag=True, help="JSON output.")
def info_cmd(image: str, min_dimension: int, use_json: bool) -> None:
    """Show label, MIME type, size and reduction of IMAGE (path or base64)."""
    snapshot = load_snapshot(image)
    size = snapshot.size
    factor = size.reduction_factor(min_dimension) if size else None
    write_result(
        {
            "label": snapshot.label,
            "mime_type": snapshot.mime_type,
            "size": size,
            "aspect_ratio": round(size.aspect_ratio, 4) if size else None,
            "factor": factor,
            "scaled": size.scaled(factor) if size and factor else None,
        },
        use_json,
    )


@click.command("render")
@click.argument("image")
def render_cmd(image: str) -> None:
    """Print IMAGE as an HTML <img> tag with an inline data URI."""
    click.echo(load_snapshot(image).rendering)
