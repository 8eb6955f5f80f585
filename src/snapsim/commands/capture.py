"""snapsim capture command -- grab a screen rectangle."""

from __future__ import annotations

import click

from snapsim.commands._helpers import fail
from snapsim.snapshot import Snapshot


@click.command("capture")
@click.argument("left", type=int)
@click.argument("top", type=int)
@click.argument("width", type=click.IntRange(min=1))
@click.argument("height", type=click.IntRange(min=1))
@click.argument("output", default=".")
def capture_cmd(left: int, top: int, width: int, height: int, output: str) -> None:
    """Capture a WIDTH x HEIGHT screen area at LEFT,TOP and save it as JPEG.

    OUTPUT defaults to a random file name; ``.jpg`` is appended if missing.
    """
    try:
        snapshot = Snapshot.capture_screen(left, top, width, height)
        path = snapshot.save(output)
    except OSError as exc:
        fail(f"screen capture failed: {exc}")
    click.echo(path)
