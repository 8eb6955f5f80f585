"""Shared option and output helpers for snapsim commands."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any, NoReturn, TypeVar

import click

from snapsim.size import MIN_PIXEL_ROOT, Size
from snapsim.snapshot import Snapshot

__all__ = [
    "EXIT_ERROR",
    "MIN_DIMENSION_ENV",
    "fail",
    "format_kv",
    "load_snapshot",
    "min_dimension_option",
    "size_dict",
    "write_result",
]

EXIT_ERROR = 2
MIN_DIMENSION_ENV = "SNAPSIM_MIN_DIMENSION"

F = TypeVar("F", bound=Callable[..., Any])


def min_dimension_option(func: F) -> F:
    """Add ``--min-dimension``, falling back to $SNAPSIM_MIN_DIMENSION."""
    option = click.option(
        "--min-dimension",
        type=click.IntRange(min=0),
        default=MIN_PIXEL_ROOT,
        show_default=True,
        envvar=MIN_DIMENSION_ENV,
        help="Minimum reduced dimension (0 disables reduction).",
    )
    return option(func)


def fail(message: str) -> NoReturn:
    click.echo(f"error: {message}", err=True)
    raise SystemExit(EXIT_ERROR)


def load_snapshot(text: str) -> Snapshot:
    """Parse base64 text or an image path, exiting with status 2 if it cannot be read."""
    try:
        return Snapshot.parse(text)
    except (ValueError, OSError) as exc:
        fail(str(exc))


def size_dict(size: Size | None) -> dict[str, int] | None:
    if size is None:
        return None
    return {"width": size.width, "height": size.height}


def format_kv(data: dict[str, Any]) -> str:
    """Format a flat dict as ``key: value`` lines with values aligned.

    None renders as ``-`` and Size values as ``W x H``.
    """
    width = max((len(k) for k in data), default=0) + 2
    lines = []
    for key, value in data.items():
        text = "-" if value is None else str(value)
        lines.append(f"{key + ':':<{width}}{text}")
    return "\n".join(lines)


def write_result(data: dict[str, Any], use_json: bool) -> None:
    if use_json:
        payload = {k: size_dict(v) if isinstance(v, Size) else v for k, v in data.items()}
        click.echo(json.dumps(payload, default=str))
    else:
        click.echo(format_kv(data))
