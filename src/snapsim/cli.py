from __future__ import annotations

import click

from snapsim import __version__
from snapsim.commands.capture import capture_cmd
from snapsim.commands.compare import compare_cmd
from snapsim.commands.factor import factor_cmd
from snapsim.commands.info import info_cmd, render_cmd


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="snapsim")
def main() -> None:
    """snapsim: scale-aware visual similarity for screenshots."""


main.add_command(compare_cmd, name="compare")
main.add_command(factor_cmd, name="factor")
main.add_command(info_cmd, name="info")
main.add_command(render_cmd, name="render")
main.add_command(capture_cmd, name="capture")


if __name__ == "__main__":
    main()
