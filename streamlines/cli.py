#!/usr/bin/env python3
# tab-width:4

# pylint: disable=too-many-arguments              # [R0913] oo many arguments (13/10) [R0913]
# pylint: disable=too-many-positional-arguments   # [R0917] oo many positional arguments [R0917]
# pylint: disable=invalid-name                    # [C0103] single letter var names, name too descriptive(!)

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import click

from .splitter import DEFAULT_ENCODING
from .streamlines import readline
from .streamlines import readline_around
from .streamlines import readline_around_backwards
from .streamlines import readline_backwards
from .validation import ValidationError
from .window import DEFAULT_HALF_WIDTH

# =============================================================================
# Click CLI setup
# =============================================================================


@click.group(
    context_settings={"show_default": True, "max_content_width": 272},
    no_args_is_help=True,
)
def cli() -> None:
    pass


def click_add_options(options):
    def _add_options(func):
        for option in reversed(options):
            func = option(func)
        return func

    return _add_options


CLICK_GLOBAL_OPTIONS = [
    click.argument(
        "path",
        type=click.Path(
            path_type=Path,
            allow_dash=True,
            dir_okay=False,
            exists=True,
        ),
    ),
    click.option(
        "--backwards",
        is_flag=True,
        help="Read from the last line to the first. PATH must be a regular file.",
    ),
    click.option(
        "--encoding",
        default=DEFAULT_ENCODING,
        help="Text encoding of the input.",
    ),
]


def open_input(path: Path) -> Any:
    if str(path) == "-":
        return click.get_binary_stream("stdin")
    return path


def format_size(size: int | None) -> str:
    return "?" if size is None else str(size)


@cli.command("lines")
@click_add_options(CLICK_GLOBAL_OPTIONS)
@click.option(
    "--max-lines",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many lines.",
)
@click.option(
    "--show-progress",
    is_flag=True,
    help="Prefix each line with its line number and bytes read / total size.",
)
def lines_command(
    path: Path,
    backwards: bool,
    encoding: str,
    max_lines: None | int,
    show_progress: bool,
):
    """Print the lines of PATH ('-' for stdin) without loading it into memory."""

    reader = readline_backwards if backwards else readline
    try:
        controller, lines = reader(open_input(path), encoding)
    except ValidationError as e:
        raise click.ClickException(e.cli_msg or str(e)) from e
    except LookupError as e:
        raise click.ClickException(f"Unknown encoding: {encoding}") from e
    except OSError as e:
        raise click.ClickException(f"Failed to open {path}: {e}") from e

    count = 0
    with lines:
        for record in lines:
            if show_progress:
                click.echo(
                    f"{record.line_no}\t{record.bytes_read}/{format_size(record.size)}\t{record.text}"
                )
            else:
                click.echo(record.text)
            count += 1
            if max_lines is not None and count >= max_lines:
                controller.cancel()


@cli.command("around")
@click_add_options(CLICK_GLOBAL_OPTIONS)
@click.argument("pattern", type=str)
@click.option(
    "--before",
    "-B",
    type=click.IntRange(min=0),
    default=2,
    help="Lines of context before each match.",
)
@click.option(
    "--after",
    "-A",
    type=click.IntRange(min=0),
    default=2,
    help="Lines of context after each match.",
)
@click.option(
    "--half-width",
    type=click.IntRange(min=1),
    default=DEFAULT_HALF_WIDTH,
    help="Lines buffered on each side of the current line (never less than 10).",
)
def around_command(
    path: Path,
    backwards: bool,
    encoding: str,
    pattern: str,
    before: int,
    after: int,
    half_width: int,
):
    """Print every line of PATH containing PATTERN with the lines around it."""

    reader = readline_around_backwards if backwards else readline_around
    try:
        _controller, lines_around, lines = reader(
            open_input(path), half_width, encoding
        )
    except ValidationError as e:
        raise click.ClickException(e.cli_msg or str(e)) from e
    except LookupError as e:
        raise click.ClickException(f"Unknown encoding: {encoding}") from e
    except OSError as e:
        raise click.ClickException(f"Failed to open {path}: {e}") from e

    if max(before, after) > lines.half_width:
        lines.close()
        raise click.ClickException(
            f"--before and --after must not exceed --half-width ({lines.half_width})"
        )

    first = True
    with lines:
        for record in lines:
            if pattern not in record.text:
                continue
            if not first:
                click.echo("--")
            first = False
            for item in lines_around(-before, after):
                marker = ":" if item.line_no == record.line_no else "-"
                click.echo(f"{item.line_no}{marker}{item.text}")


if __name__ == "__main__":
    cli.main(args=sys.argv[1:], standalone_mode=True)
