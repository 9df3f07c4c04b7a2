#!/usr/bin/env python3
# -*- coding: utf8 -*-
# tab-width:4

# pylint: disable=invalid-name                    # [C0103] single letter var names, name too descriptive(!)
# pylint: disable=redefined-builtin               # [W0622] input

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .cancellation import CancellationToken
from .cancellation import ensure_token
from .splitter import DEFAULT_ENCODING
from .splitter import LineSplitter
from .splitter import readline_from_blob_backwards
from .splitter import readline_from_blob_forwards
from .splitter import readline_from_stream
from .window import DEFAULT_HALF_WIDTH
from .window import LineWindow

__all__ = [
    "readline",
    "readline_forwards",
    "readline_backwards",
    "readline_around",
    "readline_around_forwards",
    "readline_around_backwards",
]

Reader = Callable[..., tuple]


def readline(
    input: Any,
    encoding: str = DEFAULT_ENCODING,
    controller: CancellationToken | None = None,
    *,
    size: int | None = None,
    errors: str = "replace",
) -> tuple[CancellationToken, LineSplitter]:
    """
    Read lines top to bottom from a response, a readable stream or a blob.

    Parameters:
        input: httpx.Response / requests.Response, a readable stream (or any
            iterable of byte chunks), or a blob (bytes-like, pathlib.Path,
            seekable binary file object).
        encoding (str): Text encoding of the lines (default: utf-8).
        controller (CancellationToken | None): Reuse an existing token,
            otherwise a new one is created.
        size (int | None): Total size of a generic stream, if known.
        errors (str): Decode error policy (default: "replace").

    Returns:
        tuple[CancellationToken, LineSplitter]: cancel() the token to stop
        reading, iterate the splitter for
        (bytes_read, size, line_no, line, origin) records.

    Raises:
        UnsupportedInputKind: If `input` is none of the accepted shapes.

    Example:
        >>> controller, lines = readline(Path("/var/log/messages"))
        >>> for bytes_read, size, line_no, line, origin in lines:
        ...     if line_no >= 8:
        ...         controller.cancel()

    Note:
        - A Path or bytes object can be read any number of times. A response
          or stream is consumed by the first reader; read it again with a
          fresh object.
    """
    token = ensure_token(controller)
    lines = readline_from_stream(
        input,
        encoding,
        lambda: token.cancelled,
        size=size,
        errors=errors,
    )
    return token, lines


def readline_forwards(
    input: Any,
    encoding: str = DEFAULT_ENCODING,
    controller: CancellationToken | None = None,
    *,
    errors: str = "replace",
) -> tuple[CancellationToken, LineSplitter]:
    """Read lines top to bottom from a blob, see readline()."""
    token = ensure_token(controller)
    lines = readline_from_blob_forwards(
        input,
        encoding,
        lambda: token.cancelled,
        errors=errors,
    )
    return token, lines


def readline_backwards(
    input: Any,
    encoding: str = DEFAULT_ENCODING,
    controller: CancellationToken | None = None,
    *,
    errors: str = "replace",
) -> tuple[CancellationToken, LineSplitter]:
    """Read lines bottom to top from a blob. Line numbers count down from -1."""
    token = ensure_token(controller)
    lines = readline_from_blob_backwards(
        input,
        encoding,
        lambda: token.cancelled,
        errors=errors,
    )
    return token, lines


def _readline_around(
    impl: Reader,
    input: Any,
    half_width: Any = DEFAULT_HALF_WIDTH,
    encoding: str = DEFAULT_ENCODING,
    controller: CancellationToken | None = None,
    **kwargs: Any,
) -> tuple[CancellationToken, Callable[..., list], LineWindow]:
    token, lines = impl(input, encoding, controller, **kwargs)
    window = LineWindow(
        lines,
        half_width=half_width,
        is_cancelled=lambda: token.cancelled,
    )
    return token, window.lines_around, window


def readline_around(
    input: Any,
    half_width: Any = DEFAULT_HALF_WIDTH,
    encoding: str = DEFAULT_ENCODING,
    controller: CancellationToken | None = None,
    *,
    size: int | None = None,
    errors: str = "replace",
) -> tuple[CancellationToken, Callable[..., list], LineWindow]:
    """
    readline() with a sliding window of up to `half_width` lines on each side
    of the current one (half_width is never less than 10).

    Returns:
        tuple[CancellationToken, Callable, LineWindow]: the token, the
        lines_around(before, after) query and the iterator.

    Example:
        >>> controller, lines_around, lines = readline_around(path, 3)
        >>> for bytes_read, size, line_no, line, origin in lines:
        ...     context = lines_around(-1, 1)
        ...     print(line_no, [item.line_no for item in context])
    """
    return _readline_around(
        readline,
        input,
        half_width,
        encoding,
        controller,
        size=size,
        errors=errors,
    )


def readline_around_forwards(
    input: Any,
    half_width: Any = DEFAULT_HALF_WIDTH,
    encoding: str = DEFAULT_ENCODING,
    controller: CancellationToken | None = None,
    *,
    errors: str = "replace",
) -> tuple[CancellationToken, Callable[..., list], LineWindow]:
    return _readline_around(
        readline_forwards,
        input,
        half_width,
        encoding,
        controller,
        errors=errors,
    )


def readline_around_backwards(
    input: Any,
    half_width: Any = DEFAULT_HALF_WIDTH,
    encoding: str = DEFAULT_ENCODING,
    controller: CancellationToken | None = None,
    *,
    errors: str = "replace",
) -> tuple[CancellationToken, Callable[..., list], LineWindow]:
    return _readline_around(
        readline_backwards,
        input,
        half_width,
        encoding,
        controller,
        errors=errors,
    )
