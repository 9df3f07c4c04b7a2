#!/usr/bin/env python3
# -*- coding: utf8 -*-
# tab-width:4

# pylint: disable=invalid-name                    # [C0103] single letter var names, name too descriptive(!)
# pylint: disable=too-many-instance-attributes    # [R0902]

from __future__ import annotations

import codecs
import enum
import os
from collections.abc import Callable
from typing import Any
from typing import NamedTuple

from .cancellation import cancellation_check
from .cancellation import release_quietly
from .sources import SLICE_BLOB_CHUNK_SIZE
from .sources import BlobRangeChunkSource
from .sources import StreamChunkSource
from .sources import open_blob
from .sources import open_chunk_source

__all__ = [
    "DEFAULT_ENCODING",
    "Direction",
    "State",
    "LineRecord",
    "TaggedLineRecord",
    "LineSplitter",
    "strip_line_terminator",
    "readline_from_stream",
    "readline_from_blob_forwards",
    "readline_from_blob_backwards",
]

DEFAULT_ENCODING = os.environ.get("STREAMLINES_ENCODING", "utf-8")

NL = b"\n"
CR = b"\r"


class Direction(enum.Enum):
    FORWARD = 1
    BACKWARD = -1


class State(enum.Enum):
    FILLING = "filling"
    EMITTING = "emitting"
    DONE = "done"


class LineRecord(NamedTuple):
    bytes_read: int
    size: int | None
    line_no: int
    text: str


class TaggedLineRecord(NamedTuple):
    bytes_read: int
    size: int | None
    line_no: int
    text: str
    origin: str


def strip_line_terminator(raw: bytes) -> bytes:
    # only "\n" or "\r\n" is a terminator, a lone trailing "\r" stays
    if raw.endswith(NL):
        raw = raw[:-1]
        if raw.endswith(CR):
            raw = raw[:-1]
    return raw


def _never() -> bool:
    return False


class LineSplitter:
    """
    Lazy, non-restartable iterator of lines over a chunk source.

    One boundary/carry algorithm serves both directions:

    - FORWARD: chunks arrive in byte order, each chunk is scanned left to
      right, bytes after the last "\\n" are appended to the pending tail.
    - BACKWARD: chunks arrive from the end of the blob toward its start,
      each chunk is scanned right to left, bytes before the first "\\n" are
      prepended to the pending tail.

    States: FILLING (needs the next chunk), EMITTING (scanning the current
    chunk), DONE. The cancellation predicate is evaluated before every pull
    and before every scan step. The source is released exactly once, on
    exhaustion, cancellation, close() or error.
    """

    def __init__(
        self,
        source: StreamChunkSource | BlobRangeChunkSource,
        *,
        direction: Direction = Direction.FORWARD,
        encoding: str = DEFAULT_ENCODING,
        errors: str = "replace",
        check_cancelled: Callable[[], bool] | None = None,
        origin: str | None = None,
    ):
        self._source = source
        self._direction = direction
        self._encoding = encoding
        self._errors = errors
        self._is_cancelled = cancellation_check(source, check_cancelled or _never)
        self._origin = origin
        self._state = State.FILLING
        self._chunk = b""
        self._start = 0  # forward: first unscanned byte
        self._end = 0  # backward: exclusive end of the next line
        self._search_end = 0  # backward: exclusive bound for the next rfind
        self._pending = bytearray()
        self.bytes_read = 0
        self.line_no = 0
        self.size = source.size

    def __repr__(self) -> str:
        return (
            f"<LineSplitter {self._direction.name.lower()} state={self._state.name}"
            f" line_no={self.line_no} bytes_read={self.bytes_read} size={self.size}>"
        )

    def __iter__(self) -> LineSplitter:
        return self

    def __next__(self) -> LineRecord | TaggedLineRecord:
        try:
            record = self._step()
        except Exception:
            self._finish()
            raise
        if record is None:
            raise StopIteration
        return record

    def __enter__(self) -> LineSplitter:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def done(self) -> bool:
        return self._state is State.DONE

    def close(self) -> None:
        """Stop the iteration and release the underlying source."""
        self._finish()

    def _finish(self) -> None:
        self._state = State.DONE
        self._chunk = b""
        release_quietly(self._source)

    def _step(self) -> LineRecord | TaggedLineRecord | None:
        while self._state is not State.DONE:
            if self._is_cancelled():
                self._finish()
                return None

            if self._state is State.FILLING:
                chunk = self._source.pull()
                if chunk is None:
                    # exhausted: whatever is pending is the line at the far end
                    self._finish()
                    if self._pending and not self._is_cancelled():
                        raw = bytes(self._pending)
                        self._pending.clear()
                        return self._emit(raw)
                    return None
                self._load(chunk)
                continue

            if self._direction is Direction.FORWARD:
                raw = self._scan_forward()
            else:
                raw = self._scan_backward()
            # b"" is the empty region after a terminator that ends the blob
            if raw:
                return self._emit(raw)
        return None

    def _load(self, chunk: bytes) -> None:
        self._chunk = chunk
        self._start = 0
        self._end = self._search_end = len(chunk)
        self._state = State.EMITTING

    def _scan_forward(self) -> bytes | None:
        chunk = self._chunk
        pos = chunk.find(NL, self._start)
        if pos == -1:
            self._pending += chunk[self._start :]
            self._chunk = b""
            self._state = State.FILLING
            return None
        raw = chunk[self._start : pos + 1]
        if self._pending:
            raw = bytes(self._pending) + raw
            self._pending.clear()
        self._start = pos + 1
        return raw

    def _scan_backward(self) -> bytes | None:
        chunk = self._chunk
        pos = chunk.rfind(NL, 0, self._search_end)
        if pos == -1:
            self._pending[:0] = chunk[: self._end]
            self._chunk = b""
            self._state = State.FILLING
            return None
        # the pending tail is found earlier in traversal but lies later in the blob
        raw = chunk[pos + 1 : self._end]
        if self._pending:
            raw = raw + bytes(self._pending)
            self._pending.clear()
        self._end = pos + 1
        self._search_end = pos
        return raw

    def _emit(self, raw: bytes) -> LineRecord | TaggedLineRecord:
        self.bytes_read += len(raw)
        self.line_no += self._direction.value
        text = strip_line_terminator(raw).decode(self._encoding, self._errors)
        if self._origin is None:
            return LineRecord(self.bytes_read, self.size, self.line_no, text)
        return TaggedLineRecord(
            self.bytes_read, self.size, self.line_no, text, self._origin
        )


def readline_from_stream(
    input: Any,
    encoding: str = DEFAULT_ENCODING,
    check_aborted: Callable[[], bool] | None = None,
    *,
    size: int | None = None,
    errors: str = "replace",
    chunk_size: int = SLICE_BLOB_CHUNK_SIZE,
) -> LineSplitter:
    """
    Read lines top to bottom from a response, a readable stream or a blob.

    Parameters:
        input: httpx/requests response, readable stream or iterable of byte
            chunks, or a blob (bytes-like, pathlib.Path, seekable binary file).
        encoding (str): Text encoding of the lines.
        check_aborted (Callable[[], bool] | None): Polled at every checkpoint,
            returning True stops the iteration and releases the input.
        size (int | None): Total size of a generic stream, if known.
        errors (str): Decode error policy passed to bytes.decode().
        chunk_size (int): Read size used for blobs and read(n) streams.

    Returns:
        LineSplitter: yields TaggedLineRecord(bytes_read, size, line_no, text, origin).

    Raises:
        UnsupportedInputKind: If the input is none of the accepted shapes.
        LookupError: If `encoding` is unknown.

    Example:
        >>> for bytes_read, size, line_no, line, origin in readline_from_stream(b"abc\\ndfg"):
        ...     print(line_no, line)
        1 abc
        2 dfg
    """
    codecs.lookup(encoding)
    source, origin = open_chunk_source(input, size=size, chunk_size=chunk_size)
    return LineSplitter(
        source,
        direction=Direction.FORWARD,
        encoding=encoding,
        errors=errors,
        check_cancelled=check_aborted,
        origin=origin,
    )


def readline_from_blob_forwards(
    input: Any,
    encoding: str = DEFAULT_ENCODING,
    check_aborted: Callable[[], bool] | None = None,
    *,
    errors: str = "replace",
    chunk_size: int = SLICE_BLOB_CHUNK_SIZE,
) -> LineSplitter:
    """Read lines top to bottom from a blob, one fixed-size slice at a time."""
    codecs.lookup(encoding)
    blob = open_blob(input)
    return LineSplitter(
        BlobRangeChunkSource(blob, chunk_size=chunk_size),
        direction=Direction.FORWARD,
        encoding=encoding,
        errors=errors,
        check_cancelled=check_aborted,
    )


def readline_from_blob_backwards(
    input: Any,
    encoding: str = DEFAULT_ENCODING,
    check_aborted: Callable[[], bool] | None = None,
    *,
    errors: str = "replace",
    chunk_size: int = SLICE_BLOB_CHUNK_SIZE,
) -> LineSplitter:
    """
    Read lines bottom to top from a blob.

    The last line is numbered -1, the one before it -2, and so on.
    bytes_read still counts up: it is the number of bytes consumed so far
    from the end of the blob.
    """
    codecs.lookup(encoding)
    blob = open_blob(input)
    return LineSplitter(
        BlobRangeChunkSource(blob, chunk_size=chunk_size, descending=True),
        direction=Direction.BACKWARD,
        encoding=encoding,
        errors=errors,
        check_cancelled=check_aborted,
    )
