#!/usr/bin/env python3
# -*- coding: utf8 -*-
# tab-width:4

# pylint: disable=invalid-name                    # [C0103] single letter var names, name too descriptive(!)

"""
Chunk sources: turn a response, a readable stream or a blob into a
pull-based producer of byte chunks plus a (possibly unknown) total size.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from collections.abc import Iterable
from collections.abc import Iterator
from pathlib import Path
from typing import Any
from typing import BinaryIO
from typing import cast

from .validation import UnsupportedInputKind

__all__ = [
    "SLICE_BLOB_CHUNK_SIZE",
    "BytesBlob",
    "FileBlob",
    "StreamChunkSource",
    "BlobRangeChunkSource",
    "blob_ranges",
    "open_blob",
    "open_chunk_source",
]

SLICE_BLOB_CHUNK_SIZE = 1024 * 64

ORIGIN_RESPONSE = "response"
ORIGIN_STREAM = "stream"
ORIGIN_BLOB = "blob"


class BytesBlob:
    """Random-access view over an in-memory bytes-like object."""

    def __init__(self, data: bytes | bytearray | memoryview):
        self._view = memoryview(data).cast("B")
        self.size = len(self._view)

    def read_range(self, start: int, end: int) -> bytes:
        return bytes(self._view[start:end])

    def close(self) -> None:
        self._view = memoryview(b"")


class FileBlob:
    """
    Random-access view over a file.

    A `Path` is opened here and closed by `close()`. A caller supplied file
    object is only seeked and read, never closed.
    """

    def __init__(self, file: os.PathLike | BinaryIO):
        if isinstance(file, os.PathLike):
            self._fh = cast(BinaryIO, open(file, "rb", buffering=0))
            self._owned = True
        else:
            self._fh = file
            self._owned = False
        self.size = self._fh.seek(0, os.SEEK_END)

    def read_range(self, start: int, end: int) -> bytes:
        self._fh.seek(start)
        wanted = end - start
        parts = []
        while wanted > 0:
            data = self._fh.read(wanted)
            if not data:
                raise EOFError(
                    f"blob truncated: expected {end - start} bytes at offset {start}"
                )
            parts.append(data)
            wanted -= len(data)
        return b"".join(parts)

    def close(self) -> None:
        if self._owned:
            self._fh.close()


def blob_ranges(size: int, chunk_size: int) -> list[tuple[int, int]]:
    """Ascending [start, end) ranges covering [0, size), the last one possibly shorter."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    ranges = []
    cur = 0
    while cur < size:
        end = min(cur + chunk_size, size)
        ranges.append((cur, end))
        cur = end
    return ranges


class StreamChunkSource:
    """Chunk source over an iterator of byte chunks, pulled in arrival order."""

    def __init__(
        self,
        chunks: Iterator[bytes],
        *,
        size: int | None,
        close: Callable[[], Any] | None = None,
    ):
        self._chunks = chunks
        self._close = close
        self.size = size
        self.released = False

    def pull(self) -> bytes | None:
        for chunk in self._chunks:
            return bytes(chunk)
        return None

    def release(self) -> None:
        if self.released:
            return
        self.released = True
        if self._close is not None:
            self._close()


class BlobRangeChunkSource:
    """
    Chunk source over fixed-size ranges of a blob.

    The ranges are computed up front and each one is read only when pulled,
    in ascending order, or in descending order when `descending` is set.
    """

    def __init__(
        self,
        blob: BytesBlob | FileBlob,
        *,
        chunk_size: int = SLICE_BLOB_CHUNK_SIZE,
        descending: bool = False,
    ):
        self._blob = blob
        self._ranges = blob_ranges(blob.size, chunk_size)
        if not descending:
            self._ranges.reverse()  # pop() from the tail yields ascending ranges
        self.size = blob.size
        self.released = False

    def pull(self) -> bytes | None:
        if not self._ranges:
            return None
        start, end = self._ranges.pop()
        return self._blob.read_range(start, end)

    def release(self) -> None:
        if self.released:
            return
        self.released = True
        self._ranges.clear()
        self._blob.close()


def _is_response(obj: Any) -> bool:
    if not hasattr(obj, "headers"):
        return False
    if hasattr(obj, "iter_bytes") or hasattr(obj, "iter_content"):
        return True
    # http.client.HTTPResponse, as returned by urllib.request.urlopen()
    seekable = getattr(obj, "seekable", None)
    return hasattr(obj, "read") and not (callable(seekable) and seekable() is True)


def _is_blob(obj: Any) -> bool:
    if isinstance(obj, (bytes, bytearray, memoryview, Path, os.PathLike)):
        return True
    seekable = getattr(obj, "seekable", None)
    return hasattr(obj, "read") and callable(seekable) and seekable() is True


def _is_stream(obj: Any) -> bool:
    if isinstance(obj, str):
        return False
    return hasattr(obj, "read") or isinstance(obj, Iterable)


def _content_length(headers: Any) -> int | None:
    value = headers.get("content-length")
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _reject(obj: Any) -> UnsupportedInputKind:
    return UnsupportedInputKind(
        f"unsupported type of input: {type(obj).__name__}",
        cli_msg=f"Cannot read lines from {type(obj).__name__}",
    )


def open_blob(input: Any) -> BytesBlob | FileBlob:
    """Wrap a blob-like input for random access, or raise UnsupportedInputKind."""
    if isinstance(input, (bytes, bytearray, memoryview)):
        return BytesBlob(input)
    if _is_blob(input):
        return FileBlob(input)
    raise _reject(input)


def open_chunk_source(
    input: Any,
    *,
    size: int | None = None,
    chunk_size: int = SLICE_BLOB_CHUNK_SIZE,
) -> tuple[StreamChunkSource, str]:
    """
    Normalize one of the accepted input shapes into a sequential chunk source.

    Parameters:
        input: One of
            - a response (httpx.Response, requests.Response or
              http.client.HTTPResponse), size taken
              from its Content-Length header when present;
            - a blob: bytes-like object, pathlib.Path, or seekable binary
              file object, size always known;
            - a generic stream: non-seekable object with read(n), or any
              iterable of byte chunks, size unknown unless `size` is given.
        size (int | None): Total size for a generic stream, if the caller knows it.
        chunk_size (int): Read size for blobs and read(n) streams.

    Returns:
        tuple[StreamChunkSource, str]: The chunk source and its origin tag
        ("response", "blob" or "stream").

    Raises:
        UnsupportedInputKind: If `input` matches none of the shapes.
    """
    if _is_response(input):
        if hasattr(input, "iter_bytes"):
            chunks = input.iter_bytes(chunk_size)
        elif hasattr(input, "iter_content"):
            chunks = input.iter_content(chunk_size)
        else:
            chunks = iter(lambda: input.read(chunk_size), b"")
        return (
            StreamChunkSource(
                iter(chunks),
                size=_content_length(input.headers),
                close=input.close,
            ),
            ORIGIN_RESPONSE,
        )

    if _is_blob(input):
        blob = open_blob(input)
        ranges = blob_ranges(blob.size, chunk_size)
        return (
            StreamChunkSource(
                (blob.read_range(start, end) for start, end in ranges),
                size=blob.size,
                close=blob.close,
            ),
            ORIGIN_BLOB,
        )

    if _is_stream(input):
        if hasattr(input, "read"):
            chunks = iter(lambda: input.read(chunk_size), b"")
        else:
            chunks = iter(input)
        return (
            StreamChunkSource(
                chunks,
                size=size,
                close=getattr(input, "close", None),
            ),
            ORIGIN_STREAM,
        )

    raise _reject(input)
