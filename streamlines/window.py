#!/usr/bin/env python3
# -*- coding: utf8 -*-
# tab-width:4

"""
Sliding window of already decoded lines around the current line.
"""

from __future__ import annotations

import numbers
from collections.abc import Callable
from collections.abc import Iterable
from typing import Any
from typing import Generic
from typing import TypeVar

from .splitter import State
from .validation import InvalidRange

__all__ = [
    "MIN_HALF_WIDTH",
    "DEFAULT_HALF_WIDTH",
    "LineWindow",
    "normalize_half_width",
]

MIN_HALF_WIDTH = 10
DEFAULT_HALF_WIDTH = 30

T = TypeVar("T")


def normalize_half_width(half_width: Any) -> int:
    if isinstance(half_width, bool) or not isinstance(half_width, numbers.Real):
        return MIN_HALF_WIDTH
    return max(int(half_width), MIN_HALF_WIDTH)


class LineWindow(Generic[T]):
    """
    Iterate over `records` while keeping up to `half_width` records on each
    side of the current one.

    Before the first record is handed out, half_width + 1 records are read
    ahead. After each record the window reads one more; the cursor moves
    right until it sits half_width records from the head, after that the
    oldest record is dropped instead. At most 2 * half_width + 1 records are
    buffered whenever a record is handed out.

    Example:
        >>> window = LineWindow(readline_from_blob_forwards(path), half_width=3)
        >>> for bytes_read, size, line_no, line in window:
        ...     context = window.lines_around(-1, 1)
    """

    def __init__(
        self,
        records: Iterable[T],
        *,
        half_width: Any = DEFAULT_HALF_WIDTH,
        is_cancelled: Callable[[], bool] | None = None,
    ):
        self._records = iter(records)
        self.half_width = normalize_half_width(half_width)
        self._is_cancelled = is_cancelled
        self._buffer: list[T] = []
        self._cursor = 0
        self._state = State.FILLING

    def __repr__(self) -> str:
        return (
            f"<LineWindow half_width={self.half_width} state={self._state.name}"
            f" cursor={self._cursor} buffered={len(self._buffer)}>"
        )

    def __iter__(self) -> LineWindow[T]:
        return self

    def __next__(self) -> T:
        try:
            if self._state is State.FILLING:
                self._fill()
                self._state = State.EMITTING
            elif self._state is State.EMITTING:
                self._advance()
        except Exception:
            self._state = State.DONE
            raise

        if self._state is State.DONE or self._cursor >= len(self._buffer):
            self._state = State.DONE
            raise StopIteration
        if self._is_cancelled is not None and self._is_cancelled():
            self.close()
            raise StopIteration
        return self._buffer[self._cursor]

    def __enter__(self) -> LineWindow[T]:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def current(self) -> T | None:
        if self._cursor < len(self._buffer):
            return self._buffer[self._cursor]
        return None

    @property
    def buffered(self) -> int:
        return len(self._buffer)

    def close(self) -> None:
        self._state = State.DONE
        close = getattr(self._records, "close", None)
        if close is not None:
            close()

    def _pull(self) -> T | None:
        return next(self._records, None)

    def _fill(self) -> None:
        while len(self._buffer) < self.half_width + 1:
            record = self._pull()
            if record is None:
                break
            self._buffer.append(record)

    def _advance(self) -> None:
        record = self._pull()
        if self._cursor < self.half_width:
            self._cursor += 1
        else:
            del self._buffer[0]
        if record is not None:
            self._buffer.append(record)

    def lines_around(
        self,
        before: int | None = None,
        after: int | None = None,
    ) -> list[T]:
        """
        Buffered records from `before` to `after` relative to the current one.

        lines_around(-1, -1) -> [previous]
        lines_around(-1, 0)  -> [previous, current]
        lines_around(-1, 1)  -> [previous, current, next]
        lines_around(1, 1)   -> [next]
        lines_around(0)      -> [current, ..., last buffered]
        lines_around()       -> every buffered record

        Both ends are clamped to the buffer, so nothing further than
        half_width away from the current record is ever returned.

        Raises:
            InvalidRange: If after < before.
        """
        if before is not None and after is not None and after < before:
            raise InvalidRange(f"Invalid range of lines_around: {[before, after]}")
        start = 0 if before is None else max(self._cursor + before, 0)
        end = (
            len(self._buffer)
            if after is None
            else min(self._cursor + after + 1, len(self._buffer))
        )
        return self._buffer[start:end]
