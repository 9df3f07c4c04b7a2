#!/usr/bin/env python3
# tab-width:4

"""
Cooperative, one-way cancellation for line readers.
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Callable
from typing import Any
from typing import Protocol

__all__ = [
    "CancellationToken",
    "cancellation_check",
    "ensure_token",
    "release_quietly",
]


class Releasable(Protocol):
    def release(self) -> None: ...


class CancellationToken:
    """
    A flag that goes from "unset" to "set" exactly once.

    cancel() may be called from any thread; readers observe it at their next
    checkpoint (before a chunk pull or a boundary scan) and stop there.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    # AbortController spelling
    abort = cancel

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def __repr__(self) -> str:
        return f"<CancellationToken cancelled={self.cancelled}>"


def ensure_token(controller: Any) -> CancellationToken:
    if isinstance(controller, CancellationToken):
        return controller
    return CancellationToken()


def release_quietly(source: Releasable) -> None:
    try:
        source.release()
    except Exception as e:
        print(
            f"Warning: failed to release line source {source!r}: {e}",
            file=sys.stderr,
        )


def cancellation_check(
    source: Releasable,
    check_cancelled: Callable[[], bool],
) -> Callable[[], bool]:
    """
    Build the predicate a splitter evaluates at each checkpoint.

    When `check_cancelled()` returns True the source is released (failures
    are reported on stderr, not raised) and the predicate returns True.
    """

    def _check() -> bool:
        if check_cancelled():
            release_quietly(source)
            return True
        return False

    return _check
