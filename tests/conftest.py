# conftest.py
from __future__ import annotations

import io
import sys

import pytest
from click.testing import Result

_seen_results = []


def _track_result_init(self, *args, **kwargs):
    _original_result_init(self, *args, **kwargs)
    _seen_results.append(self)


_original_result_init = Result.__init__


def pytest_configure(config):
    Result.__init__ = _track_result_init


def pytest_runtest_makereport(item, call):
    if call.when == "call" and call.excinfo:
        for result in _seen_results:
            if not isinstance(result, Result):
                continue
            if result.output:
                print("\n[CliRunner Output (combined)]", file=sys.stderr)
                print(result.output, file=sys.stderr)
        _seen_results.clear()


class ChunkedStream:
    """Non-seekable readable stream handing out at most `chunk` bytes per read()."""

    def __init__(self, data: bytes, chunk: int = 4, fail_after: int | None = None):
        self._data = io.BytesIO(data)
        self._chunk = chunk
        self._fail_after = fail_after
        self.reads = 0
        self.close_calls = 0

    def read(self, n: int = -1) -> bytes:
        if self._fail_after is not None and self.reads >= self._fail_after:
            raise OSError("simulated read failure")
        self.reads += 1
        return self._data.read(min(n, self._chunk))

    def close(self) -> None:
        self.close_calls += 1


class FailingCloseStream(ChunkedStream):
    def close(self) -> None:
        self.close_calls += 1
        raise OSError("simulated close failure")


@pytest.fixture
def chunked_stream():
    return ChunkedStream


@pytest.fixture
def failing_close_stream():
    return FailingCloseStream


@pytest.fixture
def ten_lines() -> bytes:
    return b"".join(f"line{i}\n".encode() for i in range(1, 11))
