#!/usr/bin/env python3
from __future__ import annotations

import pytest

import streamlines.window
from streamlines import InvalidRange
from streamlines import LineWindow
from streamlines import readline_around
from streamlines import readline_around_backwards
from streamlines import readline_around_forwards
from streamlines.splitter import State
from streamlines.window import DEFAULT_HALF_WIDTH
from streamlines.window import normalize_half_width


@pytest.fixture
def no_floor(monkeypatch):
    monkeypatch.setattr(streamlines.window, "MIN_HALF_WIDTH", 1)


def line_nos(records) -> list[int]:
    return [record.line_no for record in records]


def test_window_bounds_half_width_two(no_floor, ten_lines):
    _controller, lines_around, lines = readline_around_forwards(ten_lines, 2)
    assert lines.half_width == 2
    for _ in range(5):
        current = next(lines)
    assert current.line_no == 5
    assert line_nos(lines_around(-2, 2)) == [3, 4, 5, 6, 7]
    assert line_nos(lines_around(-10, 10)) == [3, 4, 5, 6, 7]


def test_window_shrinks_at_both_ends(no_floor, ten_lines):
    _controller, lines_around, lines = readline_around_forwards(ten_lines, 2)
    first = next(lines)
    assert first.line_no == 1
    assert line_nos(lines_around(-2, 2)) == [1, 2, 3]
    at_last = None
    for record in lines:
        if record.line_no == 10:
            at_last = line_nos(lines_around(-2, 2))
    assert at_last == [8, 9, 10]


def test_buffer_never_exceeds_two_k_plus_one(no_floor, ten_lines):
    _controller, lines_around, lines = readline_around_forwards(ten_lines, 2)
    seen = []
    for record in lines:
        seen.append(record.line_no)
        assert lines.buffered <= 5
        assert len(lines_around()) <= 5
        assert lines.current == record
    assert seen == list(range(1, 11))


@pytest.mark.parametrize(
    "before,after,expected",
    [
        (-1, -1, [4]),
        (-1, 0, [4, 5]),
        (-1, 1, [4, 5, 6]),
        (0, 1, [5, 6]),
        (1, 1, [6]),
        (0, None, [5, 6, 7]),
        (1, None, [6, 7]),
        (-1, None, [4, 5, 6, 7]),
        (None, None, [3, 4, 5, 6, 7]),
        (None, 0, [3, 4, 5]),
    ],
)
def test_lines_around_ranges(no_floor, ten_lines, before, after, expected):
    _controller, lines_around, lines = readline_around_forwards(ten_lines, 2)
    for _ in range(5):
        next(lines)
    assert line_nos(lines_around(before, after)) == expected


def test_invalid_range_does_not_disturb_iteration(no_floor, ten_lines):
    _controller, lines_around, lines = readline_around_forwards(ten_lines, 2)
    next(lines)
    with pytest.raises(InvalidRange, match="Invalid range"):
        lines_around(1, -1)
    assert next(lines).line_no == 2


def test_half_width_floor(ten_lines):
    _controller, _lines_around, lines = readline_around_forwards(ten_lines, 3)
    assert lines.half_width == 10


@pytest.mark.parametrize("value", ["3", None, True, [5]])
def test_non_numeric_half_width_uses_floor(value):
    assert normalize_half_width(value) == 10


def test_default_half_width(ten_lines):
    _controller, _lines_around, lines = readline_around(ten_lines)
    assert lines.half_width == DEFAULT_HALF_WIDTH == 30
    assert normalize_half_width(12.7) == 12


def test_short_input_fully_buffered(ten_lines):
    _controller, lines_around, lines = readline_around_forwards(ten_lines)
    next(lines)
    next(lines)
    assert line_nos(lines_around()) == list(range(1, 11))
    assert line_nos(lines_around(-1, 1)) == [1, 2, 3]


def test_backward_window():
    _controller, lines_around, lines = readline_around_backwards(
        b"1abc\n2def\n3hij\n4klm"
    )
    first = next(lines)
    assert (first.line_no, first.text) == (-1, "4klm")
    assert [(r.line_no, r.text) for r in lines_around(-1, 1)] == [
        (-1, "4klm"),
        (-2, "3hij"),
    ]
    second = next(lines)
    assert line_nos(lines_around(-1, 1)) == [-1, -2, -3]
    assert second.text == "3hij"


def test_generic_window_records_carry_origin(ten_lines):
    _controller, _lines_around, lines = readline_around(ten_lines)
    assert {record.origin for record in lines} == {"blob"}


def test_cancel_window(no_floor, chunked_stream, ten_lines):
    stream = chunked_stream(ten_lines, chunk=4)
    controller, lines_around, lines = readline_around(stream, 2)
    seen = []
    for record in lines:
        seen.append(record.line_no)
        if record.line_no == 4:
            controller.cancel()
    assert seen == [1, 2, 3, 4]
    assert stream.close_calls == 1
    assert list(lines) == []


def test_window_over_plain_iterable():
    window = LineWindow(range(100), half_width=10)
    values = []
    for value in window:
        values.append(value)
        if value == 50:
            assert window.lines_around(-10, 10) == list(range(40, 61))
            assert window.lines_around(-11, 11) == list(range(40, 61))
    assert values == list(range(100))


def test_window_context_manager_closes_reader(chunked_stream, ten_lines):
    stream = chunked_stream(ten_lines, chunk=4)
    _controller, _lines_around, lines = readline_around(stream)
    with lines:
        next(lines)
    assert stream.close_calls == 1
    assert list(lines) == []


def test_window_and_reader_share_state_enum(ten_lines):
    _controller, _lines_around, lines = readline_around_forwards(ten_lines)
    assert f"state={State.FILLING.name}" in repr(lines)
    assert len(list(lines)) == 10
    assert f"state={State.DONE.name}" in repr(lines)
    assert f"state={State.DONE.name}" in repr(lines._records)
    assert lines._records.done
