from __future__ import annotations

from datetime import time

DAY_SECONDS = 24 * 3600


def _seconds(value: time) -> int:
    return value.hour * 3600 + value.minute * 60 + value.second


def span_seconds(start: time | None, end: time | None) -> int:
    """Length of [start, end) in seconds; an end before start wraps past midnight."""
    if start is None or end is None:
        return 0
    diff = _seconds(end) - _seconds(start)
    if diff < 0:
        diff += DAY_SECONDS
    return diff


def loading_time_seconds(
    work_start: time,
    work_end: time,
    breaks: list[tuple[time | None, time | None]] | tuple = (),
) -> int:
    """Working span minus breaks, never below zero."""
    total = span_seconds(work_start, work_end)
    for break_start, break_end in breaks:
        if break_start is None or break_end is None:
            continue
        total -= span_seconds(break_start, break_end)
    return max(0, total)


def shift_loading_time(shift) -> int:
    return loading_time_seconds(
        shift.work_start,
        shift.work_end,
        [
            (shift.break1_start, shift.break1_end),
            (shift.break2_start, shift.break2_end),
            (shift.break3_start, shift.break3_end),
        ],
    )


def format_hhmm(value: time | None) -> str | None:
    if value is None:
        return None
    return value.strftime("%H:%M")
