"""Conversions between Source, Timeline and Output time.

Timeline time includes the gaps left by cuts, Output time is the gapless time
of the exported video. Source time is the raw recording clock, placed on the
timeline at a fixed offset. Every mapping returns ``None`` when the time falls
in a cut gap or outside the kept windows.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from autoframe.schemas import OutputWindow


def map_timeline_to_output_time(timeline_ms: int, windows: Sequence[OutputWindow]) -> Optional[int]:
    accumulator = 0
    for window in windows:
        if window.start_ms <= timeline_ms < window.end_ms:
            return accumulator + (timeline_ms - window.start_ms)
        if timeline_ms < window.start_ms:
            return None
        accumulator += window.end_ms - window.start_ms
    return None


def map_output_to_timeline_time(output_ms: int, windows: Sequence[OutputWindow]) -> Optional[int]:
    if output_ms < 0:
        return None
    accumulator = 0
    for window in windows:
        duration = window.end_ms - window.start_ms
        if output_ms < accumulator + duration:
            return window.start_ms + (output_ms - accumulator)
        accumulator += duration
    return None


def map_source_to_output_time(
    source_ms: int, windows: Sequence[OutputWindow], timeline_offset_ms: int
) -> Optional[int]:
    return map_timeline_to_output_time(source_ms + timeline_offset_ms, windows)


def map_output_to_source_time(
    output_ms: int, windows: Sequence[OutputWindow], timeline_offset_ms: int
) -> Optional[int]:
    timeline_ms = map_output_to_timeline_time(output_ms, windows)
    if timeline_ms is None:
        return None
    return timeline_ms - timeline_offset_ms


def get_output_duration(windows: Sequence[OutputWindow]) -> int:
    return sum(window.end_ms - window.start_ms for window in windows)


def map_source_range_to_output_range(
    start_ms: int,
    end_ms: int,
    windows: Sequence[OutputWindow],
    timeline_offset_ms: int,
) -> Optional[Tuple[int, int]]:
    """Map the half-open source range ``[start_ms, end_ms)`` to Output time.

    The range is cut short at the end of the window holding its start, so a
    range straddling a gap keeps only its first visible part. Returns ``None``
    when the start itself is not visible.
    """
    timeline_start = start_ms + timeline_offset_ms
    timeline_end = end_ms + timeline_offset_ms
    accumulator = 0
    for window in windows:
        if window.start_ms <= timeline_start < window.end_ms:
            output_start = accumulator + (timeline_start - window.start_ms)
            visible_end = min(max(timeline_end, timeline_start), window.end_ms)
            return output_start, output_start + (visible_end - timeline_start)
        if timeline_start < window.start_ms:
            return None
        accumulator += window.end_ms - window.start_ms
    return None


@dataclass(frozen=True)
class TimeMapper:
    timeline_offset_ms: int
    windows: Tuple[OutputWindow, ...]

    def map_timeline_to_output_time(self, timeline_ms: int) -> Optional[int]:
        return map_timeline_to_output_time(timeline_ms, self.windows)

    def map_output_to_timeline_time(self, output_ms: int) -> Optional[int]:
        return map_output_to_timeline_time(output_ms, self.windows)

    def map_source_to_output_time(self, source_ms: int) -> Optional[int]:
        return map_source_to_output_time(source_ms, self.windows, self.timeline_offset_ms)

    def map_output_to_source_time(self, output_ms: int) -> Optional[int]:
        return map_output_to_source_time(output_ms, self.windows, self.timeline_offset_ms)

    def map_source_range_to_output_range(self, start_ms: int, end_ms: int) -> Optional[Tuple[int, int]]:
        return map_source_range_to_output_range(start_ms, end_ms, self.windows, self.timeline_offset_ms)

    def get_output_duration(self) -> int:
        return get_output_duration(self.windows)
