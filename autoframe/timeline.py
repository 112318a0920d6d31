from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Sequence

import numpy as np

from autoframe.camera import ViewportMotion
from autoframe.geometry import Rect, Size, full_rect, lerp_rect
from autoframe.schemas import EaseName, OutputWindow
from autoframe.time_mapper import get_output_duration, map_source_to_output_time


@dataclass(frozen=True)
class TimedMotion:
    start_time: int
    end_time: int
    duration_ms: int
    rect: Rect


@dataclass(frozen=True)
class ViewportSample:
    time_ms: int
    rect: Rect


def ease_in_out(t: float) -> float:
    return 2 * t * t if t < 0.5 else -1 + (4 - 2 * t) * t


def ease_in(t: float) -> float:
    return t * t


def ease_out(t: float) -> float:
    return t * (2 - t)


def ease_linear(t: float) -> float:
    return t


EASINGS: Dict[str, Callable[[float], float]] = {
    "linear": ease_linear,
    "ease_in": ease_in,
    "ease_out": ease_out,
    "ease_in_out": ease_in_out,
}


def prepare_motions(
    motions: Iterable[ViewportMotion], windows: Sequence[OutputWindow], timeline_offset_ms: int
) -> List[TimedMotion]:
    """Place motions on the Output axis, ordered by start time.

    Motions arriving inside a cut gap are dropped.
    """
    timed: List[TimedMotion] = []
    for motion in motions:
        end = map_source_to_output_time(motion.source_end_time_ms, windows, timeline_offset_ms)
        if end is None:
            continue
        timed.append(
            TimedMotion(
                start_time=end - motion.duration_ms,
                end_time=end,
                duration_ms=motion.duration_ms,
                rect=motion.rect,
            )
        )
    return sorted(timed, key=lambda motion: motion.start_time)


def viewport_at(
    timed: Sequence[TimedMotion],
    output_time_ms: float,
    output_size: Size,
    ease: EaseName = "ease_in_out",
) -> Rect:
    easing = EASINGS[ease]
    current = full_rect(output_size)
    for idx, motion in enumerate(timed):
        if output_time_ms < motion.start_time:
            return current

        interruption = motion.end_time
        if idx + 1 < len(timed) and timed[idx + 1].start_time < motion.end_time:
            interruption = timed[idx + 1].start_time

        # Progress runs against the full duration so a cut-short motion keeps its curve.
        elapsed = min(output_time_ms, interruption) - motion.start_time
        if motion.duration_ms <= 0:
            progress = 1.0
        else:
            progress = min(max(elapsed / motion.duration_ms, 0.0), 1.0)
        interpolated = lerp_rect(current, motion.rect, easing(progress))

        if output_time_ms <= interruption:
            return interpolated
        current = interpolated
    return current


def get_viewport_state_at_time(
    motions: Iterable[ViewportMotion],
    output_time_ms: float,
    output_size: Size,
    windows: Sequence[OutputWindow],
    timeline_offset_ms: int = 0,
    ease: EaseName = "ease_in_out",
) -> Rect:
    timed = prepare_motions(motions, windows, timeline_offset_ms)
    return viewport_at(timed, output_time_ms, output_size, ease)


def sample_viewports(
    motions: Iterable[ViewportMotion],
    output_size: Size,
    windows: Sequence[OutputWindow],
    timeline_offset_ms: int,
    fps: int,
    ease: EaseName = "ease_in_out",
) -> List[ViewportSample]:
    timed = prepare_motions(motions, windows, timeline_offset_ms)
    duration = get_output_duration(windows)
    times = np.arange(0, duration, 1000.0 / fps) if duration > 0 else np.array([])
    return [
        ViewportSample(time_ms=int(round(t)), rect=viewport_at(timed, float(t), output_size, ease))
        for t in times
    ]
