"""Synthetic hover detection.

A hover is a run of mouse samples that stays inside a small box for at least
``min_duration_ms``. Interaction events (clicks, scrolls, typing, navigation)
break the run: a hover never spans a boundary timestamp.
"""

from __future__ import annotations

import bisect
import logging
from typing import Iterable, List, Sequence

import numpy as np

from autoframe.geometry import Size
from autoframe.schemas import HoverEvent, MouseEvent

logger = logging.getLogger(__name__)

HOVER_MIN_DURATION_MS = 1000
HOVER_BOX_RATIO = 0.1


def hover_box_size(input_size: Size, ratio: float = HOVER_BOX_RATIO) -> float:
    return max(input_size.width, input_size.height) * ratio


def find_hover_events(
    samples: Iterable[MouseEvent],
    boundaries: Iterable[int],
    input_size: Size,
    min_duration_ms: int = HOVER_MIN_DURATION_MS,
    box_ratio: float = HOVER_BOX_RATIO,
) -> List[HoverEvent]:
    positions: Sequence[MouseEvent] = sorted(samples, key=lambda sample: sample.timestamp)
    stops = sorted(boundaries)
    box_size = hover_box_size(input_size, box_ratio)
    hovers: List[HoverEvent] = []

    i = 0
    while i < len(positions):
        start = positions[i]
        # First boundary strictly after this sample.
        boundary_idx = bisect.bisect_right(stops, start.timestamp)
        next_boundary = stops[boundary_idx] if boundary_idx < len(stops) else float("inf")
        if start.timestamp + min_duration_ms >= next_boundary:
            i += 1
            continue

        min_x = max_x = start.x
        min_y = max_y = start.y
        j = i
        while j < len(positions):
            sample = positions[j]
            if sample.timestamp >= next_boundary:
                break
            lo_x, hi_x = min(min_x, sample.x), max(max_x, sample.x)
            lo_y, hi_y = min(min_y, sample.y), max(max_y, sample.y)
            if hi_x - lo_x > box_size or hi_y - lo_y > box_size:
                break
            min_x, max_x, min_y, max_y = lo_x, hi_x, lo_y, hi_y
            j += 1

        valid_end = j - 1
        if positions[valid_end].timestamp - start.timestamp < min_duration_ms:
            i += 1
            continue

        window = positions[i : valid_end + 1]
        center = np.mean([(sample.x, sample.y) for sample in window], axis=0)
        hovers.append(
            HoverEvent(
                timestamp=start.timestamp,
                end_time=positions[valid_end].timestamp,
                x=float(center[0]),
                y=float(center[1]),
            )
        )
        i = valid_end + 1

    logger.debug("Detected %d hover(s) from %d mouse sample(s)", len(hovers), len(positions))
    return hovers
