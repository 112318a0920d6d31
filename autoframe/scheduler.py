"""Turns recorded interaction events into a minimal list of camera motions.

Events arrive in Source time. They are mapped to Output time, enriched with
synthetic hovers, then walked in order while tracking the last viewport. A
motion is emitted only when the event's must-see area leaves the current frame
or, for explicit interactions, when the framing size has to change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence, Tuple

from autoframe.camera import FocusEvent, ViewportMotion, target_viewport
from autoframe.geometry import Rect, full_rect, rects_close, same_size
from autoframe.hover import find_hover_events
from autoframe.schemas import (
    ClickEvent,
    HoverEvent,
    MouseEvent,
    OutputWindow,
    ScrollEvent,
    TypingEvent,
    UrlEvent,
    UserEvent,
    ZoomConfig,
)
from autoframe.time_mapper import (
    get_output_duration,
    map_output_to_source_time,
    map_source_range_to_output_range,
    map_source_to_output_time,
)
from autoframe.view_mapper import ViewMapper

logger = logging.getLogger(__name__)

BOUNDARY_TYPES = (ClickEvent, ScrollEvent, TypingEvent, UrlEvent)
FOCUS_TYPES = (ClickEvent, ScrollEvent, TypingEvent, UrlEvent, HoverEvent)


@dataclass(frozen=True)
class ScheduleState:
    last_viewport: Rect
    motions: Tuple[ViewportMotion, ...] = ()


def to_output_time(
    events: Iterable[UserEvent], windows: Sequence[OutputWindow], timeline_offset_ms: int
) -> List[UserEvent]:
    """Re-time events onto the Output axis, dropping those inside cut gaps."""
    mapped: List[UserEvent] = []
    for event in events:
        if isinstance(event, HoverEvent):
            span = map_source_range_to_output_range(event.timestamp, event.end_time, windows, timeline_offset_ms)
            if span is None:
                continue
            mapped.append(event.model_copy(update={"timestamp": span[0], "end_time": span[1]}))
            continue
        output_ms = map_source_to_output_time(event.timestamp, windows, timeline_offset_ms)
        if output_ms is None:
            continue
        mapped.append(event.model_copy(update={"timestamp": output_ms}))
    return mapped


def detect_hovers(output_events: Sequence[UserEvent], view_mapper: ViewMapper, config: ZoomConfig) -> List[HoverEvent]:
    samples = [event for event in output_events if isinstance(event, MouseEvent)]
    boundaries = [event.timestamp for event in output_events if isinstance(event, BOUNDARY_TYPES)]
    return find_hover_events(
        samples,
        boundaries,
        view_mapper.input_size,
        min_duration_ms=config.hover_min_duration_ms,
        box_ratio=config.hover_box_ratio,
    )


def collect_focus_events(output_events: Sequence[UserEvent], hovers: Sequence[HoverEvent]) -> List[FocusEvent]:
    focus = [event for event in output_events if isinstance(event, FOCUS_TYPES)]
    focus.extend(hovers)
    # Stable: equal timestamps keep input order, hovers after explicit events.
    return sorted(focus, key=lambda event: event.timestamp)


def should_emit(
    event: FocusEvent,
    must_see: Rect,
    viewport: Rect,
    last_viewport: Rect,
    epsilon: float,
) -> bool:
    if not last_viewport.contains(must_see):
        return True
    if isinstance(event, HoverEvent):
        return False
    return not same_size(viewport, last_viewport, epsilon)


def step(
    state: ScheduleState,
    event: FocusEvent,
    view_mapper: ViewMapper,
    windows: Sequence[OutputWindow],
    timeline_offset_ms: int,
    config: ZoomConfig,
) -> ScheduleState:
    must_see, viewport = target_viewport(event, view_mapper, config.max_zoom, config.target_padding)
    if not should_emit(event, must_see, viewport, state.last_viewport, config.viewport_epsilon_px):
        return state
    source_end = map_output_to_source_time(event.timestamp, windows, timeline_offset_ms)
    if source_end is None:
        logger.debug("Skipping %s at %dms: not visible in output", event.type, event.timestamp)
        return state
    motion = ViewportMotion(
        source_end_time_ms=source_end,
        duration_ms=config.transition_ms,
        rect=viewport,
        reason=event.type,
    )
    logger.debug("Motion for %s at %dms -> %s", event.type, event.timestamp, viewport)
    return replace(state, last_viewport=viewport, motions=state.motions + (motion,))


def finish(
    state: ScheduleState,
    view_mapper: ViewMapper,
    windows: Sequence[OutputWindow],
    timeline_offset_ms: int,
    config: ZoomConfig,
) -> ScheduleState:
    full = full_rect(view_mapper.output_size)
    if rects_close(state.last_viewport, full, config.viewport_epsilon_px):
        return state
    duration = get_output_duration(windows)
    if duration <= 0:
        return state
    landing = duration - config.end_buffer_ms + config.transition_ms
    landing = min(max(landing, 0), duration - 1)
    source_end: Optional[int] = map_output_to_source_time(landing, windows, timeline_offset_ms)
    if source_end is None:
        return state
    logger.debug("Returning to full view at %dms", landing)
    motion = ViewportMotion(
        source_end_time_ms=source_end,
        duration_ms=config.transition_ms,
        rect=full,
        reason="end",
    )
    return replace(state, last_viewport=full, motions=state.motions + (motion,))


def calculate_zoom_schedule(
    events: Iterable[UserEvent],
    view_mapper: ViewMapper,
    windows: Sequence[OutputWindow],
    timeline_offset_ms: int = 0,
    config: Optional[ZoomConfig] = None,
) -> List[ViewportMotion]:
    config = config or ZoomConfig()
    output_events = to_output_time(events, windows, timeline_offset_ms)
    hovers = detect_hovers(output_events, view_mapper, config)
    cutoff = get_output_duration(windows) - config.end_buffer_ms

    state = ScheduleState(last_viewport=full_rect(view_mapper.output_size))
    for event in collect_focus_events(output_events, hovers):
        if event.timestamp >= cutoff:
            break
        state = step(state, event, view_mapper, windows, timeline_offset_ms, config)
    state = finish(state, view_mapper, windows, timeline_offset_ms, config)
    return list(state.motions)
