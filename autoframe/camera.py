from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from autoframe.geometry import Point, Rect, Size, clamp_rect, full_rect, rect_centered_at
from autoframe.schemas import ClickEvent, HoverEvent, ScrollEvent, TypingEvent, UrlEvent
from autoframe.view_mapper import ViewMapper

FocusEvent = Union[ClickEvent, HoverEvent, ScrollEvent, TypingEvent, UrlEvent]


@dataclass(frozen=True)
class ViewportMotion:
    """Camera transition arriving at ``rect`` at ``source_end_time_ms``.

    The motion starts ``duration_ms`` of Output time before its arrival.
    """

    source_end_time_ms: int
    duration_ms: int
    rect: Rect
    reason: Optional[str] = None


def min_viewport_size(output_size: Size, max_zoom: float) -> Size:
    return Size(output_size.width / max_zoom, output_size.height / max_zoom)


def get_must_see_rect(
    event: FocusEvent,
    view_mapper: ViewMapper,
    max_zoom: float,
    target_padding: float = 0.1,
) -> Rect:
    output_size = view_mapper.output_size
    if isinstance(event, UrlEvent):
        return full_rect(output_size)
    if isinstance(event, (ScrollEvent, TypingEvent)):
        rect = _target_must_see(event, view_mapper, max_zoom, target_padding)
    else:
        center = view_mapper.input_to_output_point(event.position)
        rect = rect_centered_at(
            center,
            output_size.width / (2 * max_zoom),
            output_size.height / (2 * max_zoom),
        )
    return clamp_rect(rect, output_size)


def _target_must_see(
    event: Union[ScrollEvent, TypingEvent],
    view_mapper: ViewMapper,
    max_zoom: float,
    target_padding: float,
) -> Rect:
    output_size = view_mapper.output_size
    target = view_mapper.input_to_output_rect(event.target_rect)
    target = target.padded(target.width * target_padding / 2, target.height * target_padding / 2)
    if target.width > output_size.width:
        target = Rect(target.center.x - output_size.width / 2, target.y, output_size.width, target.height)

    viewport_width = max(target.width, output_size.width / max_zoom)
    viewport_height = viewport_width / output_size.aspect_ratio
    if target.height <= viewport_height:
        return target

    # Tall content: keep the horizontal extent, follow the cursor vertically.
    cursor = view_mapper.input_to_output_point(event.cursor)
    return Rect(target.x, cursor.y - viewport_height / 2, target.width, viewport_height)


def get_viewport(must_see: Rect, output_size: Size, max_zoom: float) -> Rect:
    """Smallest output-aspect viewport, no tighter than ``max_zoom``, that holds ``must_see``."""
    minimum = min_viewport_size(output_size, max_zoom)
    if minimum.width <= 0 or minimum.height <= 0:
        return full_rect(output_size)
    grow = max(1.0, must_see.width / minimum.width, must_see.height / minimum.height)
    grow = min(grow, max_zoom)
    center: Point = must_see.center
    viewport = rect_centered_at(center, minimum.width * grow, minimum.height * grow)
    return clamp_rect(viewport, output_size)


def target_viewport(
    event: FocusEvent,
    view_mapper: ViewMapper,
    max_zoom: float,
    target_padding: float = 0.1,
) -> Tuple[Rect, Rect]:
    must_see = get_must_see_rect(event, view_mapper, max_zoom, target_padding)
    return must_see, get_viewport(must_see, view_mapper.output_size, max_zoom)
