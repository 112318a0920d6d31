"""Click and drag effects derived from the raw event stream (Source time)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Literal, Optional, Tuple

from autoframe.geometry import Point
from autoframe.schemas import ClickEvent, MouseDownEvent, MouseEvent, MouseUpEvent, UserEvent

CLICK_EFFECT_MS = 400

PathSample = Tuple[int, float, float]


@dataclass
class MouseEffect:
    type: Literal["click", "drag"]
    time_in_ms: int
    time_out_ms: int
    start: Point
    end: Optional[Point] = None
    path: List[PathSample] = field(default_factory=list)


def find_click_effects(events: Iterable[UserEvent], duration_ms: int = CLICK_EFFECT_MS) -> List[MouseEffect]:
    clicks = sorted((e for e in events if isinstance(e, ClickEvent)), key=lambda e: e.timestamp)
    return [
        MouseEffect(
            type="click",
            time_in_ms=click.timestamp,
            time_out_ms=click.timestamp + duration_ms,
            start=click.position,
        )
        for click in clicks
    ]


def find_drags(events: Iterable[UserEvent]) -> List[MouseEffect]:
    drags: List[MouseEffect] = []
    active: Optional[MouseEffect] = None
    for event in sorted(events, key=lambda e: e.timestamp):
        if isinstance(event, MouseDownEvent):
            if active is not None:
                continue
            active = MouseEffect(
                type="drag",
                time_in_ms=event.timestamp,
                time_out_ms=event.timestamp,
                start=event.position,
                path=[(event.timestamp, event.x, event.y)],
            )
        elif isinstance(event, (MouseEvent, MouseUpEvent)) and active is not None:
            active.path.append((event.timestamp, event.x, event.y))
            active.time_out_ms = event.timestamp
            if isinstance(event, MouseUpEvent):
                active.end = event.position
                drags.append(active)
                active = None

    if active is not None:
        last_ts, last_x, last_y = active.path[-1]
        active.end = Point(last_x, last_y)
        active.time_out_ms = last_ts
        drags.append(active)
    return drags


def calculate_mouse_effects(events: Iterable[UserEvent]) -> List[MouseEffect]:
    events = list(events)
    effects = find_click_effects(events) + find_drags(events)
    return sorted(effects, key=lambda effect: effect.time_in_ms)
