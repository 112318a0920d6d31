from __future__ import annotations

import json
import uuid
from pathlib import Path
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from autoframe.geometry import Point, Rect, Size


class _Model(BaseModel):
    # Recorder output is camelCase; snake_case is accepted too.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _FrozenModel(_Model):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class OutputWindow(_FrozenModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    start_ms: int
    end_ms: int

    @model_validator(mode="after")
    def _validate_span(self) -> "OutputWindow":
        if self.end_ms < self.start_ms:
            raise ValueError("end_ms must be >= start_ms")
        return self


class _Event(_FrozenModel):
    timestamp: int

    @field_validator("timestamp", "end_time", mode="before", check_fields=False)
    @classmethod
    def _round_ms(cls, value: object) -> object:
        if isinstance(value, float):
            return int(round(value))
        return value


class _PositionedEvent(_Event):
    x: float
    y: float

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)


class ClickEvent(_PositionedEvent):
    type: Literal["click"] = "click"
    tag_name: Optional[str] = None


class MouseEvent(_PositionedEvent):
    type: Literal["mouse"] = "mouse"


class MouseDownEvent(_PositionedEvent):
    type: Literal["mousedown"] = "mousedown"


class MouseUpEvent(_PositionedEvent):
    type: Literal["mouseup"] = "mouseup"


class UrlEvent(_Event):
    type: Literal["url"] = "url"
    url: str = ""


class KeydownEvent(_Event):
    type: Literal["keydown"] = "keydown"
    key: str = ""
    code: str = ""
    ctrl_key: bool = False
    meta_key: bool = False
    shift_key: bool = False
    alt_key: bool = False
    tag_name: Optional[str] = None


class ScrollEvent(_PositionedEvent):
    type: Literal["scroll"] = "scroll"
    target_rect: Rect

    @property
    def cursor(self) -> Point:
        return self.position


class TypingEvent(_Event):
    type: Literal["typing"] = "typing"
    target_rect: Rect
    x: Optional[float] = None
    y: Optional[float] = None

    @property
    def cursor(self) -> Point:
        if self.x is None or self.y is None:
            return self.target_rect.center
        return Point(self.x, self.y)


class HoverEvent(_PositionedEvent):
    type: Literal["hover"] = "hover"
    end_time: int

    @model_validator(mode="after")
    def _validate_span(self) -> "HoverEvent":
        if self.end_time < self.timestamp:
            raise ValueError("hover end_time must be >= timestamp")
        return self


UserEvent = Annotated[
    Union[
        ClickEvent,
        MouseEvent,
        MouseDownEvent,
        MouseUpEvent,
        UrlEvent,
        KeydownEvent,
        ScrollEvent,
        TypingEvent,
        HoverEvent,
    ],
    Field(discriminator="type"),
]

EaseName = Literal["linear", "ease_in", "ease_out", "ease_in_out"]


class ZoomConfig(_Model):
    max_zoom: float = 2.0
    padding: float = 0.0
    transition_ms: int = Field(default=500, ge=0)
    end_buffer_ms: int = Field(default=3000, ge=0)
    viewport_epsilon_px: float = Field(default=0.5, ge=0)
    target_padding: float = Field(default=0.1, ge=0)
    hover_box_ratio: float = Field(default=0.1, gt=0)
    hover_min_duration_ms: int = Field(default=1000, ge=0)
    ease: EaseName = "ease_in_out"

    @field_validator("max_zoom")
    @classmethod
    def _zoom_range(cls, value: float) -> float:
        if value <= 1:
            raise ValueError("max_zoom must be > 1")
        return value

    @field_validator("padding")
    @classmethod
    def _padding_range(cls, value: float) -> float:
        if not 0 <= value < 0.5:
            raise ValueError("padding must be in [0, 0.5)")
        return value


class SessionConfig(_Model):
    input_size: Size
    output_size: Size = Size(1920, 1080)
    output_windows: Optional[List[OutputWindow]] = None
    duration_ms: Optional[int] = Field(default=None, ge=0)
    timeline_offset_ms: int = 0
    events: List[UserEvent] = Field(default_factory=list)
    zoom: ZoomConfig = Field(default_factory=ZoomConfig)
    fps: int = Field(default=30, gt=0)
    background: str = "#1e1e2e"

    @field_validator("input_size", "output_size")
    @classmethod
    def _non_negative_size(cls, value: Size) -> Size:
        if value.width < 0 or value.height < 0:
            raise ValueError("sizes must be non-negative")
        return value

    @field_validator("output_windows")
    @classmethod
    def _ordered_windows(cls, value: Optional[List[OutputWindow]]) -> Optional[List[OutputWindow]]:
        if value is None:
            return value
        for previous, current in zip(value, value[1:]):
            if current.start_ms < previous.start_ms:
                raise ValueError("output_windows must be sorted by start_ms")
            if current.start_ms < previous.end_ms:
                raise ValueError("output_windows must not overlap")
        return value

    @model_validator(mode="after")
    def _default_windows(self) -> "SessionConfig":
        if self.output_windows is not None:
            return self
        duration = self.duration_ms
        if duration is None:
            duration = max((_event_end(event) for event in self.events), default=-1) + 1
        if duration <= 0:
            self.output_windows = []
        else:
            start = self.timeline_offset_ms
            self.output_windows = [OutputWindow(id="full", start_ms=start, end_ms=start + duration)]
        return self


def _event_end(event: UserEvent) -> int:
    if isinstance(event, HoverEvent):
        return event.end_time
    return event.timestamp


def load_session(path: Path) -> SessionConfig:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return SessionConfig.model_validate(data)
