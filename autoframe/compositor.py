from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import cv2
import numpy as np
from PIL import Image, ImageColor, ImageDraw

from autoframe.config import AppConfig
from autoframe.draw import draw_cursor, draw_label, draw_ring, load_font
from autoframe.effects import MouseEffect, find_click_effects
from autoframe.geometry import Point, Rect
from autoframe.scheduler import to_output_time
from autoframe.schemas import ClickEvent, MouseEvent, UserEvent


@dataclass
class FrameContext:
    time_ms: int
    viewport: Rect


class Compositor:
    """Renders preview stills of the framed output from a source screenshot."""

    def __init__(self, config: AppConfig, frame: Image.Image, font_path: Optional[str] = None) -> None:
        self.config = config
        self.view_mapper = config.view_mapper
        size = config.session.input_size
        source = frame.convert("RGBA")
        if (source.width, source.height) != (int(size.width), int(size.height)):
            source = source.resize((max(int(size.width), 1), max(int(size.height), 1)))
        self.source = source
        self.font = load_font(font_path, size=24)
        self.events: List[UserEvent] = to_output_time(
            config.session.events, config.windows, config.session.timeline_offset_ms
        )
        self.clicks: List[MouseEffect] = find_click_effects(self.events)

    def render_frame(self, ctx: FrameContext) -> np.ndarray:
        out = self.config.session.output_size
        width, height = max(int(out.width), 1), max(int(out.height), 1)
        background = ImageColor.getrgb(self.config.session.background)
        base = Image.new("RGBA", (width, height), (*background[:3], 255))

        self._draw_source(base, ctx.viewport)
        draw = ImageDraw.Draw(base)
        self._draw_clicks(base, ctx)
        self._draw_cursor(draw, ctx)
        zoom = self.view_mapper.get_zoom_scale(ctx.viewport)
        draw_label(draw, f"{ctx.time_ms} ms  {zoom:.2f}x", self.font)

        array = np.array(base.convert("RGB"))
        return cv2.cvtColor(array, cv2.COLOR_RGB2BGR)

    def _draw_source(self, base: Image.Image, viewport: Rect) -> None:
        rects = self.view_mapper.resolve_render_rects(viewport)
        if rects is None:
            return
        src, dst = rects.source_rect, rects.dest_rect
        box = (int(round(src.x)), int(round(src.y)), int(round(src.right)), int(round(src.bottom)))
        dest_size = (max(int(round(dst.width)), 1), max(int(round(dst.height)), 1))
        if box[2] <= box[0] or box[3] <= box[1]:
            return
        patch = self.source.crop(box).resize(dest_size)
        base.alpha_composite(patch, (int(round(dst.x)), int(round(dst.y))))

    def _cursor_position(self, time_ms: int) -> Optional[Point]:
        latest: Optional[Point] = None
        latest_ms = -1
        for event in self.events:
            if not isinstance(event, (MouseEvent, ClickEvent)) or event.timestamp > time_ms:
                continue
            if event.timestamp >= latest_ms:
                latest, latest_ms = event.position, event.timestamp
        return latest

    def _draw_cursor(self, draw: ImageDraw.ImageDraw, ctx: FrameContext) -> None:
        position = self._cursor_position(ctx.time_ms)
        if position is None:
            return
        screen = self.view_mapper.project_to_screen(position, ctx.viewport)
        draw_cursor(draw, screen.x, screen.y, self.view_mapper.get_zoom_scale(ctx.viewport), (255, 255, 255))

    def _draw_clicks(self, base: Image.Image, ctx: FrameContext) -> None:
        for click in self.clicks:
            if not click.time_in_ms <= ctx.time_ms < click.time_out_ms:
                continue
            phase = (ctx.time_ms - click.time_in_ms) / max(click.time_out_ms - click.time_in_ms, 1)
            screen = self.view_mapper.project_to_screen(click.start, ctx.viewport)
            draw_ring(base, screen.x, screen.y, int(12 + phase * 36), int(220 * (1 - phase)))
