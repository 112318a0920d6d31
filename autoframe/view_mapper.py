from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from autoframe.geometry import Point, Rect, Size, intersection


@dataclass(frozen=True)
class ProjectedBox:
    x: float
    y: float
    width: float
    height: float
    scale: float

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class RenderRects:
    source_rect: Rect
    dest_rect: Rect


def fit_content(input_size: Size, output_size: Size, padding: float) -> ProjectedBox:
    """Contain-fit ``input_size`` inside ``output_size`` minus ``padding`` on each side."""
    usable = 1 - 2 * padding
    if input_size.is_empty or output_size.is_empty or usable <= 0:
        return ProjectedBox(0.0, 0.0, 0.0, 0.0, 1.0)
    scale = max(
        input_size.width / (output_size.width * usable),
        input_size.height / (output_size.height * usable),
    )
    width = input_size.width / scale
    height = input_size.height / scale
    return ProjectedBox(
        x=(output_size.width - width) / 2,
        y=(output_size.height - height) / 2,
        width=width,
        height=height,
        scale=scale,
    )


class ViewMapper:
    """Projects between Source space, Output space and a camera viewport.

    Source space is the recording's pixel grid, Output space is the canvas of
    the exported video. The source is drawn into ``content_rect``, which keeps
    its aspect ratio and leaves ``padding`` (a fraction of the canvas) around it.
    """

    def __init__(self, input_size: Size, output_size: Size, padding: float = 0.0) -> None:
        self.input_size = input_size
        self.output_size = output_size
        self.padding = padding
        self.projected_box = fit_content(input_size, output_size, padding)
        self.content_rect = self.projected_box.rect

    @property
    def is_degenerate(self) -> bool:
        return self.input_size.is_empty or self.output_size.is_empty or self.content_rect.width <= 0

    @property
    def output_rect(self) -> Rect:
        return Rect(0.0, 0.0, self.output_size.width, self.output_size.height)

    def input_to_output_point(self, point: Point) -> Point:
        if self.is_degenerate:
            return point
        nx = point.x / self.input_size.width
        ny = point.y / self.input_size.height
        return Point(
            self.content_rect.x + nx * self.content_rect.width,
            self.content_rect.y + ny * self.content_rect.height,
        )

    def output_to_input_point(self, point: Point) -> Point:
        if self.is_degenerate:
            return point
        nx = (point.x - self.content_rect.x) / self.content_rect.width
        ny = (point.y - self.content_rect.y) / self.content_rect.height
        return Point(nx * self.input_size.width, ny * self.input_size.height)

    def input_to_output_rect(self, rect: Rect) -> Rect:
        p1 = self.input_to_output_point(Point(rect.x, rect.y))
        p2 = self.input_to_output_point(Point(rect.right, rect.bottom))
        return Rect(min(p1.x, p2.x), min(p1.y, p2.y), abs(p2.x - p1.x), abs(p2.y - p1.y))

    def resolve_render_rects(self, viewport: Rect) -> Optional[RenderRects]:
        """Return which part of the source to sample and where to draw it.

        ``None`` means the viewport only sees padding, so no video is drawn.
        """
        if self.is_degenerate or viewport.width <= 0 or viewport.height <= 0:
            return None
        visible = intersection(viewport, self.content_rect)
        if visible is None:
            return None

        content = self.content_rect
        source_rect = Rect(
            (visible.x - content.x) / content.width * self.input_size.width,
            (visible.y - content.y) / content.height * self.input_size.height,
            visible.width / content.width * self.input_size.width,
            visible.height / content.height * self.input_size.height,
        )

        scale_x = self.output_size.width / viewport.width
        scale_y = self.output_size.height / viewport.height
        dest_rect = Rect(
            (visible.x - viewport.x) * scale_x,
            (visible.y - viewport.y) * scale_y,
            visible.width * scale_x,
            visible.height * scale_y,
        )
        return RenderRects(source_rect=source_rect, dest_rect=dest_rect)

    def project_to_screen(self, point: Point, viewport: Rect) -> Point:
        output_point = self.input_to_output_point(point)
        if viewport.width <= 0 or viewport.height <= 0:
            return output_point
        scale_x = self.output_size.width / viewport.width
        scale_y = self.output_size.height / viewport.height
        return Point((output_point.x - viewport.x) * scale_x, (output_point.y - viewport.y) * scale_y)

    def get_zoom_scale(self, viewport: Rect) -> float:
        # Zoom is uniform, the width ratio stands for both axes.
        if viewport.width <= 0:
            return 1.0
        return self.output_size.width / viewport.width
