from __future__ import annotations

from typing import Optional, Tuple

from PIL import Image, ImageDraw, ImageFont


def load_font(font_path: Optional[str], size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    if font_path:
        try:
            return ImageFont.truetype(font_path, size=size)
        except OSError:
            pass
    return ImageFont.load_default()


def draw_cursor(draw: ImageDraw.ImageDraw, x: float, y: float, scale: float, color: Tuple[int, int, int]) -> None:
    size = 18 * scale
    draw.polygon(
        [(x, y), (x, y + size), (x + size * 0.3, y + size * 0.75), (x + size * 0.7, y + size * 0.7)],
        fill=color,
        outline=(0, 0, 0),
    )


def draw_ring(base: Image.Image, x: float, y: float, radius: int, alpha: int) -> None:
    if radius <= 0:
        return
    # Full-size layer: the ring may hang off the canvas edge.
    layer = Image.new("RGBA", base.size, (0, 0, 0, 0))
    ring_draw = ImageDraw.Draw(layer)
    ring_draw.ellipse((x - radius, y - radius, x + radius, y + radius), outline=(255, 255, 255, alpha), width=3)
    base.alpha_composite(layer)


def draw_label(
    draw: ImageDraw.ImageDraw,
    text: str,
    font: ImageFont.FreeTypeFont | ImageFont.ImageFont,
    margin: int = 12,
) -> None:
    text_w, text_h = font.getbbox(text)[2:4]
    draw.rounded_rectangle(
        (margin, margin, margin + text_w + 16, margin + text_h + 12),
        radius=8,
        fill=(0, 0, 0, 160),
    )
    draw.text((margin + 8, margin + 6), text, font=font, fill=(255, 255, 255))
