"""
Turns encoder output into printable artwork: SVG markup or Pillow images.
"""

from __future__ import annotations

import io
import math

from PIL import Image, ImageDraw

from labelcodes.code128 import Barcode
from labelcodes.qr_code import QrCode

FILL_COLOR = "#111"
BACK_COLOR = "#fff"


def _fmt(value: float) -> str:
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return text or "0"


def _require_positive(**kwargs) -> None:
    for name, value in kwargs.items():
        if not math.isfinite(value) or value <= 0:
            raise ValueError(f"{name} debe ser positivo y finito: {value}")


def qr_to_svg(qr: QrCode, size: float = 64, quiet_zone: int = 4, color: str = FILL_COLOR) -> str:
    """
    Square SVG of ``size`` units with one rect per dark module.

    ``quiet_zone`` modules of light margin are kept on every side.
    """
    _require_positive(size=size)
    if quiet_zone < 0:
        raise ValueError(f"quiet_zone no puede ser negativo: {quiet_zone}")
    cell = size / (qr.size + quiet_zone * 2)
    offset = quiet_zone * cell
    rects = []
    for y in range(qr.size):
        for x in range(qr.size):
            if qr.modules[y][x]:
                rects.append(
                    f'<rect x="{_fmt(offset + x * cell)}" y="{_fmt(offset + y * cell)}" '
                    f'width="{_fmt(cell)}" height="{_fmt(cell)}" fill="{color}"/>'
                )
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {_fmt(size)} {_fmt(size)}" '
        f'width="{_fmt(size)}" height="{_fmt(size)}" shape-rendering="crispEdges">'
        f'<rect width="{_fmt(size)}" height="{_fmt(size)}" fill="{BACK_COLOR}"/>'
        f'{"".join(rects)}</svg>'
    )


def barcode_to_svg(barcode: Barcode, height: float = 48, min_bar_width: float = 1, color: str = FILL_COLOR) -> str:
    _require_positive(height=height, min_bar_width=min_bar_width)
    narrowest = min((bar.width for bar in barcode.bars), default=1)
    scale = min_bar_width / max(1, narrowest)
    view_width = max(100, barcode.total_width * scale)
    rects = "".join(
        f'<rect x="{_fmt(bar.x * scale)}" y="0" width="{_fmt(bar.width * scale)}" '
        f'height="{_fmt(height)}" fill="{color}"/>'
        for bar in barcode.bars
    )
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {_fmt(view_width)} {_fmt(height)}" '
        f'height="{_fmt(height)}" preserveAspectRatio="none">{rects}</svg>'
    )


def qr_to_image(
    qr: QrCode,
    box_size: int = 10,
    border: int = 4,
    fill_color: str = FILL_COLOR,
    back_color: str = BACK_COLOR,
) -> Image.Image:
    _require_positive(box_size=box_size)
    if border < 0:
        raise ValueError(f"border no puede ser negativo: {border}")
    pixels = (qr.size + border * 2) * box_size
    img = Image.new("RGB", (pixels, pixels), color=back_color)
    draw = ImageDraw.Draw(img)
    for y in range(qr.size):
        for x in range(qr.size):
            if qr.modules[y][x]:
                x0 = (x + border) * box_size
                y0 = (y + border) * box_size
                draw.rectangle((x0, y0, x0 + box_size - 1, y0 + box_size - 1), fill=fill_color)
    return img


def barcode_to_image(
    barcode: Barcode,
    module_width: int = 2,
    height: int = 80,
    quiet_zone: int = 10,
    fill_color: str = FILL_COLOR,
    back_color: str = BACK_COLOR,
) -> Image.Image:
    _require_positive(module_width=module_width, height=height)
    if quiet_zone < 0:
        raise ValueError(f"quiet_zone no puede ser negativo: {quiet_zone}")
    width = (barcode.total_width + quiet_zone * 2) * module_width
    img = Image.new("RGB", (width, height), color=back_color)
    draw = ImageDraw.Draw(img)
    for bar in barcode.bars:
        x0 = (bar.x + quiet_zone) * module_width
        draw.rectangle((x0, 0, x0 + bar.width * module_width - 1, height - 1), fill=fill_color)
    return img


def image_to_png_bytes(img: Image.Image) -> bytes:
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()
