"""Minimal 2D drawing surface backed by a numpy pixel buffer.

The API mirrors a platform canvas: a Paint carries colour, fill style and
stroke width, and shapes are drawn at integer pixel coordinates. Drawing is
done with OpenCV on an RGB uint8 buffer without antialiasing.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

import cv2
import numpy as np

if TYPE_CHECKING:
    from numpy.typing import NDArray

RGB = tuple[int, int, int]


class Color:
    BLACK: RGB = (0, 0, 0)
    WHITE: RGB = (255, 255, 255)
    GRAY: RGB = (136, 136, 136)
    RED: RGB = (255, 0, 0)
    GREEN: RGB = (0, 255, 0)
    BLUE: RGB = (0, 0, 255)
    YELLOW: RGB = (255, 255, 0)
    CYAN: RGB = (0, 255, 255)
    MAGENTA: RGB = (255, 0, 255)


_NAMED_COLORS: dict[str, RGB] = {
    name.lower(): value for name, value in vars(Color).items() if name.isupper()
}
_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def parse_color(value: str) -> RGB:
    """Parse ``#rrggbb``, ``#rgb`` or a colour name such as ``magenta``.

    Raises:
        ValueError: If the value is not a recognised colour.
    """
    text = value.strip()
    named = _NAMED_COLORS.get(text.lower())
    if named is not None:
        return named
    if not _HEX_COLOR.match(text):
        raise ValueError(f"Unknown color: {value!r}")
    digits = text[1:]
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


class Style(StrEnum):
    FILL = "fill"
    STROKE = "stroke"


@dataclass(frozen=True)
class Paint:
    color: RGB
    style: Style = Style.FILL
    stroke_width: int = 0

    @property
    def thickness(self) -> int:
        """OpenCV thickness: filled, or the stroke width (0 draws a hairline)."""
        if self.style == Style.FILL:
            return cv2.FILLED
        return max(self.stroke_width, 1)


@dataclass(frozen=True)
class Rect:
    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


def _as_rgb(bitmap: NDArray[np.uint8]) -> NDArray[np.uint8]:
    if bitmap.ndim == 2:
        return cv2.cvtColor(bitmap, cv2.COLOR_GRAY2RGB)
    channels = bitmap.shape[2]
    if channels == 1:
        return cv2.cvtColor(bitmap[:, :, 0], cv2.COLOR_GRAY2RGB)
    if channels == 4:
        return cv2.cvtColor(bitmap, cv2.COLOR_RGBA2RGB)
    return np.ascontiguousarray(bitmap)


class Canvas:
    """An RGB drawing surface of a fixed size."""

    def __init__(self, width: int, height: int, background: RGB = Color.BLACK) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"Invalid canvas size: {width}x{height}")
        self.pixels: NDArray[np.uint8] = np.empty((height, width, 3), dtype=np.uint8)
        self.pixels[:] = background

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def draw_bitmap(self, bitmap: NDArray[np.uint8], dst: Rect) -> None:
        """Scale ``bitmap`` to fill ``dst``, clipped to the canvas."""
        if dst.is_empty() or bitmap.size == 0:
            return

        source = _as_rgb(bitmap)
        src_height, src_width = source.shape[:2]
        shrinking = dst.width < src_width or dst.height < src_height
        interpolation = cv2.INTER_AREA if shrinking else cv2.INTER_LINEAR
        scaled = cv2.resize(source, (dst.width, dst.height), interpolation=interpolation)

        left = max(dst.left, 0)
        top = max(dst.top, 0)
        right = min(dst.right, self.width)
        bottom = min(dst.bottom, self.height)
        if right <= left or bottom <= top:
            return
        self.pixels[top:bottom, left:right] = scaled[
            top - dst.top : bottom - dst.top,
            left - dst.left : right - dst.left,
        ]

    def draw_rect(self, left: int, top: int, right: int, bottom: int, paint: Paint) -> None:
        cv2.rectangle(
            self.pixels,
            (int(left), int(top)),
            (int(right), int(bottom)),
            paint.color,
            paint.thickness,
            lineType=cv2.LINE_8,
        )

    def draw_circle(self, cx: int, cy: int, radius: int, paint: Paint) -> None:
        if radius < 0:
            return
        cv2.circle(
            self.pixels,
            (int(cx), int(cy)),
            int(radius),
            paint.color,
            paint.thickness,
            lineType=cv2.LINE_8,
        )
