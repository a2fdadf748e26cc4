"""View which displays a bitmap containing faces along with overlay graphics.

The bitmap is scaled uniformly to fit the view, anchored at the top-left
corner. Each face gets a bounding box and each of its landmarks a marker:

* eyes below the open threshold: small filled red circle;
* open eyes: white iris disc with a black pupil;
* everything else: small green ring.

Eye landmarks are the midpoint between the detected eye corners, which
tends to place them at the lower eyelid rather than at the pupil.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from faceview.ui.graphics import Canvas, Color, Paint, Rect, Style

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    import numpy as np
    from numpy.typing import NDArray

    from faceview.ui.graphics import RGB
    from faceview.vision.face import Face, Landmark

logger = logging.getLogger(__name__)

EYE_OPEN_THRESHOLD: float = 0.4
STROKE_WIDTH: int = 5
LANDMARK_RADIUS: int = 10
IRIS_RADIUS: int = 60

# Coordinates are clamped to this magnitude; OpenCV refuses larger ones.
PIXEL_LIMIT: int = 1 << 24


def _to_px(value: float) -> int:
    """Truncate to an integer pixel coordinate, saturating instead of failing.

    NaN maps to 0 and out-of-range values (including infinities) clamp to
    PIXEL_LIMIT.
    """
    if math.isnan(value):
        return 0
    return int(max(-PIXEL_LIMIT, min(value, PIXEL_LIMIT)))


class FaceView:
    """Draws a bitmap and the face detections made on it."""

    def __init__(
        self,
        width: int,
        height: int,
        *,
        eye_open_threshold: float = EYE_OPEN_THRESHOLD,
        stroke_width: int = STROKE_WIDTH,
        landmark_radius: int = LANDMARK_RADIUS,
        iris_radius: int = IRIS_RADIUS,
        background: RGB = Color.BLACK,
    ) -> None:
        self._width = width
        self._height = height
        self._bitmap: NDArray[np.uint8] | None = None
        self._faces: Mapping[int, Face] | None = None
        self._invalidated = True
        self._listeners: list[Callable[[FaceView], None]] = []

        self.eye_open_threshold = eye_open_threshold
        self.landmark_radius = landmark_radius
        self.iris_radius = iris_radius
        self.background = background

        self._face_paint = Paint(Color.MAGENTA, Style.STROKE, stroke_width)
        self._landmark_paint = Paint(Color.GREEN, Style.STROKE, stroke_width)
        self._closed_eye_paint = Paint(Color.RED, Style.FILL)
        self._iris_paint = Paint(Color.WHITE, Style.FILL)
        self._pupil_paint = Paint(Color.BLACK, Style.FILL)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def is_invalidated(self) -> bool:
        """True when the content changed since the last render."""
        return self._invalidated

    def set_content(self, bitmap: NDArray[np.uint8] | None, faces: Mapping[int, Face] | None) -> None:
        """Sets the bitmap background and the associated face detections."""
        self._bitmap = bitmap
        self._faces = faces
        self.invalidate()

    def set_size(self, width: int, height: int) -> None:
        if (width, height) == (self._width, self._height):
            return
        self._width = width
        self._height = height
        self.invalidate()

    def add_invalidate_listener(self, listener: Callable[[FaceView], None]) -> None:
        """Register a callback run whenever the view requests a redraw."""
        self._listeners.append(listener)

    def invalidate(self) -> None:
        """Request a redraw from the host."""
        self._invalidated = True
        logger.debug("FaceView invalidated (%dx%d)", self._width, self._height)
        for listener in self._listeners:
            listener(self)

    def render(self) -> NDArray[np.uint8]:
        """Run a draw pass on a fresh canvas and return its pixels."""
        canvas = Canvas(max(self._width, 0), max(self._height, 0), self.background)
        self.on_draw(canvas)
        self._invalidated = False
        return canvas.pixels

    def on_draw(self, canvas: Canvas) -> None:
        """Draws the bitmap background and the associated face landmarks."""
        if self._bitmap is None or self._faces is None:
            return
        if canvas.is_empty() or self._bitmap.size == 0:
            return
        scale = self.draw_bitmap(canvas, self._bitmap)
        self.draw_face_annotations(canvas, self._faces, scale)

    def draw_bitmap(self, canvas: Canvas, bitmap: NDArray[np.uint8]) -> float:
        """Draws the bitmap background, scaled to the canvas size.

        Returns the scale for positioning the facial landmark graphics.
        """
        view_width = float(canvas.width)
        view_height = float(canvas.height)
        image_height, image_width = (float(v) for v in bitmap.shape[:2])
        scale = min(view_width / image_width, view_height / image_height)

        dest_bounds = Rect(0, 0, int(image_width * scale), int(image_height * scale))
        canvas.draw_bitmap(bitmap, dest_bounds)
        logger.debug("Drew %gx%g bitmap at scale %.4f", image_width, image_height, scale)
        return scale

    def draw_face_annotations(self, canvas: Canvas, faces: Mapping[int, Face], scale: float) -> None:
        """Draws a bounding box for each face and a marker for each landmark."""
        for key in sorted(faces):
            face = faces[key]

            fx = _to_px(face.position.x * scale)
            fy = _to_px(face.position.y * scale)
            fw = _to_px(face.width * scale)
            fh = _to_px(face.height * scale)
            canvas.draw_rect(fx, fy, fx + fw, fy + fh, self._face_paint)

            for landmark in face.landmarks:
                self._draw_landmark(canvas, face, landmark, scale)

    def _draw_landmark(self, canvas: Canvas, face: Face, landmark: Landmark, scale: float) -> None:
        cx = _to_px(landmark.position.x * scale)
        cy = _to_px(landmark.position.y * scale)

        probability = face.eye_open_probability(landmark.type)
        if probability is None:
            canvas.draw_circle(cx, cy, self.landmark_radius, self._landmark_paint)
        elif probability < self.eye_open_threshold:
            canvas.draw_circle(cx, cy, self.landmark_radius, self._closed_eye_paint)
        else:
            canvas.draw_circle(cx, cy, self.iris_radius, self._iris_paint)
            canvas.draw_circle(cx, cy, self.landmark_radius, self._pupil_paint)
