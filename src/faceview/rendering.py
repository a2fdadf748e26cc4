"""Render concurrency layer.

Every request draws on its own FaceView inside a worker thread:

    annotate route -> RenderPool.render() -> slot (asyncio.Semaphore) -> FaceView.render() -> PNG

Requests beyond ``max_concurrent`` wait up to SLOT_TIMEOUT_SECONDS for a
slot and are then refused with TimeoutError.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from faceview.ui.face_view import FaceView
from faceview.ui.graphics import parse_color
from faceview.vision.preprocessing import encode_png

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Mapping

    import numpy as np
    from numpy.typing import NDArray

    from faceview.config import Settings
    from faceview.vision.face import Face

logger = logging.getLogger(__name__)

SLOT_TIMEOUT_SECONDS: float = 5.0


class RenderPool:
    """Draws annotated images off the event loop, a bounded number at a time."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._background = parse_color(settings.background_color)
        self._slots = asyncio.Semaphore(settings.max_concurrent)
        self._workers = ThreadPoolExecutor(
            max_workers=settings.max_concurrent,
            thread_name_prefix="faceview-render",
        )
        self._lock = threading.Lock()
        self._waiting = 0
        self._drawing = 0

    async def render(
        self,
        bitmap: NDArray[np.uint8],
        faces: Mapping[int, Face],
        width: int,
        height: int,
    ) -> bytes:
        """Draw ``faces`` over ``bitmap`` on a width x height view, encoded as PNG.

        Raises:
            TimeoutError: If no slot frees up within SLOT_TIMEOUT_SECONDS.
        """
        async with self._slot():
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(self._workers, self.draw, bitmap, faces, width, height)

    def draw(
        self,
        bitmap: NDArray[np.uint8],
        faces: Mapping[int, Face],
        width: int,
        height: int,
    ) -> bytes:
        """Synchronous draw pass, run on a worker thread."""
        view = FaceView(
            width,
            height,
            eye_open_threshold=self._settings.eye_open_threshold,
            stroke_width=self._settings.stroke_width,
            landmark_radius=self._settings.landmark_radius,
            iris_radius=self._settings.iris_radius,
            background=self._background,
        )
        view.set_content(bitmap, faces)
        png = encode_png(view.render())
        logger.debug("Rendered %dx%d view with %d face(s)", width, height, len(faces))
        return png

    @asynccontextmanager
    async def _slot(self) -> AsyncIterator[None]:
        with self._lock:
            self._waiting += 1
        try:
            await asyncio.wait_for(self._slots.acquire(), timeout=SLOT_TIMEOUT_SECONDS)
        finally:
            with self._lock:
                self._waiting -= 1

        with self._lock:
            self._drawing += 1
        try:
            yield
        finally:
            self._slots.release()
            with self._lock:
                self._drawing -= 1

    @property
    def active_count(self) -> int:
        """Number of draw passes currently running."""
        with self._lock:
            return self._drawing

    @property
    def queue_depth(self) -> int:
        """Number of requests waiting for a slot."""
        with self._lock:
            return self._waiting

    def shutdown(self) -> None:
        """Wait for running draw passes and stop the worker threads."""
        self._workers.shutdown(wait=True)
        logger.info("Render pool shut down")
