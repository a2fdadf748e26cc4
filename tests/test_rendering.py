"""Tests for the render pool."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import patch

import cv2
import numpy as np
import pytest

from faceview import rendering
from faceview.config import Settings
from faceview.rendering import RenderPool
from faceview.vision.face import Face, Landmark, LandmarkType, PointF

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture()
def pool() -> Iterator[RenderPool]:
    render_pool = RenderPool(Settings(max_concurrent=1, background_color="#00f"))
    yield render_pool
    render_pool.shutdown()


def _bitmap() -> np.ndarray:
    return np.full((50, 50, 3), 80, dtype=np.uint8)


def _decode(png: bytes) -> np.ndarray:
    return cv2.imdecode(np.frombuffer(png, dtype=np.uint8), cv2.IMREAD_COLOR)


class TestRenderPool:
    async def test_render_returns_png_of_view_size(self, pool: RenderPool) -> None:
        png = await pool.render(_bitmap(), {}, 100, 60)
        image = _decode(png)
        assert image.shape == (60, 100, 3)
        assert pool.active_count == 0
        assert pool.queue_depth == 0

    async def test_render_uses_configured_style(self, pool: RenderPool) -> None:
        face = Face(
            id=0,
            position=PointF(0, 0),
            width=50,
            height=50,
            landmarks=(Landmark(PointF(25, 25), LandmarkType.LEFT_EYE),),
            is_left_eye_open_probability=0.0,
        )
        image = _decode(await pool.render(_bitmap(), {0: face}, 100, 50))
        # Closed eye in BGR red; the area right of the 50x50 bitmap is the blue background.
        assert tuple(int(v) for v in image[25, 25]) == (0, 0, 255)
        assert tuple(int(v) for v in image[25, 80]) == (255, 0, 0)

    async def test_draw_errors_propagate(self, pool: RenderPool) -> None:
        with patch.object(pool, "draw", side_effect=RuntimeError("boom")):
            with pytest.raises(RuntimeError, match="boom"):
                await pool.render(_bitmap(), {}, 10, 10)
        assert pool.active_count == 0

    async def test_times_out_when_no_slot_frees(self, pool: RenderPool, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(rendering, "SLOT_TIMEOUT_SECONDS", 0.05)
        # Occupy the only slot.
        await pool._slots.acquire()
        try:
            with pytest.raises(TimeoutError):
                await pool.render(_bitmap(), {}, 10, 10)
        finally:
            pool._slots.release()
        assert pool.queue_depth == 0
        assert pool.active_count == 0
