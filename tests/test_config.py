"""Tests for environment-based settings."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from faceview.config import Settings, get_settings


class TestSettings:
    def test_defaults_match_view_defaults(self) -> None:
        settings = Settings()
        assert settings.eye_open_threshold == 0.4
        assert settings.stroke_width == 5
        assert settings.landmark_radius == 10
        assert settings.iris_radius == 60
        assert settings.api_key is None

    def test_reads_prefixed_environment(self) -> None:
        with patch.dict(os.environ, {"FACEVIEW_EYE_OPEN_THRESHOLD": "0.6", "FACEVIEW_API_KEY": "k"}):
            settings = get_settings()
        assert settings.eye_open_threshold == 0.6
        assert settings.api_key == "k"

    def test_threshold_must_be_a_probability(self) -> None:
        with pytest.raises(ValidationError):
            Settings(eye_open_threshold=1.5)

    def test_background_color_is_validated(self) -> None:
        assert Settings(background_color="#fff").background_color == "#fff"
        with pytest.raises(ValidationError):
            Settings(background_color="not-a-color")
