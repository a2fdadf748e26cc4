"""Tests for the face model and the raw detection adapter."""

from __future__ import annotations

import numpy as np
import pytest

from faceview.vision.face import UNCOMPUTED_PROBABILITY, Face, LandmarkType, PointF
from faceview.vision.face_detector import FIVE_POINT_LANDMARK_TYPES, RawDetection, to_face


def _detection(num_landmarks: int = 5) -> RawDetection:
    landmarks = np.array([[30 + i, 40 + i] for i in range(num_landmarks)], dtype=np.float32)
    return RawDetection(
        bbox=np.array([10, 20, 50, 80], dtype=np.float32),
        score=0.98,
        landmarks=landmarks,
    )


class TestFace:
    def test_eye_open_probability_dispatch(self) -> None:
        face = Face(
            id=1,
            position=PointF(0, 0),
            width=10,
            height=10,
            is_left_eye_open_probability=0.2,
            is_right_eye_open_probability=0.7,
        )
        assert face.eye_open_probability(LandmarkType.LEFT_EYE) == 0.2
        assert face.eye_open_probability(LandmarkType.RIGHT_EYE) == 0.7

    @pytest.mark.parametrize(
        "landmark_type",
        [t for t in LandmarkType if t not in (LandmarkType.LEFT_EYE, LandmarkType.RIGHT_EYE)],
    )
    def test_non_eye_landmarks_have_no_probability(self, landmark_type: LandmarkType) -> None:
        face = Face(id=1, position=PointF(0, 0), width=10, height=10)
        assert face.eye_open_probability(landmark_type) is None

    def test_probabilities_default_to_uncomputed(self) -> None:
        face = Face(id=1, position=PointF(0, 0), width=10, height=10)
        assert face.is_left_eye_open_probability == UNCOMPUTED_PROBABILITY
        assert face.is_smiling_probability == UNCOMPUTED_PROBABILITY
        assert face.landmarks == ()

    def test_only_eyes_report_is_eye(self) -> None:
        eyes = {t for t in LandmarkType if t.is_eye}
        assert eyes == {LandmarkType.LEFT_EYE, LandmarkType.RIGHT_EYE}

    def test_landmark_type_values(self) -> None:
        assert LandmarkType.LEFT_EYE == 4
        assert LandmarkType.RIGHT_EYE == 10
        assert len(LandmarkType) == 12


class TestToFace:
    def test_bounding_box_becomes_position_and_size(self) -> None:
        face = to_face(_detection(), face_id=3)
        assert face.id == 3
        assert face.position == PointF(10.0, 20.0)
        assert face.width == 40.0
        assert face.height == 60.0

    def test_landmarks_take_subject_side_types(self) -> None:
        face = to_face(_detection(), face_id=0)
        assert [lm.type for lm in face.landmarks] == list(FIVE_POINT_LANDMARK_TYPES)
        # The image-left eye is the subject's right eye.
        assert face.landmarks[0].type == LandmarkType.RIGHT_EYE
        assert face.landmarks[0].position == PointF(30.0, 40.0)
        assert face.landmarks[2].type == LandmarkType.NOSE_BASE
        assert face.landmarks[2].position == PointF(32.0, 42.0)

    def test_eye_probabilities_are_uncomputed(self) -> None:
        face = to_face(_detection(), face_id=0)
        assert face.is_left_eye_open_probability == UNCOMPUTED_PROBABILITY
        assert face.is_right_eye_open_probability == UNCOMPUTED_PROBABILITY

    def test_wrong_landmark_count_raises(self) -> None:
        with pytest.raises(ValueError, match="Expected 5 landmarks"):
            to_face(_detection(num_landmarks=68), face_id=0)
