"""Face detection results as consumed by the annotated image view.

Coordinates are in pixel space of the source image. Left and right always
name the subject's side, not the side of the image.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

UNCOMPUTED_PROBABILITY: float = -1.0


class LandmarkType(IntEnum):
    BOTTOM_MOUTH = 0
    LEFT_CHEEK = 1
    LEFT_EAR_TIP = 2
    LEFT_EAR = 3
    LEFT_EYE = 4
    LEFT_MOUTH = 5
    NOSE_BASE = 6
    RIGHT_CHEEK = 7
    RIGHT_EAR_TIP = 8
    RIGHT_EAR = 9
    RIGHT_EYE = 10
    RIGHT_MOUTH = 11

    @property
    def is_eye(self) -> bool:
        return self in _EYE_OPEN_ATTRIBUTES


# Which Face attribute holds the open probability of each eye.
_EYE_OPEN_ATTRIBUTES: dict[LandmarkType, str] = {
    LandmarkType.LEFT_EYE: "is_left_eye_open_probability",
    LandmarkType.RIGHT_EYE: "is_right_eye_open_probability",
}


@dataclass(frozen=True)
class PointF:
    x: float
    y: float


@dataclass(frozen=True)
class Landmark:
    """A single facial feature point."""

    position: PointF
    type: LandmarkType


@dataclass(frozen=True)
class Face:
    """A detected face with its landmarks and classification scores.

    Probabilities are in [0, 1], or UNCOMPUTED_PROBABILITY when the detector
    did not run the corresponding classifier.
    """

    id: int
    position: PointF
    width: float
    height: float
    landmarks: tuple[Landmark, ...] = ()
    is_left_eye_open_probability: float = UNCOMPUTED_PROBABILITY
    is_right_eye_open_probability: float = UNCOMPUTED_PROBABILITY
    is_smiling_probability: float = UNCOMPUTED_PROBABILITY
    euler_y: float = 0.0
    euler_z: float = 0.0

    def eye_open_probability(self, landmark_type: LandmarkType) -> float | None:
        """Return the open probability of the eye at ``landmark_type``.

        Returns None for landmarks that are not eyes.
        """
        attribute = _EYE_OPEN_ATTRIBUTES.get(landmark_type)
        return None if attribute is None else getattr(self, attribute)
