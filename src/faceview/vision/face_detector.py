"""Face detector protocol and conversion of raw detections into faces.

Detection itself happens outside FaceView. Five-point detectors such as
RetinaFace or SCRFD produce RawDetection records, which ``to_face`` turns
into the Face model the view draws.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from faceview.vision.face import UNCOMPUTED_PROBABILITY, Face, Landmark, LandmarkType, PointF

if TYPE_CHECKING:
    import numpy as np
    from numpy.typing import NDArray

# Five-point detectors order keypoints by image position; landmark types
# name the subject's side, so the image-left eye is the subject's right eye.
FIVE_POINT_LANDMARK_TYPES: tuple[LandmarkType, ...] = (
    LandmarkType.RIGHT_EYE,
    LandmarkType.LEFT_EYE,
    LandmarkType.NOSE_BASE,
    LandmarkType.RIGHT_MOUTH,
    LandmarkType.LEFT_MOUTH,
)


@dataclass(frozen=True)
class RawDetection:
    """Raw face detection result.

    Coordinates are in pixel space of the detector's input image.
    ``bbox`` is ``[x1, y1, x2, y2]`` and ``landmarks`` is a 5x2 array.
    """

    bbox: NDArray[np.float32]
    score: float
    landmarks: NDArray[np.float32]


class FaceDetector(Protocol):
    """Protocol for face detection models."""

    @property
    def model_name(self) -> str:
        """Return the model identifier string."""
        ...

    def detect(self, image: NDArray[np.uint8]) -> list[RawDetection]:
        """Detect faces in an image.

        Args:
            image: HxWx3 RGB uint8 array.

        Returns:
            List of raw detections with bounding boxes, scores, and landmarks.
        """
        ...


def to_face(detection: RawDetection, face_id: int) -> Face:
    """Convert a five-point raw detection into a Face.

    Eye-open and smiling probabilities are left uncomputed.

    Raises:
        ValueError: If the detection does not carry exactly five landmarks.
    """
    if len(detection.landmarks) != len(FIVE_POINT_LANDMARK_TYPES):
        raise ValueError(f"Expected 5 landmarks, got {len(detection.landmarks)}")

    x1, y1, x2, y2 = (float(v) for v in detection.bbox[:4])
    landmarks = tuple(
        Landmark(position=PointF(float(point[0]), float(point[1])), type=landmark_type)
        for point, landmark_type in zip(detection.landmarks, FIVE_POINT_LANDMARK_TYPES, strict=True)
    )
    return Face(
        id=face_id,
        position=PointF(x1, y1),
        width=max(x2 - x1, 0.0),
        height=max(y2 - y1, 0.0),
        landmarks=landmarks,
        is_left_eye_open_probability=UNCOMPUTED_PROBABILITY,
        is_right_eye_open_probability=UNCOMPUTED_PROBABILITY,
    )
