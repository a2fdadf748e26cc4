"""Pydantic request/response schemas for the FaceView API."""

from __future__ import annotations

from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from faceview.vision.face import UNCOMPUTED_PROBABILITY, Face, Landmark, LandmarkType, PointF


def _check_probability(value: float) -> float:
    if value != UNCOMPUTED_PROBABILITY and not 0.0 <= value <= 1.0:
        raise ValueError("probability must be in [0, 1] or -1 (uncomputed)")
    return value


Probability = Annotated[float, AfterValidator(_check_probability)]


class LandmarkIn(BaseModel):
    """A facial landmark in image pixel coordinates."""

    model_config = ConfigDict(allow_inf_nan=False)

    type: LandmarkType = Field(description="Landmark type, by value (e.g. 4) or name (e.g. 'LEFT_EYE')")
    x: float
    y: float

    @field_validator("type", mode="before")
    @classmethod
    def landmark_type_by_name(cls, value: object) -> object:
        if isinstance(value, str):
            if value.isdigit():
                return int(value)
            try:
                return LandmarkType[value.strip().upper()]
            except KeyError:
                raise ValueError(f"unknown landmark type {value!r}") from None
        return value

    def to_landmark(self) -> Landmark:
        return Landmark(position=PointF(self.x, self.y), type=self.type)


class FaceIn(BaseModel):
    """A detected face in image pixel coordinates."""

    model_config = ConfigDict(allow_inf_nan=False)

    id: int | None = Field(default=None, description="Face id; defaults to the list index")
    x: float = Field(description="Bounding box left edge")
    y: float = Field(description="Bounding box top edge")
    width: float = Field(ge=0.0)
    height: float = Field(ge=0.0)
    left_eye_open_probability: Probability = UNCOMPUTED_PROBABILITY
    right_eye_open_probability: Probability = UNCOMPUTED_PROBABILITY
    smiling_probability: Probability = UNCOMPUTED_PROBABILITY
    euler_y: float = 0.0
    euler_z: float = 0.0
    landmarks: list[LandmarkIn] = Field(default_factory=list)

    def to_face(self, default_id: int) -> Face:
        return Face(
            id=default_id if self.id is None else self.id,
            position=PointF(self.x, self.y),
            width=self.width,
            height=self.height,
            landmarks=tuple(landmark.to_landmark() for landmark in self.landmarks),
            is_left_eye_open_probability=self.left_eye_open_probability,
            is_right_eye_open_probability=self.right_eye_open_probability,
            is_smiling_probability=self.smiling_probability,
            euler_y=self.euler_y,
            euler_z=self.euler_z,
        )


FACE_LIST_ADAPTER: TypeAdapter[list[FaceIn]] = TypeAdapter(list[FaceIn])


def parse_faces(raw: str | bytes) -> dict[int, Face]:
    """Parse a JSON list of faces into the keyed collection the view draws.

    Raises:
        pydantic.ValidationError: If the JSON is malformed or a face is invalid.
        ValueError: If two faces share an id.
    """
    faces: dict[int, Face] = {}
    for index, item in enumerate(FACE_LIST_ADAPTER.validate_json(raw)):
        face = item.to_face(default_id=index)
        if face.id in faces:
            raise ValueError(f"Duplicate face id: {face.id}")
        faces[face.id] = face
    return faces


class LandmarkTypeInfo(BaseModel):
    """A single landmark type."""

    name: str
    value: int
    is_eye: bool


class LandmarkTypesResponse(BaseModel):
    """Response for the landmark type listing endpoint."""

    landmark_types: list[LandmarkTypeInfo]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    concurrent_requests: int
    queue_depth: int


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
