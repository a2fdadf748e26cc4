"""API route definitions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated

from fastapi import APIRouter, Depends, Form, Query, Request, UploadFile, status
from fastapi.responses import JSONResponse, Response

from faceview.api.middleware import verify_api_key
from faceview.api.schemas import (
    ErrorResponse,
    HealthResponse,
    LandmarkTypeInfo,
    LandmarkTypesResponse,
    parse_faces,
)
from faceview.vision.face import LandmarkType
from faceview.vision.preprocessing import decode_image

if TYPE_CHECKING:
    from faceview.config import Settings
    from faceview.rendering import RenderPool

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", dependencies=[Depends(verify_api_key)])


def _get_settings(request: Request) -> Settings:
    settings: Settings = request.app.state.settings
    return settings


def _get_render_pool(request: Request) -> RenderPool:
    pool: RenderPool = request.app.state.render_pool
    return pool


def _error(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail})


@router.post(
    "/annotate",
    response_class=Response,
    responses={
        status.HTTP_200_OK: {"content": {"image/png": {}}},
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_413_REQUEST_ENTITY_TOO_LARGE: {"model": ErrorResponse},
        status.HTTP_422_UNPROCESSABLE_ENTITY: {"model": ErrorResponse},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse},
    },
    summary="Draw face annotations over an image",
)
async def annotate(
    request: Request,
    file: UploadFile,
    faces: Annotated[str, Form(description="JSON list of detected faces")] = "[]",
    width: Annotated[int | None, Query(ge=1, description="View width; defaults to the image width")] = None,
    height: Annotated[int | None, Query(ge=1, description="View height; defaults to the image height")] = None,
) -> Response:
    """Render the uploaded image with bounding boxes and landmark markers for each face."""
    settings = _get_settings(request)

    image_bytes = await file.read()
    if len(image_bytes) > settings.max_file_size:
        logger.warning("Rejected %s: %d bytes exceeds limit", file.filename, len(image_bytes))
        return _error(
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            f"File exceeds {settings.max_file_size} bytes",
        )

    try:
        faces_by_id = parse_faces(faces)
    except ValueError as exc:
        # pydantic.ValidationError is a ValueError subclass.
        logger.warning("Rejected faces payload: %s", exc)
        return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc))

    try:
        bitmap = decode_image(image_bytes, settings.max_image_pixels)
    except ValueError as exc:
        logger.warning("Rejected image %s: %s", file.filename, exc)
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    image_height, image_width = bitmap.shape[:2]
    view_width = width if width is not None else image_width
    view_height = height if height is not None else image_height
    if max(view_width, view_height) > settings.max_view_size:
        return _error(
            status.HTTP_400_BAD_REQUEST,
            f"View size {view_width}x{view_height} exceeds {settings.max_view_size}",
        )

    logger.info(
        "Annotating %dx%d image with %d face(s) on a %dx%d view",
        image_width,
        image_height,
        len(faces_by_id),
        view_width,
        view_height,
    )
    pool = _get_render_pool(request)
    try:
        png = await pool.render(bitmap, faces_by_id, view_width, view_height)
    except TimeoutError:
        logger.warning("Render queue full, rejecting request")
        return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "Render queue is full, try again later")

    return Response(
        content=png,
        media_type="image/png",
        headers={"X-Face-Count": str(len(faces_by_id))},
    )


@router.get(
    "/landmark-types",
    response_model=LandmarkTypesResponse,
    summary="List landmark types",
)
async def list_landmark_types() -> LandmarkTypesResponse:
    """Return the landmark types accepted in face payloads."""
    return LandmarkTypesResponse(
        landmark_types=[
            LandmarkTypeInfo(name=member.name, value=member.value, is_eye=member.is_eye)
            for member in LandmarkType
        ]
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health(request: Request) -> HealthResponse:
    """Return service health status."""
    pool = _get_render_pool(request)
    return HealthResponse(
        status="ok",
        concurrent_requests=pool.active_count,
        queue_depth=pool.queue_depth,
    )
