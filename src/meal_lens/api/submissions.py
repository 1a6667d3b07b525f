"""Meal photo submission endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, File, HTTPException, Request, UploadFile, status

from meal_lens.api.schemas import SubmissionOut
from meal_lens.domain.errors import (
    InputMissingError,
    NothingToRetryError,
    SubmissionInProgressError,
)
from meal_lens.domain.submissions import SelectedImage
from meal_lens.services.analysis import detect_mime_type

if TYPE_CHECKING:
    from meal_lens.containers import AppContainer

router = APIRouter(prefix="/submission", tags=["submission"])


@router.get("")
async def submission_state(request: Request) -> SubmissionOut:
    """Return the current submission state."""
    container: AppContainer = request.app.state.container
    return SubmissionOut.from_state(container.submission_workflow.state)


@router.put("/image")
async def select_image(
    request: Request, image: UploadFile = File(...)
) -> SubmissionOut:
    """Select the meal photo to analyze."""
    container: AppContainer = request.app.state.container
    content = await image.read()
    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="No image provided"
        )
    media_type = image.content_type or ""
    if not media_type.startswith("image/"):
        media_type = detect_mime_type(content)
    selected = SelectedImage(
        content=content, media_type=media_type, filename=image.filename
    )
    try:
        state = container.submission_workflow.select_image(selected)
    except SubmissionInProgressError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return SubmissionOut.from_state(state)


@router.delete("/image")
async def clear_image(request: Request) -> SubmissionOut:
    """Discard the selected photo."""
    container: AppContainer = request.app.state.container
    try:
        state = container.submission_workflow.clear()
    except SubmissionInProgressError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return SubmissionOut.from_state(state)


@router.post("")
async def submit(request: Request) -> SubmissionOut:
    """Analyze the selected photo and store the meal."""
    container: AppContainer = request.app.state.container
    try:
        outcome = await container.submission_workflow.submit()
    except InputMissingError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        )
    except SubmissionInProgressError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return SubmissionOut.from_state(outcome)


@router.post("/retry")
async def retry(request: Request) -> SubmissionOut:
    """Resubmit the photo from the last failed attempt."""
    container: AppContainer = request.app.state.container
    try:
        outcome = await container.submission_workflow.retry()
    except (NothingToRetryError, SubmissionInProgressError) as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    return SubmissionOut.from_state(outcome)
