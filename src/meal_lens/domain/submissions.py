"""Domain models for the meal submission workflow."""

import base64
from dataclasses import dataclass

from meal_lens.domain.errors import MealLensError
from meal_lens.domain.meals import MealRecord


@dataclass(frozen=True)
class SelectedImage:
    """Image picked by the user and waiting to be analyzed."""

    content: bytes
    media_type: str
    filename: str | None = None

    @property
    def preview(self) -> str:
        """Return the original bytes as a data URL for previewing."""
        encoded = base64.b64encode(self.content).decode("utf-8")
        return f"data:{self.media_type};base64,{encoded}"


@dataclass(frozen=True)
class Idle:
    """No image is selected."""


@dataclass(frozen=True)
class ReadyToSubmit:
    """An image is selected and can be submitted."""

    image: SelectedImage


@dataclass(frozen=True)
class Submitting:
    """An analysis call is in flight for the selected image."""

    image: SelectedImage


@dataclass(frozen=True)
class Succeeded:
    """The attempt produced a stored meal record."""

    record: MealRecord


@dataclass(frozen=True)
class Failed:
    """The attempt failed; the image is kept so it can be retried."""

    image: SelectedImage
    error: MealLensError

    @property
    def message(self) -> str:
        return str(self.error) or "An unexpected error occurred."


SubmissionState = Idle | ReadyToSubmit | Submitting | Succeeded | Failed
