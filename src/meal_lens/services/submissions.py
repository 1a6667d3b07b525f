"""Single in-flight meal submission workflow."""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from meal_lens.domain.analysis import AnalysisResult
from meal_lens.domain.errors import (
    AnalysisError,
    ConfigurationError,
    InputMissingError,
    MealLensError,
    NothingToRetryError,
    SubmissionInProgressError,
)
from meal_lens.domain.meals import MealRecord
from meal_lens.domain.submissions import (
    Failed,
    Idle,
    ReadyToSubmit,
    SelectedImage,
    Submitting,
    SubmissionState,
    Succeeded,
)
from meal_lens.services.analysis import AnalysisService
from meal_lens.services.images import ImagePreprocessor
from meal_lens.services.macros import MacroExtractor, RegexMacroExtractor
from meal_lens.services.meals import MealStore

_logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


@dataclass
class SubmissionWorkflow:
    """Drives one photo from selection to a stored meal record.

    Only one attempt may be in flight. A failed attempt keeps the selected
    image so ``retry`` can resend the same bytes.
    """

    analysis_service: AnalysisService
    preprocessor: ImagePreprocessor
    store: MealStore
    extractor: MacroExtractor = field(default_factory=RegexMacroExtractor)
    timeout_seconds: float | None = None
    clock: Callable[[], int] = _now_ms
    state: SubmissionState = field(default_factory=Idle)
    _last_id: int = field(default=0, init=False, repr=False)

    def select_image(self, image: SelectedImage) -> ReadyToSubmit:
        """Select a new image, replacing any previous selection or failure."""
        self._ensure_not_submitting()
        self.state = ReadyToSubmit(image=image)
        return self.state

    def clear(self) -> Idle:
        """Drop the current selection."""
        self._ensure_not_submitting()
        self.state = Idle()
        return self.state

    async def submit(self) -> Succeeded | Failed:
        """Analyze the selected image and store the resulting meal."""
        state = self.state
        if isinstance(state, Submitting):
            raise SubmissionInProgressError("A submission is already in progress")
        if isinstance(state, ReadyToSubmit | Failed):
            return await self._attempt(state.image)
        raise InputMissingError("No image selected")

    async def retry(self) -> Succeeded | Failed:
        """Resubmit the image from the last failed attempt."""
        state = self.state
        if isinstance(state, Submitting):
            raise SubmissionInProgressError("A submission is already in progress")
        if not isinstance(state, Failed):
            raise NothingToRetryError("There is no failed submission to retry")
        return await self._attempt(state.image)

    async def _attempt(self, image: SelectedImage) -> Succeeded | Failed:
        self.state = Submitting(image=image)
        try:
            record = await self._run(image)
        except MealLensError as exc:
            _logger.warning(
                "Meal submission failed: %s",
                exc,
                extra={"image_filename": image.filename},
            )
            self.state = Failed(image=image, error=exc)
            return self.state
        except asyncio.CancelledError:
            self.state = Failed(
                image=image, error=AnalysisError("The submission was cancelled.")
            )
            raise
        except Exception:
            _logger.exception(
                "Unexpected meal submission error",
                extra={"image_filename": image.filename},
            )
            self.state = Failed(
                image=image, error=AnalysisError("An unexpected error occurred.")
            )
            return self.state

        self.state = Idle()
        return Succeeded(record=record)

    async def _run(self, image: SelectedImage) -> MealRecord:
        result = await self._analyze(image)
        text = result.text or ""
        macros = self.extractor.extract(text)
        stored_image = await self.preprocessor.process_async(image.content)
        timestamp = self.clock()
        record = MealRecord(
            id=self._next_id(timestamp),
            timestamp=timestamp,
            image=stored_image,
            macros=macros,
            raw_text=text,
        )
        self.store.insert(record)
        _logger.info(
            "Meal stored",
            extra={"meal_id": record.id, "calories": record.macros.calories},
        )
        return record

    async def _analyze(self, image: SelectedImage) -> AnalysisResult:
        try:
            result = await asyncio.wait_for(
                self.analysis_service.analyze(image), timeout=self.timeout_seconds
            )
        except TimeoutError as exc:
            raise AnalysisError("Image analysis timed out") from exc
        if result.failed:
            if result.error_kind == "configuration":
                raise ConfigurationError(result.error)
            if result.error_kind == "input_missing":
                raise InputMissingError(result.error)
            raise AnalysisError(result.error)
        return result

    def _next_id(self, timestamp: int) -> str:
        stored = max(
            (
                int(meal.id)
                for meal in self.store.list_meals()
                if meal.id.isascii() and meal.id.isdigit()
            ),
            default=0,
        )
        self._last_id = max(timestamp, self._last_id + 1, stored + 1)
        return str(self._last_id)

    def _ensure_not_submitting(self) -> None:
        if isinstance(self.state, Submitting):
            raise SubmissionInProgressError("A submission is already in progress")
