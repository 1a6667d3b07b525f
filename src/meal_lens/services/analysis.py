"""Meal photo analysis using a vision-capable LLM."""

import base64
import logging
from dataclasses import dataclass
from typing import Protocol

from meal_lens.domain.analysis import AnalysisResult
from meal_lens.domain.submissions import SelectedImage

MACRO_PROMPT = """
  Analyze the food in this image.

  Step 1: Estimate the grams of Protein, Carbs, and Fat.
  Step 2: Calculate the Total Calories strictly using this formula:
          (Protein * 4) + (Carbs * 4) + (Fat * 9).

  Step 3: Output ONLY the final result using this exact format:

  # ⚡ [Calculated Calories] Calories
  **Protein:** [Protein]g  |  **Carbs:** [Carbs]g  |  **Fat:** [Fat]g
"""

_logger = logging.getLogger(__name__)


class AnalysisClient(Protocol):
    """Interface for free-text image analysis."""

    async def describe(  # noqa: PLR0913
        self,
        *,
        model: str,
        image_data_url: str,
        prompt: str,
        reasoning_effort: str | None = None,
        temperature: float | None = None,
        store: bool = False,
    ) -> str:
        """Return the model's text answer for the image and prompt."""


@dataclass
class AnalysisService:
    """Sends meal photos to the configured client and reports text or error.

    Failures are reported in the result rather than raised, so callers
    only need to inspect ``AnalysisResult.error``.
    """

    client: AnalysisClient | None
    model: str
    reasoning_effort: str | None = None
    temperature: float | None = None
    store: bool = False
    prompt: str = MACRO_PROMPT

    async def analyze(self, image: SelectedImage) -> AnalysisResult:
        """Analyze a selected image."""
        if not image.content:
            return AnalysisResult(
                error="No image provided", error_kind="input_missing"
            )
        if self.client is None:
            return AnalysisResult(
                error="OPENAI_API_KEY is not set", error_kind="configuration"
            )
        try:
            text = await self.client.describe(
                model=self.model,
                image_data_url=to_data_url(image.content, image.media_type),
                prompt=self.prompt,
                reasoning_effort=self.reasoning_effort,
                temperature=self.temperature,
                store=self.store,
            )
        except Exception:
            _logger.exception(
                "Error analyzing image", extra={"image_filename": image.filename}
            )
            return AnalysisResult(
                error="Failed to analyze image", error_kind="analysis"
            )
        return AnalysisResult(text=text)


def to_data_url(image_bytes: bytes, media_type: str | None = None) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = media_type if _is_image_type(media_type) else None
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type or detect_mime_type(image_bytes)};base64,{encoded}"


def detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"


def _is_image_type(media_type: str | None) -> bool:
    return bool(media_type) and media_type.startswith("image/")
