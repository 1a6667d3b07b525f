"""Models for analysis collaborator results."""

from typing import Literal

from pydantic import BaseModel

AnalysisErrorKind = Literal["input_missing", "configuration", "analysis"]


class AnalysisResult(BaseModel):
    """Free-text answer or error returned for one analyzed image."""

    text: str | None = None
    error: str | None = None
    error_kind: AnalysisErrorKind | None = None

    @property
    def failed(self) -> bool:
        """Return True when an error is reported, even alongside text."""
        return bool(self.error)
