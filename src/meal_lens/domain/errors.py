"""Error types raised across the meal capture pipeline."""


class MealLensError(Exception):
    """Base class for meal capture errors."""


class InputMissingError(MealLensError):
    """Raised when a submission is requested without a selected image."""


class ConfigurationError(MealLensError):
    """Raised when a required setting, such as an API key, is absent."""


class AnalysisError(MealLensError):
    """Raised when the analysis collaborator fails or reports an error."""


class ImageProcessingError(MealLensError):
    """Base class for image preprocessing failures."""


class DecodeError(ImageProcessingError):
    """Raised when the input bytes cannot be decoded as an image."""


class RenderSurfaceError(ImageProcessingError):
    """Raised when the output image cannot be drawn or encoded."""


class PersistedStateCorruptError(MealLensError):
    """Raised when stored meal data does not match the expected shape."""


class SubmissionInProgressError(MealLensError):
    """Raised when an action conflicts with an in-flight submission."""


class NothingToRetryError(MealLensError):
    """Raised when retry is requested without a failed attempt."""
