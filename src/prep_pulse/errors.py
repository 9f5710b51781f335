# ABOUTME: Exception taxonomy for news retrieval, key rotation, and PDF extraction.
# ABOUTME: Local failures are recovered by callers; only exhaustion reaches the user.

from enum import Enum


class PrepPulseError(Exception):
    """Base class for all application errors."""


class SourceError(PrepPulseError):
    """A single news provider failed (bad credential, transport failure, bad status)."""

    def __init__(self, source: str, message: str, status_code: int | None = None) -> None:
        self.source = source
        self.status_code = status_code
        detail = f"{source}: {message}"
        if status_code is not None:
            detail = f"{detail} (HTTP {status_code})"
        super().__init__(detail)


class AllSourcesFailedError(PrepPulseError):
    """Every candidate source either failed or returned nothing."""

    user_message = "All news sources failed. Please check your API keys and try again."

    def __init__(self, tried: list[str]) -> None:
        self.tried = tried
        super().__init__(self.user_message)


class RotationError(PrepPulseError):
    """Base class for key rotator failures."""


class NoCredentialsError(RotationError):
    """The key pool holds no usable credential."""

    def __init__(self, provider: str) -> None:
        self.provider = provider
        super().__init__(f"No valid {provider} API keys configured")


class ExhaustedError(RotationError):
    """All attempts across the key pool failed."""

    def __init__(self, provider: str, attempts: int, last_error: str | None = None) -> None:
        self.provider = provider
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"All {provider} API keys exhausted after {attempts} attempts")


class PdfErrorKind(str, Enum):
    """Classification of PDF extraction failures."""

    INVALID = "invalid"
    ENCRYPTED = "encrypted"
    EMPTY = "empty"
    WRONG_TYPE = "wrong_type"
    TOO_LARGE = "too_large"


class PdfExtractionError(PrepPulseError):
    """A single uploaded file could not be turned into text."""

    def __init__(self, filename: str, kind: PdfErrorKind, message: str) -> None:
        self.filename = filename
        self.kind = kind
        super().__init__(f"{filename}: {message}")
