class ExtractionError(Exception):
    """Raised when an extraction backend fails."""


class ExtractionNetworkError(ExtractionError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""


class EmptyResponseError(ExtractionError):
    """Raised when a backend answers without any usable output."""


class BackendUnavailableError(ExtractionError):
    """Raised when a backend is not configured for use."""
