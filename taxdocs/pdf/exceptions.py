class PdfExtractionError(Exception):
    """Raised when text cannot be extracted from a PDF."""


class InsufficientTextError(PdfExtractionError):
    """Raised when the recovered transcript is too short to be useful."""
