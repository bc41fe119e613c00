from taxdocs.extraction.base import BaseExtractionBackend
from taxdocs.extraction.completion_backend import CompletionExtractionBackend
from taxdocs.extraction.document_ai_backend import DocumentAIExtractionBackend
from taxdocs.extraction.factory import ExtractionBackendFactory
from taxdocs.extraction.fallback import FallbackExtractionBackend

__all__ = [
    "BaseExtractionBackend",
    "CompletionExtractionBackend",
    "DocumentAIExtractionBackend",
    "ExtractionBackendFactory",
    "FallbackExtractionBackend",
]
