from abc import ABC, abstractmethod

from taxdocs.extraction.models import ExtractedTaxRecord, ExtractionRequest


class BaseExtractionBackend(ABC):
    """Contract for all extraction backends."""

    @abstractmethod
    def extract(self, request: ExtractionRequest) -> ExtractedTaxRecord:
        """Turn document bytes (or their transcript) into a tax record.

        Args:
            request: Bytes, classification, category and optional transcript.

        Returns:
            A WellFormedRecord, or a DegradedRecord when the backend output
            could not be parsed.

        Raises:
            ExtractionError: when the backend fails or returns nothing.
        """
