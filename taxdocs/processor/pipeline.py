from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from taxdocs.extraction.models import Classification, DocumentCategory, ExtractedTaxRecord
from taxdocs.processor.models import DocumentRef


@dataclass(slots=True)
class PipelineContext:
    document: DocumentRef
    caller_id: str
    claim: datetime | None = None
    raw_bytes: bytes = b""
    classification: Classification | None = None
    category: DocumentCategory = DocumentCategory.OTHER_TAX_DOCUMENT
    transcript: str | None = None
    record: ExtractedTaxRecord | None = None
    error_message: str = ""


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
