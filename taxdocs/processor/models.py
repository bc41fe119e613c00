from dataclasses import dataclass
from enum import Enum

from taxdocs.extraction.models import ExtractedTaxRecord


class ProcessingStatus(str, Enum):
    """Lifecycle flag stored on the document row."""

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class DocumentRef:
    """Domain model for a stored tax document (subset of DB columns)."""

    id: str
    tax_return_id: str | None
    owner_id: str | None
    return_owner_id: str | None
    file_path: str | None
    file_name: str | None
    mime_type: str | None
    document_type: str | None = None

    def belongs_to(self, user_id: str) -> bool:
        """True when the user owns the document directly or through its return."""
        return user_id in {self.owner_id, self.return_owner_id}


@dataclass(frozen=True)
class ProcessingOutcome:
    """What a successful run hands back to the caller."""

    document_id: str
    record: ExtractedTaxRecord
    status: ProcessingStatus = ProcessingStatus.COMPLETED
