from datetime import datetime
from typing import Any

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from taxdocs.database.connection import get_connection
from taxdocs.processor.exceptions import DocumentNotFoundError, DocumentPersistenceError
from taxdocs.processor.models import DocumentRef, ProcessingStatus


class DocumentsRepository:
    """Database operations for the documents table."""

    def __init__(self, lock_timeout_seconds: int = 600) -> None:
        self._lock_timeout_seconds = lock_timeout_seconds

    def find_by_id(self, document_id: str) -> DocumentRef:
        """Find a document and the owner of its tax return.

        Raises:
            DocumentNotFoundError: if no document with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT d.id, d.tax_return_id, d.user_id AS owner_id,
                           tr.user_id AS return_owner_id, d.file_path,
                           d.file_name, d.mime_type, d.document_type
                    FROM documents d
                    LEFT JOIN tax_returns tr ON tr.id = d.tax_return_id
                    WHERE d.id = %s
                    """,
                    (document_id,),
                )
                row = cur.fetchone()

        if row is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")

        return DocumentRef(
            id=str(row["id"]),
            tax_return_id=_optional_str(row["tax_return_id"]),
            owner_id=_optional_str(row["owner_id"]),
            return_owner_id=_optional_str(row["return_owner_id"]),
            file_path=row["file_path"],
            file_name=row["file_name"],
            mime_type=row["mime_type"],
            document_type=row["document_type"],
        )

    def mark_processing(self, document_id: str) -> datetime | None:
        """Claim the document for one run.

        The transition succeeds from any state except a PROCESSING claim
        younger than the lock timeout. Returns the claim token (the row's new
        updated_at), or None when another run holds the document.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE documents
                    SET processing_status = %s, updated_at = clock_timestamp()
                    WHERE id = %s
                      AND (processing_status IS DISTINCT FROM %s
                           OR updated_at < NOW() - %s * INTERVAL '1 second')
                    RETURNING updated_at
                    """,
                    (
                        ProcessingStatus.PROCESSING.value,
                        document_id,
                        ProcessingStatus.PROCESSING.value,
                        self._lock_timeout_seconds,
                    ),
                )
                row = cur.fetchone()
            conn.commit()
        return None if row is None else row[0]

    def mark_completed(
        self,
        document_id: str,
        claim: datetime,
        extracted_data: dict[str, Any],
        ocr_text: str | None,
    ) -> None:
        """Persist the extraction result and finish the run holding ``claim``.

        Raises:
            DocumentPersistenceError: if the claim was lost to another run.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE documents
                    SET processing_status = %s,
                        extracted_data = %s,
                        ocr_text = %s,
                        processed_at = NOW(),
                        updated_at = NOW()
                    WHERE id = %s AND processing_status = %s AND updated_at = %s
                    """,
                    (
                        ProcessingStatus.COMPLETED.value,
                        Jsonb(extracted_data),
                        ocr_text,
                        document_id,
                        ProcessingStatus.PROCESSING.value,
                        claim,
                    ),
                )
                if cur.rowcount == 0:
                    raise DocumentPersistenceError(
                        f"Document {document_id} is no longer held by this run"
                    )
            conn.commit()

    def mark_failed(self, document_id: str, claim: datetime) -> bool:
        """Fail the run holding ``claim``.

        Returns False, leaving the row untouched, when the claim was lost.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE documents
                    SET processing_status = %s, updated_at = NOW()
                    WHERE id = %s AND processing_status = %s AND updated_at = %s
                    """,
                    (
                        ProcessingStatus.FAILED.value,
                        document_id,
                        ProcessingStatus.PROCESSING.value,
                        claim,
                    ),
                )
                failed = cur.rowcount == 1
            conn.commit()
        return failed


def _optional_str(value: object) -> str | None:
    return None if value is None else str(value)
