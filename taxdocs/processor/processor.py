from pathlib import Path

from taxdocs.config.settings import Settings
from taxdocs.database.repositories.documents_repository import DocumentsRepository
from taxdocs.extraction.factory import ExtractionBackendFactory
from taxdocs.logging.logger import Log
from taxdocs.pdf.factory import PdfExtractorFactory
from taxdocs.processor.exceptions import (
    DocumentAccessDeniedError,
    DocumentPersistenceError,
    MissingDocumentFileError,
    ProcessorError,
)
from taxdocs.processor.file_loader import FileLoader
from taxdocs.processor.models import ProcessingOutcome
from taxdocs.processor.pipeline import PipelineContext, PipelineStep
from taxdocs.processor.steps import (
    ClassifyStep,
    ExtractFieldsStep,
    ExtractTextStep,
    LoadBytesStep,
    MarkFailedStep,
    MarkProcessingStep,
    PersistCompletedStep,
)


class Processor:
    """Orchestrates the document extraction pipeline.

    Pipeline: lookup -> ownership -> claim -> load -> classify -> transcript
    -> extract -> persist. Errors before the claim leave the document
    untouched; errors after it mark the document FAILED (best-effort) and
    are re-raised. Status writes only land while this run still holds its
    claim token.
    """

    def __init__(
        self,
        *,
        doc_repo: DocumentsRepository,
        steps: list[PipelineStep],
        failed_step: PipelineStep,
    ) -> None:
        self._doc_repo = doc_repo
        self._steps = steps
        self._failed_step = failed_step

    def process(self, document_id: str, caller_id: str) -> ProcessingOutcome:
        """Run the full pipeline for a document on behalf of a caller."""
        Log.info(f"Processing document {document_id} for user {caller_id}")

        document = self._doc_repo.find_by_id(document_id)
        if not document.belongs_to(caller_id):
            raise DocumentAccessDeniedError("Unauthorized access to document")
        if not document.file_path:
            raise MissingDocumentFileError("No file associated with document")

        context = PipelineContext(document=document, caller_id=caller_id)
        try:
            for step in self._steps:
                context = step.run(context)
            if context.record is None:
                raise ProcessorError("Pipeline finished without an extraction record")
        except Exception as exc:
            # A lost claim means another run owns the row.
            if context.claim is not None and not isinstance(exc, DocumentPersistenceError):
                context.error_message = str(exc)
                self._mark_failed(context)
            raise

        Log.info(f"Document {document_id} processed successfully")
        return ProcessingOutcome(document_id=document_id, record=context.record)

    def _mark_failed(self, context: PipelineContext) -> None:
        try:
            self._failed_step.run(context)
        except Exception as exc:
            Log.error(f"Failed to update status for document {context.document.id}: {exc}")


def build_processor(
    settings: Settings,
    uploads_root: Path | None = None,
) -> Processor:
    """Build a Processor with all required adapters."""
    doc_repo = DocumentsRepository(settings.processing_lock_timeout_seconds)
    file_loader = FileLoader(
        uploads_root=uploads_root if uploads_root is not None else Path(settings.uploads_root),
        timeout_seconds=settings.file_fetch_timeout_seconds,
    )
    pdf_extractor = PdfExtractorFactory.create(settings)
    backend = ExtractionBackendFactory.create(settings)
    steps: list[PipelineStep] = [
        MarkProcessingStep(doc_repo),
        LoadBytesStep(file_loader),
        ClassifyStep(),
        ExtractTextStep(pdf_extractor),
        ExtractFieldsStep(backend),
        PersistCompletedStep(doc_repo),
    ]
    return Processor(
        doc_repo=doc_repo,
        steps=steps,
        failed_step=MarkFailedStep(doc_repo),
    )
