from taxdocs.database.repositories.documents_repository import DocumentsRepository
from taxdocs.extraction.base import BaseExtractionBackend
from taxdocs.extraction.models import DocumentCategory, ExtractionRequest
from taxdocs.logging.logger import Log
from taxdocs.pdf.base import BasePdfExtractor
from taxdocs.pdf.exceptions import PdfExtractionError
from taxdocs.processor.classifier import classify
from taxdocs.processor.exceptions import DocumentBusyError
from taxdocs.processor.file_loader import FileLoader
from taxdocs.processor.pipeline import PipelineContext, PipelineStep


class MarkProcessingStep(PipelineStep):
    def __init__(self, doc_repo: DocumentsRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        claim = self._doc_repo.mark_processing(context.document.id)
        if claim is None:
            raise DocumentBusyError(
                f"Document {context.document.id} is already being processed"
            )
        context.claim = claim
        Log.info(f"Document {context.document.id} marked as processing")
        return context


class MarkFailedStep(PipelineStep):
    def __init__(self, doc_repo: DocumentsRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.claim is None:
            return context
        if not self._doc_repo.mark_failed(context.document.id, context.claim):
            Log.warning(
                f"Document {context.document.id} claim was lost, status left unchanged: "
                f"{context.error_message}"
            )
            return context
        Log.error(
            f"Document {context.document.id} marked as failed: {context.error_message}"
        )
        return context


class LoadBytesStep(PipelineStep):
    def __init__(self, file_loader: FileLoader) -> None:
        self._file_loader = file_loader

    def run(self, context: PipelineContext) -> PipelineContext:
        context.raw_bytes = self._file_loader.load(context.document.file_path)  # type: ignore[arg-type]
        Log.info(f"Loaded {len(context.raw_bytes)} bytes for document {context.document.id}")
        return context


class ClassifyStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        document = context.document
        context.classification = classify(
            document.file_name, document.file_path, document.mime_type
        )
        context.category = DocumentCategory.from_label(document.document_type)
        Log.info(
            f"Document {document.id} classified as {context.classification.kind.value}, "
            f"category {context.category.value}"
        )
        return context


class ExtractTextStep(PipelineStep):
    """Recover a transcript from PDFs; a failed recovery means sending the bytes instead."""

    def __init__(self, pdf_extractor: BasePdfExtractor) -> None:
        self._pdf_extractor = pdf_extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.classification is None or not context.classification.is_pdf:
            return context
        try:
            context.transcript = self._pdf_extractor.extract(context.raw_bytes)
        except PdfExtractionError as exc:
            context.transcript = None
            Log.warning(
                f"Text extraction failed for document {context.document.id}, "
                f"falling back to document payload: {exc}"
            )
            return context
        Log.info(
            f"Extracted {len(context.transcript)} chars from document {context.document.id}"
        )
        return context


class ExtractFieldsStep(PipelineStep):
    def __init__(self, backend: BaseExtractionBackend) -> None:
        self._backend = backend

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.classification is None:
            raise ValueError("PipelineContext.classification must be set before extraction")
        request = ExtractionRequest(
            content=context.raw_bytes,
            classification=context.classification,
            category=context.category,
            file_name=context.document.file_name,
            transcript=context.transcript,
        )
        context.record = self._backend.extract(request)
        Log.info(
            f"Extracted fields for document {context.document.id}: "
            f"{context.record.document_type} confidence={context.record.confidence}"
        )
        return context


class PersistCompletedStep(PipelineStep):
    def __init__(self, doc_repo: DocumentsRepository) -> None:
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.record is None or context.claim is None:
            raise ValueError("PipelineContext.record and claim must be set before persist")
        self._doc_repo.mark_completed(
            context.document.id,
            context.claim,
            extracted_data=context.record.to_payload(),
            ocr_text=context.record.ocr_text,
        )
        Log.info(f"Document {context.document.id} marked as completed")
        return context
