"""HTTP surface: document processing endpoint and liveness check."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from taxdocs.api.deps import get_current_identity, get_processor, get_settings
from taxdocs.api.security import AuthenticationError, Identity
from taxdocs.config.settings import Settings
from taxdocs.database.connection import close_pool, init_pool
from taxdocs.database.repositories.users_repository import UsersRepository
from taxdocs.logging.logger import Log
from taxdocs.processor.exceptions import (
    DocumentAccessDeniedError,
    DocumentBusyError,
    DocumentNotFoundError,
    MissingDocumentFileError,
)
from taxdocs.processor.models import ProcessingOutcome
from taxdocs.processor.processor import Processor, build_processor

_CLIENT_ERRORS: dict[type[Exception], tuple[int, str]] = {
    DocumentNotFoundError: (404, "Document not found"),
    DocumentAccessDeniedError: (403, "Unauthorized access to document"),
    MissingDocumentFileError: (400, "No file associated with document"),
    DocumentBusyError: (409, "Document is already being processed"),
}


def create_app(
    settings: Settings | None = None,
    *,
    processor: Processor | None = None,
    users_repo: UsersRepository | None = None,
) -> FastAPI:
    """Build the application; collaborators not injected are built at startup."""
    settings = settings if settings is not None else Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owns_pool = app.state.processor is None or app.state.users_repo is None
        if owns_pool:
            init_pool(settings)
            if app.state.processor is None:
                app.state.processor = build_processor(settings)
            if app.state.users_repo is None:
                app.state.users_repo = UsersRepository()
        Log.info(f"{settings.service_name} started ({settings.app_env})")
        try:
            yield
        finally:
            if owns_pool:
                close_pool()

    app = FastAPI(title="Tax document processing", lifespan=lifespan)
    app.state.settings = settings
    app.state.processor = processor
    app.state.users_repo = users_repo

    @app.exception_handler(AuthenticationError)
    async def _authentication_error_handler(
        request: Request, exc: AuthenticationError  # noqa: ARG001
    ) -> JSONResponse:
        return _error_response(401, str(exc) or "Unauthorized")

    @app.post("/documents/{document_id}/process")
    def process_document(
        document_id: str,
        identity: Identity = Depends(get_current_identity),
        doc_processor: Processor = Depends(get_processor),
    ) -> JSONResponse:
        try:
            outcome = doc_processor.process(document_id, identity.user_id)
        except tuple(_CLIENT_ERRORS) as exc:
            status_code, message = _CLIENT_ERRORS[type(exc)]
            Log.warning(f"Document {document_id} rejected with {status_code}: {exc}")
            return _error_response(status_code, message)
        except Exception as exc:
            Log.exception(f"Document processing error for document {document_id}")
            return JSONResponse(
                status_code=500,
                content={
                    "error": "Document processing failed",
                    "details": str(exc) or type(exc).__name__,
                },
            )
        return JSONResponse(status_code=200, content=outcome_body(outcome))

    @app.get("/health")
    def health(app_settings: Settings = Depends(get_settings)) -> JSONResponse:
        try:
            timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
            return JSONResponse(
                status_code=200,
                content={
                    "status": "healthy",
                    "timestamp": timestamp.replace("+00:00", "Z"),
                    "service": app_settings.service_name,
                },
            )
        except Exception as exc:
            Log.error(f"Health check failed: {exc}")
            return JSONResponse(
                status_code=503,
                content={"status": "unhealthy", "error": "Service unavailable"},
            )

    return app


def outcome_body(outcome: ProcessingOutcome) -> dict[str, object]:
    record = outcome.record
    body: dict[str, object] = {
        "documentType": record.document_type,
        "extractedData": record.to_payload(),
        "confidence": record.confidence,
    }
    if record.ocr_text is not None:
        body["ocrText"] = record.ocr_text
    return body


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})
