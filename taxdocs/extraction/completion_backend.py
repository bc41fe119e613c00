"""Prompt-completion extraction over an OpenAI-compatible chat model."""

import base64

from taxdocs.extraction.base import BaseExtractionBackend
from taxdocs.extraction.client_base import BaseCompletionClient, MessageContent
from taxdocs.extraction.exceptions import EmptyResponseError
from taxdocs.extraction.models import ExtractedTaxRecord, ExtractionRequest
from taxdocs.extraction.prompt_builder import build_instructions
from taxdocs.extraction.response_normalizer import (
    DEFAULT_CONFIDENCE,
    LAST_RESORT_CONFIDENCE,
    normalize_response,
)
from taxdocs.logging.logger import Log

_TRANSCRIPT_REQUEST = (
    "Extract tax information from this PDF text content. "
    "Here is the extracted text from the document:\n\n{transcript}\n\n"
    "Find real names, real SSNs, real dollar amounts, and real company names from this text."
)
_IMAGE_REQUEST = "Please extract tax information from this document image."
_PDF_REQUEST = (
    "Text could not be recovered from this PDF. "
    "Please extract tax information from the attached document."
)


class CompletionExtractionBackend(BaseExtractionBackend):
    """Extracts tax fields by prompting a chat completion model."""

    def __init__(
        self,
        *,
        client: BaseCompletionClient,
        model: str,
        temperature: float = 0.0,
        max_tokens: int = 1500,
        max_transcript_chars: int = 4000,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._max_tokens = max_tokens
        self._max_transcript_chars = max_transcript_chars

    def extract(self, request: ExtractionRequest) -> ExtractedTaxRecord:
        system_prompt = build_instructions(request.category)
        user_content, degraded_confidence = self._build_user_content(request)
        Log.debug(f"Extraction prompt:\n{system_prompt}")

        raw_response = self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            system_prompt=system_prompt,
            user_content=user_content,
        )
        Log.debug(f"AI raw response:\n{raw_response}")
        if not raw_response or not raw_response.strip():
            raise EmptyResponseError("No response from completion backend")

        record = normalize_response(
            raw_response,
            request.category,
            ocr_text=request.transcript,
            degraded_confidence=degraded_confidence,
        )
        Log.info(
            f"Completion extraction finished: {type(record).__name__} "
            f"confidence={record.confidence}"
        )
        return record

    def _build_user_content(self, request: ExtractionRequest) -> tuple[MessageContent, float]:
        """Pick the text path when a transcript exists, otherwise send the bytes inline."""
        if request.transcript:
            transcript = request.transcript[: self._max_transcript_chars]
            return _TRANSCRIPT_REQUEST.format(transcript=transcript), DEFAULT_CONFIDENCE

        data_url = _data_url(request.classification.mime_type, request.content)
        if request.classification.is_pdf:
            parts: list[dict[str, object]] = [
                {"type": "text", "text": _PDF_REQUEST},
                {
                    "type": "file",
                    "file": {
                        "filename": request.file_name or "document.pdf",
                        "file_data": data_url,
                    },
                },
            ]
            return parts, LAST_RESORT_CONFIDENCE

        parts = [
            {"type": "text", "text": _IMAGE_REQUEST},
            {"type": "image_url", "image_url": {"url": data_url}},
        ]
        return parts, DEFAULT_CONFIDENCE


def _data_url(mime_type: str, content: bytes) -> str:
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"
