import io

import pdfplumber

from taxdocs.pdf.base import BasePdfExtractor
from taxdocs.pdf.exceptions import InsufficientTextError, PdfExtractionError


class PdfPlumberAdapter(BasePdfExtractor):
    """Extracts text from PDF using pdfplumber."""

    def __init__(self, min_chars: int = 50) -> None:
        self._min_chars = min_chars

    def extract(self, pdf_bytes: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
            text = "\n".join(pages).strip()
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber extraction failed: {exc}") from exc
        if len(text) <= self._min_chars:
            raise InsufficientTextError(
                f"pdfplumber recovered only {len(text)} chars"
            )
        return text
