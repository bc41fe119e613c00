import pymupdf

from taxdocs.pdf.base import BasePdfExtractor
from taxdocs.pdf.exceptions import InsufficientTextError, PdfExtractionError


class PyMuPdfAdapter(BasePdfExtractor):
    """Extracts text from PDF using PyMuPDF."""

    def __init__(self, min_chars: int = 50) -> None:
        self._min_chars = min_chars

    def extract(self, pdf_bytes: bytes) -> str:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = [page.get_text() for page in doc]
            text = "\n".join(pages).strip()
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf extraction failed: {exc}") from exc
        if len(text) <= self._min_chars:
            raise InsufficientTextError(f"pymupdf recovered only {len(text)} chars")
        return text
