import pytest

from taxdocs.pdf.exceptions import InsufficientTextError, PdfExtractionError
from taxdocs.pdf.pymupdf_adapter import PyMuPdfAdapter


class TestPyMuPdfAdapter:
    def test_extract_returns_text(self, w2_pdf_bytes: bytes) -> None:
        adapter = PyMuPdfAdapter()
        result = adapter.extract(w2_pdf_bytes)
        assert "Employer: Acme Inc" in result

    def test_extract_multi_page(self, multi_page_pdf_bytes: bytes) -> None:
        adapter = PyMuPdfAdapter()
        result = adapter.extract(multi_page_pdf_bytes)
        assert result.index("Page one content") < result.index("Page two content")

    def test_extract_empty_pdf_raises_insufficient_text(self, empty_pdf_bytes: bytes) -> None:
        adapter = PyMuPdfAdapter()
        with pytest.raises(InsufficientTextError):
            adapter.extract(empty_pdf_bytes)

    def test_extract_raises_on_invalid_bytes(self) -> None:
        adapter = PyMuPdfAdapter()
        with pytest.raises(PdfExtractionError):
            adapter.extract(b"not a pdf")
