from taxdocs.config.settings import Settings
from taxdocs.pdf.base import BasePdfExtractor
from taxdocs.pdf.heuristic_adapter import HeuristicPdfAdapter
from taxdocs.pdf.pdfplumber_adapter import PdfPlumberAdapter
from taxdocs.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfExtractorFactory:
    """Creates the correct PDF extractor based on settings."""

    ADAPTERS: dict[str, type[BasePdfExtractor]] = {
        "heuristic": HeuristicPdfAdapter,
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfExtractor:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls(min_chars=settings.min_transcript_chars)  # type: ignore[call-arg]
