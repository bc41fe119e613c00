from taxdocs.extraction.base import BaseExtractionBackend
from taxdocs.extraction.models import ExtractedTaxRecord, ExtractionRequest
from taxdocs.logging.logger import Log


class FallbackExtractionBackend(BaseExtractionBackend):
    """Managed service first when configured, prompt completion otherwise.

    Any failure of the primary tier is logged and replaced by the fallback
    tier's result; only the fallback tier's errors reach the caller.
    """

    def __init__(
        self,
        *,
        primary: BaseExtractionBackend | None,
        fallback: BaseExtractionBackend,
    ) -> None:
        self._primary = primary
        self._fallback = fallback

    @property
    def has_primary(self) -> bool:
        return self._primary is not None

    def extract(self, request: ExtractionRequest) -> ExtractedTaxRecord:
        if self._primary is not None:
            try:
                return self._primary.extract(request)
            except Exception as exc:
                Log.warning(
                    f"{type(self._primary).__name__} failed, falling back to "
                    f"{type(self._fallback).__name__}: {exc}"
                )
        return self._fallback.extract(request)
