from typing import ClassVar

from taxdocs.config.settings import Settings
from taxdocs.extraction.base import BaseExtractionBackend
from taxdocs.extraction.client_base import BaseCompletionClient
from taxdocs.extraction.completion_backend import CompletionExtractionBackend
from taxdocs.extraction.document_ai_backend import DocumentAIExtractionBackend
from taxdocs.extraction.example_client_adapter import ExampleClientAdapter
from taxdocs.extraction.fallback import FallbackExtractionBackend
from taxdocs.extraction.openai_client_adapter import OpenAIClientAdapter


class ExtractionBackendFactory:
    """Creates the configured extraction backend chain."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> FallbackExtractionBackend:
        """Create the managed -> completion chain from application settings."""
        completion = CompletionExtractionBackend(
            client=cls.create_completion_client(settings),
            model=settings.openai_model_name,
            temperature=settings.openai_temperature,
            max_tokens=settings.openai_max_tokens,
            max_transcript_chars=settings.max_transcript_chars,
        )
        return FallbackExtractionBackend(
            primary=cls.create_document_ai_backend(settings),
            fallback=completion,
        )

    @classmethod
    def create_completion_client(cls, settings: Settings) -> BaseCompletionClient:
        provider = settings.completion_provider.lower()
        if provider == "example":
            return ExampleClientAdapter()
        base_url = cls._resolve_base_url(provider, settings)
        if provider == "openai" and not settings.openai_api_key:
            raise ValueError("openai_api_key is required for completion_provider=openai")
        return OpenAIClientAdapter(
            api_key=settings.openai_api_key,
            timeout_seconds=settings.openai_timeout_seconds,
            base_url=base_url,
        )

    @classmethod
    def create_document_ai_backend(
        cls, settings: Settings
    ) -> BaseExtractionBackend | None:
        """The managed tier exists only when its whole configuration is present."""
        required = (
            settings.google_cloud_project_id,
            settings.document_ai_processor_id,
            settings.google_application_credentials,
        )
        if not all(value.strip() for value in required):
            return None
        return DocumentAIExtractionBackend(
            project_id=settings.google_cloud_project_id,
            location=settings.document_ai_location,
            processor_id=settings.document_ai_processor_id,
            credentials_path=settings.google_application_credentials,
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return settings.openai_base_url.strip() or None
        if provider == "openai_compatible":
            url = settings.openai_base_url.strip()
            if not url:
                raise ValueError(
                    "openai_base_url is required for completion_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return settings.openai_base_url.strip() or default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(
            f"Unknown completion provider '{provider}'. Choose from: {supported}"
        )
