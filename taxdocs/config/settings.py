from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"
    service_name: str = "tax-filing-app"
    api_host: str = "0.0.0.0"
    api_port: int = 3000

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "taxfiling"
    db_username: str = "taxfiling"
    db_password: str = "secret"

    uploads_root: str = "/app/uploads/documents"
    file_fetch_timeout_seconds: int = 30

    pdf_engine: str = "heuristic"
    min_transcript_chars: int = 50
    max_transcript_chars: int = 4000

    completion_provider: str = "openai"
    openai_api_key: str = ""
    openai_model_name: str = "gpt-4o-mini"
    openai_base_url: str = ""
    openai_timeout_seconds: int = 60
    openai_max_tokens: int = 1500
    openai_temperature: float = 0.0

    google_cloud_project_id: str = ""
    document_ai_processor_id: str = ""
    google_application_credentials: str = ""
    document_ai_location: str = "us"

    auth_secret: str = ""
    auth_algorithm: str = "HS256"

    processing_lock_timeout_seconds: int = 600
