import uvicorn

from taxdocs.api.app import create_app
from taxdocs.config.settings import Settings
from taxdocs.logging.logger import Log


def main() -> None:
    """Entry point: configure logging -> build app -> serve."""
    settings = Settings()
    Log.configure(settings.log_level, settings.service_name)
    app = create_app(settings)
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
