import logging
import sys

# Client libraries that log every request at INFO.
_CHATTY_LOGGERS = ("httpx", "httpcore", "openai", "google.auth", "urllib3")


class Log:
    """Service-wide logging facade.

    Every record goes through the ``taxdocs`` logger; callers pass fully
    formatted f-strings that name the document they are about.
    """

    _logger: logging.Logger = logging.getLogger("taxdocs")

    @classmethod
    def configure(cls, log_level: str, service_name: str = "taxdocs") -> None:
        """Attach one stdout handler and set levels for the service and its clients."""
        level = log_level.upper()
        cls._logger.setLevel(level)
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter(
                    f"%(asctime)s {service_name} [%(levelname)s] %(message)s"
                )
            )
            cls._logger.addHandler(handler)
        client_level = logging.DEBUG if level == "DEBUG" else logging.WARNING
        for name in _CHATTY_LOGGERS:
            logging.getLogger(name).setLevel(client_level)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        """Log a debug message. Prompts and raw model output go here only."""
        cls._logger.debug(message, extra=kwargs)

    @classmethod
    def exception(cls, message: str, **kwargs: object) -> None:
        """Log an error message with the active exception traceback."""
        cls._logger.exception(message, extra=kwargs)
