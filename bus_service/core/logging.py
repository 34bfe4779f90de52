import logging

from bus_service.core.config import Settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_configured = False


def configure_logging(settings: Settings) -> None:
    """Configure root logging from settings. Later calls are no-ops."""
    global _configured
    if _configured:
        return

    level = getattr(logging, settings.LOG_LEVEL, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    _configured = True
