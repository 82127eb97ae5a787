"""contentflow - webhook-driven status orchestration for content jobs.

External workers (script generation, text-to-speech, video render, upload)
report progress through webhooks; this package advances the persisted job
through its pipeline in response. Call configure_logging() from entry points
before serving or running CLI commands.
"""

import logging

__version__ = "0.1.0"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for an entry point.

    Args:
        level: Log level name (e.g. "INFO", "DEBUG").

    Raises:
        ValueError: If level is not a known logging level name.
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.debug(f"Logging configured at {level.upper()}")
