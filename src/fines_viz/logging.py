from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_LEVEL_ENV = "FINES_VIZ_LOG_LEVEL"
NOISY_LOGGERS = ("matplotlib", "PIL", "urllib3")


def configure_logging(level: str | None = None) -> None:
    """Root logging for CLI commands; ``FINES_VIZ_LOG_LEVEL`` overrides the default."""
    resolved = (level or os.getenv(LOG_LEVEL_ENV) or "INFO").upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
