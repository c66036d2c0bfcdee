import logging
import sys
from typing import Optional

DEFAULT_FORMAT = "[%(asctime)s] %(levelname)s %(name)s - %(message)s"


def setup_logging(level: str = "INFO", format_string: Optional[str] = None) -> logging.Logger:
    """
    Configure root logging for the dashboard service.

    Log records go to stdout so they end up in the container log.
    """
    logging.basicConfig(
        level=level.upper(),
        format=format_string or DEFAULT_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logger = logging.getLogger("vm_dashboard")
    logger.info("Logging initialized (level=%s)", level.upper())
    return logger
