"""mlops_parser observability: structured logging.

Public API:
    get_logger(name)      - Event logger (``logger.info("event", key=value)``)
    setup_logging(cfg)    - Attach the configured formatter and destination
    shutdown_logging()    - Detach and close that handler
"""

from mlops_parser.observability.config import ObservabilityConfig
from mlops_parser.observability.logging import (
    EventLogger,
    get_logger,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    "EventLogger",
    "ObservabilityConfig",
    "get_logger",
    "setup_logging",
    "shutdown_logging",
]
