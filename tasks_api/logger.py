import logging
import sys
from typing import Optional

from tasks_api.config import get_settings

settings = get_settings()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure root logging once and return the service logger.

    ``level`` overrides ``settings.log_level``. In debug mode SQL statements
    emitted by SQLAlchemy are logged too.
    """
    level_name = (level or settings.log_level).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Our own request log replaces the uvicorn access log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.debug else logging.WARNING
    )

    service_logger = logging.getLogger("tasks_api")
    service_logger.setLevel(log_level)
    return service_logger


logger = setup_logging()
