"""Logging configuration shared by the API process."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger.

    Uvicorn's access logger is quietened because requests are already logged
    by the middleware in `app.main`.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())
    root_logger.handlers = [handler]

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    # passlib probes bcrypt's version attribute and warns on newer releases
    logging.getLogger("passlib").setLevel(logging.ERROR)
