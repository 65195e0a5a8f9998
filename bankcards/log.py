import logging
import logging.config
from os import environ

from yaml import safe_load

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def configure_logging() -> None:
    """Configure logging from environment variables.

    LOG_CONFIG points to a YAML file in `logging.config.dictConfig` format and
    wins over everything else. Otherwise LOG_LEVEL, LOG_FORMAT and LOG_FILE
    tune a plain stream (and optionally file) setup.
    """
    log_config_path = environ.get("LOG_CONFIG", None)
    if log_config_path is not None:
        with open(log_config_path, "r") as f:
            logging_config = safe_load(f.read())
        logging.config.dictConfig(logging_config)
        return

    log_level = environ.get("LOG_LEVEL", "INFO").upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(f"Invalid log level: {log_level}")
    log_format = environ.get(
        "LOG_FORMAT", "%(asctime)s   %(name)-32s %(levelname)-8s %(message)s"
    )
    log_file = environ.get("LOG_FILE", None)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(level=log_level, format=log_format, handlers=handlers)
    # uvicorn access lines carry request paths only, keep them at warning
    logging.getLogger("uvicorn.access").setLevel(
        max(logging.getLevelName(log_level), logging.WARNING)
    )
