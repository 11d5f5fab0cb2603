import logging
from os import path
from typing import Optional

from .exceptions import ConfigurationError
from .internal.logger import TraceBridgeFormatter


DEFAULT_FILE_SIZE_BYTES = 15 << 20  # 15 MB


def configure_tracebridge_logger(config):
    # type: (...) -> None
    """Configures tracebridge log levels and file paths.

    Customization is possible with the environment variables:
        ``TRACEBRIDGE_DEBUG``, ``TRACEBRIDGE_LOG_FILE_LEVEL``, and ``TRACEBRIDGE_LOG_FILE``

    By default the ``tracebridge`` logger only has a stream handler and
    inherits its level from the root logger.
    """
    logger = logging.getLogger("tracebridge")
    if not any(isinstance(h.formatter, TraceBridgeFormatter) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(TraceBridgeFormatter())
        logger.addHandler(handler)

    if config.debug:
        logger.setLevel(logging.DEBUG)

    _configure_file_logger(logger, config)


def _configure_file_logger(logger, config):
    log_file_level = config.log_file_level.upper()
    try:
        file_log_level_value = getattr(logging, log_file_level)
    except AttributeError:
        raise ConfigurationError(
            "TRACEBRIDGE_LOG_FILE_LEVEL is invalid. Log level must be CRITICAL/ERROR/WARNING/INFO/DEBUG.",
            log_file_level,
        )
    _add_file_handler(logger=logger, log_path=config.log_file or None, log_level=file_log_level_value)


def _add_file_handler(
    logger: logging.Logger,
    log_path: Optional[str],
    log_level: int,
    max_file_bytes: int = DEFAULT_FILE_SIZE_BYTES,
):
    file_handler = None
    if log_path is not None:
        log_path = path.abspath(log_path)
        from logging.handlers import RotatingFileHandler

        file_handler = RotatingFileHandler(filename=log_path, mode="a", maxBytes=max_file_bytes, backupCount=1)
        log_format = "%(asctime)s %(levelname)s [%(name)s] [%(filename)s:%(lineno)d] - %(message)s"
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(log_format))
        logger.addHandler(file_handler)
        logger.debug("tracebridge logs will be routed to %s", log_path)
    return file_handler
