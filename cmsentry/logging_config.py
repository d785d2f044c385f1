import logging
import pathlib
from logging.handlers import TimedRotatingFileHandler
from typing import Optional
from typing import Union


def setup_logging(
    level: str = 'warning',
    log_file: Optional[Union[str, pathlib.Path]] = None,
) -> logging.Logger:
    logger: logging.Logger = logging.getLogger('cmsentry')
    logger.setLevel(logging.DEBUG)

    # Handlers left from previous calls are replaced.
    teardown_logging()

    level = logging.getLevelName(level.upper())

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s - %(message)s"))
    console_handler.cmsentry = True
    logger.addHandler(console_handler)

    if log_file:
        log_file = pathlib.Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        # Rotates every day and keeps logs for 7 days
        file_handler = TimedRotatingFileHandler(log_file, when="midnight", interval=1, backupCount=7)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        ))
        file_handler.cmsentry = True
        logger.addHandler(file_handler)

    return logger


def teardown_logging() -> None:
    """Remove handlers added by `setup_logging`."""
    logger = logging.getLogger('cmsentry')
    for handler in list(logger.handlers):
        if getattr(handler, 'cmsentry', False):
            logger.removeHandler(handler)
            handler.close()
