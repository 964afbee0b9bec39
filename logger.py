import logging
import os
from logging.handlers import RotatingFileHandler

from config import AppSettings, get_settings

LOGGER_NAME = "doc_structurer"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_MAX_BYTES = 1_048_576
LOG_BACKUP_COUNT = 5

logger = logging.getLogger(LOGGER_NAME)
logger.propagate = False


def configure_logging(settings: AppSettings) -> logging.Logger:
    logger.setLevel(getattr(logging, settings.log_level, logging.INFO))
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT)
    log_dir = os.path.dirname(settings.log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    file_handler = RotatingFileHandler(
        settings.log_file, encoding="utf-8", maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if settings.log_to_stdout:
        stdout_handler = logging.StreamHandler()
        stdout_handler.setFormatter(formatter)
        logger.addHandler(stdout_handler)
    return logger


configure_logging(get_settings())


def saveToLog(message: str, logType: str = "INFO"):
    level_name = (logType or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    if logger.isEnabledFor(level):
        logger.log(level, message)
