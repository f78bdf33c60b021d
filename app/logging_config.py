"""
Logging Setup
Context-labeled log lines for API, import, and certificate pipeline output
"""

import json
import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "eventcert"

_configured = False


class ContextFormatter(logging.Formatter):
    """Formats records as `[time] [LEVEL] [CONTEXT] message | Data: {...}`"""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
    }

    def format(self, record: logging.LogRecord) -> str:
        level = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        context = record.name.rsplit(".", 1)[-1] if record.name != ROOT_LOGGER_NAME else "APP"
        timestamp = self.formatTime(record, "%Y-%m-%dT%H:%M:%S")
        line = f"[{timestamp}] [{level}] [{context}] {record.getMessage()}"

        data = getattr(record, "data", None)
        if data:
            line += f" | Data: {json.dumps(data, default=str)}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure the application logger once; later calls only adjust the level"""
    global _configured

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if level:
        logger.setLevel(level.upper())

    if _configured:
        return logger

    if not level:
        logger.setLevel(logging.INFO)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ContextFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    _configured = True
    return logger


def get_logger(context: str) -> logging.Logger:
    """Child logger for a context label such as `CERT` or `IMPORT`"""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{context}")


def reset_logging() -> None:
    """Forget handler configuration. Used by tests."""
    global _configured
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.propagate = True
    _configured = False
