import os
import logging
from logging.handlers import RotatingFileHandler
from typing import Dict, Optional

from fastapi import status

import config

# --- LOGGING SETUP ---

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'


def setup_logging(level: str = config.LOG_LEVEL, log_dir: Optional[str] = config.LOG_DIR) -> logging.Logger:
    """Configure structured logging with optional rotation"""
    logger = logging.getLogger("obscure_id")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not logger.handlers:
        formatter = logging.Formatter(LOG_FORMAT)

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            file_handler = RotatingFileHandler(
                os.path.join(log_dir, "obscure_id.log"),
                maxBytes=10_485_760,
                backupCount=5
            )
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger

logger = setup_logging()

# --- CODEC EXCEPTIONS ---

class ObscureIdError(Exception):
    """Base class for every failure raised by the id codec."""


class InvalidArgumentError(ObscureIdError, TypeError):
    """Wrong input type, malformed randomness or a character outside the charset."""


class IdRangeError(ObscureIdError, ValueError):
    """Id or length outside the range the configuration can address."""


class ConfigurationError(IdRangeError):
    """The generator configuration violates its invariants."""


class PermutationError(ObscureIdError, AssertionError):
    """Permutation placement ran out of free slots. Indicates a codec bug."""

# --- HTTP STATUS MAPPING ---

# Most specific classes first; ConfigurationError is also an IdRangeError.
ERROR_STATUS_CODES: Dict[type, int] = {
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    PermutationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    InvalidArgumentError: status.HTTP_400_BAD_REQUEST,
    IdRangeError: 422,
}


def status_code_for(exc: ObscureIdError) -> int:
    """Maps a codec error onto the HTTP status the API answers with."""
    for error_type, status_code in ERROR_STATUS_CODES.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR
