"""
Logging configuration for the Polymarket auth client.

Every handler carries a CredentialRedactionFilter, so private keys,
API secrets and passphrases never reach log output even when they end
up inside an exception message.
"""

import copy
import logging
import logging.config
import re
from typing import Optional


LOGGER_NAME = "polymarket_auth"


class CredentialRedactionFilter(logging.Filter):
    """
    Security filter that redacts credentials from log records.

    - Ethereum private keys (64 hex chars, with or without 0x)
    - key=value / "key": "value" pairs for secrets and passphrases
    - long base64 / url-safe base64 strings (API secrets, HMAC signatures)

    Addresses and numeric token IDs are left alone.

    Usage:
        >>> handler = logging.StreamHandler()
        >>> handler.addFilter(CredentialRedactionFilter())
    """

    PRIVATE_KEY_PATTERN = re.compile(r'(?<![0-9a-fA-Fx])(?:0x)?[0-9a-fA-F]{64}(?![0-9a-fA-F])')
    API_SECRET_PATTERN = re.compile(
        r'((?:secret|passphrase|password|private_key)["\']?\s*[:=]\s*["\']?)[A-Za-z0-9+/_=-]{8,}["\']?',
        re.IGNORECASE
    )
    BASE64_SECRET_PATTERN = re.compile(r'[A-Za-z0-9+/_-]{40,}={0,2}')
    _SAFE_TOKEN = re.compile(r'(?:0x)?[0-9a-fA-F]{40}|[0-9]+')

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Redact credentials from log record.

        Returns:
            Always True (record is never dropped, just sanitized)
        """
        if record.args:
            # Render first so secrets passed as %-args are covered too
            record.msg = record.getMessage()
            record.args = None

        if record.msg:
            record.msg = self.redact(str(record.msg))

        if record.exc_info and not record.exc_text:
            record.exc_text = logging.Formatter().formatException(record.exc_info)
        if record.exc_text:
            record.exc_text = self.redact(record.exc_text)

        return True

    @classmethod
    def redact(cls, text: str) -> str:
        """Redact all credential patterns from text."""
        if not text:
            return text

        # Private keys first (most critical)
        text = cls.PRIVATE_KEY_PATTERN.sub('[REDACTED_KEY]', text)

        text = cls.API_SECRET_PATTERN.sub(r'\1[REDACTED]', text)

        def redact_base64(match: re.Match) -> str:
            token = match.group(0)
            if cls._SAFE_TOKEN.fullmatch(token):
                return token
            return token[:8] + '...[REDACTED]'

        return cls.BASE64_SECRET_PATTERN.sub(redact_base64, text)


DEFAULT_LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "filters": {
        "redact": {
            "()": CredentialRedactionFilter
        }
    },
    "formatters": {
        "standard": {
            "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S"
        },
        "detailed": {
            "format": (
                "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d "
                "- %(message)s (%(funcName)s)"
            ),
            "datefmt": "%Y-%m-%d %H:%M:%S"
        },
        "json": {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "format": "%(asctime)s %(name)s %(levelname)s %(message)s"
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "DEBUG",
            "formatter": "standard",
            "filters": ["redact"],
            "stream": "ext://sys.stdout"
        }
    },
    "loggers": {
        LOGGER_NAME: {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False
        }
    }
}


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    json_format: bool = False
) -> None:
    """
    Setup logging configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional rotating log file path
        json_format: Use JSON formatting (python-json-logger)
    """
    config = copy.deepcopy(DEFAULT_LOGGING_CONFIG)

    if level:
        config["loggers"][LOGGER_NAME]["level"] = level.upper()

    if log_file:
        config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "DEBUG",
            "formatter": "detailed",
            "filters": ["redact"],
            "filename": log_file,
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5
        }
        config["loggers"][LOGGER_NAME]["handlers"].append("file")

    if json_format:
        for handler in config["handlers"].values():
            handler["formatter"] = "json"

    logging.config.dictConfig(config)
