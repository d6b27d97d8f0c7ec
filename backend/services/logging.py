"""
Logging module with sanitization for sensitive data.
Provides secure logging that masks API keys and other secrets.
"""

import logging
import re
from typing import Optional

from backend.config import get_settings


# Patterns for sensitive data that should be masked in logs
SENSITIVE_PATTERNS = [
    (re.compile(r'(AIza[0-9A-Za-z_-]{30,})'), 'AIza***REDACTED***'),  # Google keys
    (re.compile(r'(sk-ant-[a-zA-Z0-9_-]{20,})'), 'sk-ant-***REDACTED***'),  # Anthropic keys
    (re.compile(r'(sk-(?!ant-)[a-zA-Z0-9_-]{20,})'), 'sk-***REDACTED***'),  # OpenAI keys
    (re.compile(r'(api[_-]?key["\s:=]+)["\']?([a-zA-Z0-9_-]{20,})["\']?', re.IGNORECASE), r'\1***REDACTED***'),
    (re.compile(r'(bearer\s+)([a-zA-Z0-9_.-]+)', re.IGNORECASE), r'\1***REDACTED***'),
]


def sanitize_message(message: str) -> str:
    """
    Sanitize a message by masking sensitive data patterns.

    Args:
        message: The message to sanitize

    Returns:
        The sanitized message with sensitive data masked
    """
    sanitized = message
    for pattern, replacement in SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


def sanitize_error(error: Exception) -> str:
    """Sanitize an exception message for safe display/logging."""
    return sanitize_message(str(error))


class SanitizingFormatter(logging.Formatter):
    """
    A logging formatter that sanitizes sensitive data from log messages.
    """

    def format(self, record: logging.LogRecord) -> str:
        record.msg = sanitize_message(record.getMessage())
        record.args = ()
        return super().format(record)


def setup_logging(name: Optional[str] = None) -> logging.Logger:
    """
    Set up and return a logger with sanitization enabled.

    Args:
        name: The logger name. Defaults to the application logger.

    Returns:
        A configured logger instance with sanitization
    """
    settings = get_settings()

    logger = logging.getLogger(name or "paper_critic")

    # Avoid adding handlers multiple times
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(SanitizingFormatter(settings.log_format))
        logger.addHandler(handler)

    logger.setLevel(getattr(logging, settings.log_level))

    return logger


# Create a default application logger
logger = setup_logging("paper_critic")
