"""Sanitized logging utilities for the duplicate-store engine.

Context passed as keyword arguments is serialized to JSON and scrubbed of
emails, tokens and phone numbers before it reaches the log output.
"""
import json
import logging
import re
from typing import Any, Optional

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

logger = logging.getLogger('storedup')

_max_json_length = 1000


def configure_logging(level: str = "INFO", fmt: Optional[str] = None,
                      max_json_length: Optional[int] = None) -> None:
    """Apply level, format and context length to the storedup logger.

    Args:
        level: Logging level name (DEBUG, INFO, ...)
        fmt: Optional format string for a dedicated handler
        max_json_length: Optional cap for serialized log context
    """
    global _max_json_length
    if max_json_length is not None:
        _max_json_length = max_json_length
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if fmt:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.handlers = [handler]
        logger.propagate = False


def sanitize_text(text: str) -> str:
    """Remove sensitive information from text.

    Args:
        text: Input text that may contain sensitive data

    Returns:
        Sanitized text with sensitive patterns replaced
    """
    if not text:
        return text

    # Email addresses
    text = re.sub(r'[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}', '<email>', text)

    # Connection strings with credentials
    text = re.sub(r'([a-z+]+://)[^:/\s]+:[^@/\s]+@', r'\1<credentials>@', text)

    # API keys and tokens (common patterns)
    text = re.sub(r'sk-[a-zA-Z0-9]{20,}', '<api-key>', text)
    text = re.sub(r'[a-zA-Z0-9]{32,}', '<token>', text)

    # Phone numbers (WhatsApp links carry them in clear)
    text = re.sub(r'\+?\d{10,15}', '<phone>', text)

    return text


def safe_json(obj: Any, max_length: Optional[int] = None) -> str:
    """Safely serialize object to JSON with sensitive data sanitized.

    Args:
        obj: Object to serialize
        max_length: Maximum length of output string; defaults to the
            configured context length

    Returns:
        Sanitized JSON string
    """
    if max_length is None:
        max_length = _max_json_length

    try:
        json_str = json.dumps(obj, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return "<unable to serialize>"

    sanitized = sanitize_text(json_str)
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + "... [truncated]"
    return sanitized


def log_info(message: str, **kwargs) -> None:
    """Log info message with optional sanitized context."""
    if kwargs:
        logger.info(f"{message} | Context: {safe_json(kwargs)}")
    else:
        logger.info(message)


def log_warning(message: str, **kwargs) -> None:
    """Log warning message with optional sanitized context."""
    if kwargs:
        logger.warning(f"{message} | Context: {safe_json(kwargs)}")
    else:
        logger.warning(message)


def log_error(message: str, **kwargs) -> None:
    """Log error message with optional sanitized context."""
    if kwargs:
        logger.error(f"{message} | Context: {safe_json(kwargs)}")
    else:
        logger.error(message)


def log_debug(message: str, **kwargs) -> None:
    """Log debug message with optional sanitized context."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    if kwargs:
        logger.debug(f"{message} | Context: {safe_json(kwargs)}")
    else:
        logger.debug(message)


def log_duplicate_detection(duplicate_type: str, store_id: Any, **kwargs) -> None:
    """Log a positive duplicate match.

    Args:
        duplicate_type: Kind of match (name, handle, social_link)
        store_id: Identifier of the existing store
        **kwargs: Additional context
    """
    log_info("Duplicate store detected",
             duplicate_type=duplicate_type,
             existing_store_id=store_id,
             **kwargs)
