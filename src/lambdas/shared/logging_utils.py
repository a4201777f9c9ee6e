"""
Secure logging utilities to prevent log injection and sensitive data exposure.

This module provides functions to sanitize data before logging, preventing:
- Log injection attacks (CWE-117, CWE-93)
- Exception messages carrying caller input into logs

Security References:
- OWASP Logging Cheat Sheet: https://cheatsheetseries.owasp.org/cheatsheets/Logging_Cheat_Sheet.html
"""

import re
from typing import Any

# Maximum length for logged user input to prevent log flooding
MAX_LOG_INPUT_LENGTH = 200


def sanitize_for_log(value: Any, max_length: int = MAX_LOG_INPUT_LENGTH) -> str:
    """
    Sanitize a value for safe logging by removing CRLF and limiting length.

    Role names and permission types come from callers, so they pass through
    here before landing in a log record.

    Args:
        value: Value to sanitize (will be converted to string)
        max_length: Maximum length of output (default: 200)

    Returns:
        Sanitized string safe for logging

    Example:
        >>> sanitize_for_log("ADMIN\\n[FAKE] role deleted")
        'ADMIN [FAKE] role deleted'
    """
    text = str(value)

    # Remove CRLF characters to prevent log injection
    text = text.replace("\r", " ").replace("\n", " ").replace("\t", " ")

    # Remove other control characters
    text = re.sub(r"[\x00-\x1f\x7f-\x9f]", " ", text)

    if len(text) > max_length:
        text = text[:max_length] + "..."

    return text


def get_safe_error_info(exception: Exception) -> dict[str, str]:
    """
    Extract safe information from an exception for logging.

    Returns only the exception type, NOT the message. Validation errors echo
    the rejected input, and store errors can include key values.

    Example:
        >>> try:
        ...     raise ValueError("user input here")
        ... except Exception as e:
        ...     get_safe_error_info(e)
        {'error_type': 'ValueError'}
    """
    return {"error_type": type(exception).__name__}
