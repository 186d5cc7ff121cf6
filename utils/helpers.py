"""Helper utility functions"""

from typing import Any, Optional

from .constants import APIConfig


def truncate_message(message: str, max_length: int = APIConfig.MAX_MESSAGE_LENGTH) -> str:
    """Truncate message to Telegram limits"""
    if len(message) <= max_length:
        return message

    return message[:max_length - 4] + " ..."


def safe_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    """Safely convert value to integer"""
    try:
        return int(value)
    except (ValueError, TypeError):
        return default


def mask_secret(value: Optional[str], visible: int = 6) -> str:
    """Show only the first characters of a credential"""
    if not value:
        return ''
    return value[:visible] + "..."


def escape_markdown(text: str) -> str:
    """Escape Telegram legacy Markdown control characters"""
    for char in ('_', '*', '`', '['):
        text = text.replace(char, '\\' + char)
    return text
