"""Utility functions module"""

from .constants import (
    MessageTypes, Commands, Languages, APIConfig, SpeechDefaults, BotMessages
)
from .helpers import truncate_message, safe_int, mask_secret, escape_markdown
from .logging import (
    ColoredFormatter, setup_logging, log_message_flow, log_performance
)

__all__ = [
    # Constants
    'MessageTypes', 'Commands', 'Languages', 'APIConfig', 'SpeechDefaults', 'BotMessages',

    # Helpers
    'truncate_message', 'safe_int', 'mask_secret', 'escape_markdown',

    # Logging
    'ColoredFormatter', 'setup_logging', 'log_message_flow', 'log_performance'
]
