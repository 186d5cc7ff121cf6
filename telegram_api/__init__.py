from .client import TelegramClient

__all__ = ["TelegramClient"]
