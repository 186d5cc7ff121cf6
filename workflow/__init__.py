"""Message routing for incoming chat updates"""

from .handlers import MessageHandler

__all__ = ['MessageHandler']
