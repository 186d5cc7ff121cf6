"""Logging setup and the bot's flow/timing log helpers"""

import logging
import sys
from typing import Iterable, Optional, TextIO

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# HTTP and gRPC client libraries log every request at INFO/DEBUG
QUIET_LOGGERS = ('requests', 'urllib3', 'google', 'grpc', 'werkzeug')


class ColoredFormatter(logging.Formatter):
    """Colors the level name when writing to a terminal"""

    COLORS = {
        'DEBUG': '\033[36m',  # Cyan
        'INFO': '\033[32m',  # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',  # Red
        'CRITICAL': '\033[35m',  # Magenta
    }

    RESET = '\033[0m'

    def __init__(self, fmt: str = LOG_FORMAT, datefmt: str = DATE_FORMAT, use_color: bool = True):
        super().__init__(fmt, datefmt=datefmt)
        self.use_color = use_color

    def format(self, record):
        if not self.use_color or record.levelname not in self.COLORS:
            return super().format(record)

        levelname = record.levelname
        record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def setup_logging(level: str = 'INFO', log_file: Optional[str] = None,
                  quiet_loggers: Iterable[str] = QUIET_LOGGERS, stream: TextIO = sys.stdout):
    """Configure the root logger: console always, file when log_file is set"""
    console_handler = logging.StreamHandler(stream)
    console_handler.setFormatter(ColoredFormatter(use_color=stream.isatty()))

    handlers = [console_handler]
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), handlers=handlers, force=True)

    # Chatty client libraries only report problems
    for name in quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)


def log_message_flow(chat_id, state: str, next_state: str, success: bool = True):
    """Log one voice-pipeline transition for a chat"""
    logger = logging.getLogger('message_flow')
    status = "✅" if success else "❌"
    logger.info(f"{status} {chat_id} | {state} -> {next_state}")


def log_performance(operation: str, duration: float, success: bool = True, **details):
    """Log the duration of a blocking call, with optional key=value details"""
    logger = logging.getLogger('performance')
    status = "✅" if success else "❌"
    extra = ''.join(f" {key}={value}" for key, value in sorted(details.items()))
    logger.info(f"{status} {operation} completed in {duration:.3f}s{extra}")
