import os
import re
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from dotenv import load_dotenv

from utils.constants import APIConfig, Languages, SpeechDefaults
from utils.helpers import mask_secret

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

BOT_TOKEN_PATTERN = re.compile(r'^\d+:[A-Za-z0-9_-]+$')


@dataclass(frozen=True)
class PipelineConfig:
    """Settings the voice pipeline is constructed with."""
    language_code: str = SpeechDefaults.LANGUAGE_CODE
    encoding: str = SpeechDefaults.ENCODING
    max_duration_seconds: int = SpeechDefaults.MAX_VOICE_DURATION
    request_timeout_seconds: float = SpeechDefaults.REQUEST_TIMEOUT
    reply_language: str = Languages.ENGLISH
    parse_mode: str = APIConfig.PARSE_MODE


class BotConfig:
    """Centralized configuration management for the transcription bot"""

    def __init__(self):
        """Initialize configuration from environment variables with validation"""
        if not self._validate_required_environment():
            raise ValueError("Missing required environment variables. Check configuration.")

        # Core credentials
        self.bot_token = os.getenv('BOT_TOKEN', '').strip()
        self.webhook_secret_token = os.getenv('WEBHOOK_SECRET_TOKEN') or None

        # Speech configuration
        self.language_code = os.getenv('SPEECH_LANGUAGE_CODE', SpeechDefaults.LANGUAGE_CODE)
        self.max_voice_duration = int(os.getenv('MAX_VOICE_DURATION', str(SpeechDefaults.MAX_VOICE_DURATION)))
        self.request_timeout = float(os.getenv('REQUEST_TIMEOUT', str(SpeechDefaults.REQUEST_TIMEOUT)))
        self.reply_language = os.getenv('REPLY_LANGUAGE', Languages.ENGLISH).lower()

        # Server configuration
        self.port = int(os.environ.get('PORT', 3000))
        self.host = os.environ.get('HOST', '0.0.0.0')
        self.debug_mode = os.environ.get('ENVIRONMENT', 'development') == 'development'

        # Logging configuration
        self.log_level = os.getenv('LOG_LEVEL', 'INFO')
        self.log_file = os.getenv('LOG_FILE') or None

        if not self.validate_config():
            raise ValueError("Configuration validation failed. Check required fields.")

        self.print_safe_debug_info()

    def _validate_required_environment(self) -> bool:
        """Validate required environment variables before initialization"""
        missing_vars = [var for var in ('BOT_TOKEN',) if not os.getenv(var)]

        if missing_vars:
            logger.error(f"❌ Missing required environment variables: {', '.join(missing_vars)}")
            logger.error("Please set the required environment variables before starting the application.")
            return False

        return True

    def print_safe_debug_info(self):
        """Print safe debug information without exposing credentials"""
        logger.info("=" * 50)
        logger.info("🔧 TRANSCRIPTION BOT CONFIGURATION")
        logger.info("=" * 50)
        for key, value in self.get_safe_config().items():
            logger.info(f"{key.upper()}: {value if value not in (None, '') else 'ℹ️ Not set'}")
        logger.info("=" * 50)

    def validate_config(self) -> bool:
        """Validate required configuration"""
        validation_errors = []

        if not BOT_TOKEN_PATTERN.match(self.bot_token):
            validation_errors.append("BOT_TOKEN should look like '<bot id>:<secret>'")

        if self.max_voice_duration <= 0:
            validation_errors.append(f"MAX_VOICE_DURATION must be positive: {self.max_voice_duration}")

        if self.request_timeout <= 0:
            validation_errors.append(f"REQUEST_TIMEOUT must be positive: {self.request_timeout}")

        if self.reply_language not in (Languages.ENGLISH, Languages.ITALIAN):
            validation_errors.append(f"Unsupported REPLY_LANGUAGE: {self.reply_language}")

        if self.port < 1 or self.port > 65535:
            validation_errors.append(f"Invalid port number: {self.port}")

        if validation_errors:
            for error in validation_errors:
                logger.error(f"❌ Configuration error: {error}")
            return False

        logger.info("✅ Configuration validated successfully")
        return True

    def get_config_dict(self) -> Dict:
        """Return configuration as dictionary"""
        return {
            'bot_token': self.bot_token,
            'webhook_secret_token': self.webhook_secret_token,
            'language_code': self.language_code,
            'max_voice_duration': self.max_voice_duration,
            'request_timeout': self.request_timeout,
            'reply_language': self.reply_language,
            'port': self.port,
            'host': self.host,
            'debug_mode': self.debug_mode,
            'log_level': self.log_level,
            'log_file': self.log_file,
        }

    def get_safe_config(self) -> Dict:
        """Get configuration with sensitive data hidden"""
        safe_config = self.get_config_dict().copy()
        safe_config['bot_token'] = mask_secret(safe_config['bot_token'])
        if safe_config['webhook_secret_token']:
            safe_config['webhook_secret_token'] = mask_secret(safe_config['webhook_secret_token'], 3)
        return safe_config

    def get_pipeline_config(self) -> PipelineConfig:
        """Get the voice pipeline configuration record"""
        return pipeline_config_from_dict(self.get_config_dict())


def pipeline_config_from_dict(config: Dict, defaults: Optional[PipelineConfig] = None) -> PipelineConfig:
    """Build a PipelineConfig from a flat settings dictionary"""
    defaults = defaults or PipelineConfig()
    return PipelineConfig(
        language_code=config.get('language_code', defaults.language_code),
        encoding=config.get('encoding', defaults.encoding),
        max_duration_seconds=int(config.get('max_voice_duration', defaults.max_duration_seconds)),
        request_timeout_seconds=float(config.get('request_timeout', defaults.request_timeout_seconds)),
        reply_language=config.get('reply_language', defaults.reply_language),
        parse_mode=config.get('parse_mode', defaults.parse_mode),
    )
