# app.py - Telegram voice transcription bot
import logging
import os
import time
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from config.settings import BotConfig, pipeline_config_from_dict
from speech.pipeline import VoiceMessagePipeline
from speech.providers.google_asr import GoogleSpeechASR
from telegram_api.client import TelegramClient
from utils.constants import APIConfig
from utils.logging import setup_logging
from workflow.handlers import MessageHandler

logger = logging.getLogger(__name__)


class TranscriptionBotWorkflow:
    """Wires the Telegram client, speech recognizer and message handler"""

    def __init__(self, config: Dict[str, Any], telegram_client=None, asr_service=None):
        self.config = config
        self.pipeline_config = pipeline_config_from_dict(config)

        self.telegram = telegram_client or TelegramClient(config, timeout=self.pipeline_config.request_timeout_seconds)
        self.asr = asr_service or GoogleSpeechASR(
            language_code=self.pipeline_config.language_code,
            encoding=self.pipeline_config.encoding,
        )
        self.pipeline = VoiceMessagePipeline(self.asr, self.telegram, self.pipeline_config)
        self.handler = MessageHandler(self.telegram, self.pipeline)

        logger.info("✅ Transcription workflow initialized")

    def handle_update(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Handle one webhook update; per-message failures never escape"""
        message = self.telegram.get_webhook_data(payload)
        if message is None:
            return {'type': 'ignored', 'success': True}

        try:
            return self.handler.handle_message(message)
        except Exception as e:
            logger.error(f"❌ Error handling update {payload.get('update_id')}: {e}")
            return {'type': 'error', 'success': False}

    def health_check(self) -> Dict:
        health_status = {
            'status': 'healthy',
            'components': {},
            'timestamp': time.time()
        }

        bot = self.telegram.get_me()
        if bot:
            health_status['components']['telegram'] = {
                'status': 'healthy',
                'username': bot.get('username')
            }
        else:
            health_status['components']['telegram'] = {'status': 'unhealthy'}
            health_status['status'] = 'degraded'

        health_status['components']['speech'] = {
            'status': 'configured',
            'language_code': self.pipeline_config.language_code,
            'max_voice_duration': self.pipeline_config.max_duration_seconds
        }

        return health_status


def create_flask_app(config: Optional[Dict[str, Any]] = None,
                     workflow: Optional[TranscriptionBotWorkflow] = None) -> Optional[Flask]:
    """Create the Flask webhook app"""
    app = Flask(__name__)

    if workflow is None:
        if config is None:
            try:
                config = BotConfig().get_config_dict()
                logger.info("✅ Configuration loaded and validated successfully")
            except ValueError as e:
                logger.error(f"❌ Configuration error: {e}")
                return None

        try:
            workflow = TranscriptionBotWorkflow(config)
        except Exception as e:
            logger.error(f"❌ Failed to initialize workflow: {e}")
            return None

    app.config['WORKFLOW'] = workflow

    def handle_webhook():
        if not workflow.telegram.verify_secret_token(request.headers.get(APIConfig.SECRET_TOKEN_HEADER)):
            return jsonify({'status': 'error', 'message': 'Forbidden'}), 403

        data = request.get_json(silent=True)
        if not data:
            return jsonify({'status': 'error', 'message': 'No data'}), 400

        if not workflow.telegram.validate_webhook_payload(data):
            return jsonify({'status': 'error', 'message': 'Invalid payload'}), 400

        result = workflow.handle_update(data)
        logger.info(f"✅ Processed update {data.get('update_id')}: {result.get('type')}")

        # Always acknowledge accepted updates so Telegram does not redeliver them
        return jsonify({'status': 'success'}), 200

    app.add_url_rule('/', 'root_webhook', handle_webhook, methods=['POST'])
    app.add_url_rule('/webhook', 'webhook', handle_webhook, methods=['POST'])

    @app.route('/health', methods=['GET'])
    def health_check():
        health = workflow.health_check()
        status_code = 200 if health['status'] == 'healthy' else 503
        return jsonify(health), status_code

    return app


def main():
    setup_logging(os.getenv('LOG_LEVEL', 'INFO'), os.getenv('LOG_FILE') or None)

    app = create_flask_app()
    if app is None:
        raise SystemExit(1)

    config = app.config['WORKFLOW'].config
    logger.info(f"🚀 Starting transcription bot on {config['host']}:{config['port']}")
    app.run(host=config['host'], port=config['port'], debug=config['debug_mode'], threaded=True)


if __name__ == '__main__':
    main()
