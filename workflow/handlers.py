"""
Routes a parsed chat update to the voice pipeline or the text commands
"""
import logging
from datetime import datetime
from typing import Any, Dict

from speech.pipeline import PipelineState, VoiceMessagePipeline
from speech.types import VoiceAttachment
from utils.constants import BotMessages, Commands, MessageTypes
from utils.helpers import safe_int

logger = logging.getLogger(__name__)


class MessageHandler:
    """Dispatches one incoming message; each call is independent of the others"""

    def __init__(self, telegram_client, voice_pipeline: VoiceMessagePipeline):
        self.telegram = telegram_client
        self.voice_pipeline = voice_pipeline

    @property
    def reply_language(self) -> str:
        return self.voice_pipeline.config.reply_language

    @property
    def parse_mode(self) -> str:
        return self.voice_pipeline.config.parse_mode

    def handle_message(self, message_data: Dict[str, Any]) -> Dict[str, Any]:
        """Handle a message extracted from a webhook update"""
        chat_id = message_data.get('chat_id')
        message_type = message_data.get('type')

        if message_type == MessageTypes.VOICE:
            voice = message_data.get('voice') or {}
            attachment = VoiceAttachment(
                file_id=voice.get('file_id', ''),
                duration=safe_int(voice.get('duration'), 0),
            )
            logger.info(f"🎙️ Voice message detected for {chat_id}, routing to voice pipeline")
            state = self.voice_pipeline.process_voice_message(chat_id, attachment)
            return self._create_response(MessageTypes.VOICE, state.value,
                                         success=state is not PipelineState.FAILED)

        if message_type == MessageTypes.TEXT:
            return self._handle_text_message(chat_id, message_data.get('text', '').strip())

        logger.info(f"ℹ️ Ignoring unsupported message from {chat_id}")
        return self._create_response(MessageTypes.UNSUPPORTED, 'ignored')

    def _handle_text_message(self, chat_id, text: str) -> Dict[str, Any]:
        # Commands may arrive as "/start@BotName" in group chats
        command = text.split('@', 1)[0].split(' ', 1)[0].lower()

        if command == Commands.START:
            key = BotMessages.START
        elif command == Commands.ABOUT:
            key = BotMessages.ABOUT
        else:
            return self._create_response(MessageTypes.TEXT, 'ignored')

        sent = self.telegram.send_message(chat_id, BotMessages.get(self.reply_language, key),
                                          parse_mode=self.parse_mode)
        return self._create_response(MessageTypes.TEXT, key, success=sent)

    def _create_response(self, message_type: str, outcome: str, success: bool = True) -> Dict[str, Any]:
        """Create standardized handling summary"""
        return {
            'type': message_type,
            'outcome': outcome,
            'success': success,
            'timestamp': datetime.now().isoformat()
        }
