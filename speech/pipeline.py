import enum
import logging
import time
from typing import Optional

from config.settings import PipelineConfig
from utils.constants import BotMessages
from utils.helpers import escape_markdown
from utils.logging import log_message_flow, log_performance

from .aggregator import aggregate_segments
from .asr_service import ASRService
from .exceptions import DeadlineExceeded, FetchError, VoicePipelineError
from .ogg_opus import extract_sample_rate
from .types import AudioBlob, Transcription, VoiceAttachment

logger = logging.getLogger(__name__)


class PipelineState(enum.Enum):
    RECEIVED = 'received'
    DURATION_CHECKED = 'duration_checked'
    DOWNLOADED = 'downloaded'
    RATE_EXTRACTED = 'rate_extracted'
    RECOGNIZED = 'recognized'
    AGGREGATED = 'aggregated'
    REPLIED = 'replied'
    EMPTY = 'empty'
    REJECTED = 'rejected'
    FAILED = 'failed'


class _Deadline:
    """Time budget shared by the blocking calls of one message."""

    def __init__(self, seconds: float):
        self.expires_at = time.monotonic() + seconds

    def remaining(self, stage: str) -> float:
        left = self.expires_at - time.monotonic()
        if left <= 0:
            raise DeadlineExceeded(f"request deadline exceeded before {stage}")
        return left


class VoiceMessagePipeline:
    """Duration check → download → sample rate → ASR → aggregate → reply, for one voice note.

    The messenger is the chat collaborator: it must provide
    ``download_file(file_id, timeout=...) -> Optional[bytes]`` and
    ``send_message(chat_id, text, parse_mode=...) -> bool``.
    """

    def __init__(self, asr: ASRService, messenger, config: Optional[PipelineConfig] = None):
        self.asr = asr
        self.messenger = messenger
        self.config = config or PipelineConfig()

    def process_voice_message(self, chat_id, voice: VoiceAttachment) -> PipelineState:
        """Handle one voice message end to end and return the terminal state."""
        state = PipelineState.RECEIVED

        if voice.duration > self.config.max_duration_seconds:
            logger.info(f"⏱️ Voice message from {chat_id} too long: {voice.duration}s "
                        f"(limit {self.config.max_duration_seconds}s)")
            self._reply(chat_id, self._message(BotMessages.TOO_LONG).format(
                limit=self.config.max_duration_seconds))
            log_message_flow(chat_id, state.value, PipelineState.REJECTED.value, success=False)
            return PipelineState.REJECTED

        state = PipelineState.DURATION_CHECKED
        deadline = _Deadline(self.config.request_timeout_seconds)
        self._reply(chat_id, self._message(BotMessages.IN_PROGRESS))

        try:
            data = self.messenger.download_file(voice.file_id, timeout=deadline.remaining('download'))
            if not data:
                raise FetchError(f"could not get voice data for file {voice.file_id}")
            audio = AudioBlob(data=data)
            state = PipelineState.DOWNLOADED

            sample_rate = extract_sample_rate(audio.data)
            state = PipelineState.RATE_EXTRACTED
            log_message_flow(chat_id, state.value, f"{sample_rate} Hz")

            result = self.asr.recognize(audio, sample_rate, timeout=deadline.remaining('recognition'))
            state = PipelineState.RECOGNIZED
            log_performance('recognize', result.elapsed_s,
                            segments=len(result.segments), sample_rate=sample_rate)

        except VoicePipelineError as e:
            logger.error(f"❌ Voice message from {chat_id} failed during {e.stage}: {e}")
            return self._fail(chat_id, state)
        except Exception as e:
            logger.error(f"❌ Unexpected voice pipeline error for {chat_id} after {state.value}: {e}")
            return self._fail(chat_id, state)

        transcription = aggregate_segments(result.segments, result.elapsed_s)
        if transcription is None:
            logger.info(f"🔇 Voice message from {chat_id} produced no transcript")
            self._reply(chat_id, self._message(BotMessages.EMPTY))
            log_message_flow(chat_id, state.value, PipelineState.EMPTY.value)
            return PipelineState.EMPTY

        state = PipelineState.AGGREGATED
        self._reply(chat_id, self.format_reply(transcription))
        log_message_flow(chat_id, state.value, PipelineState.REPLIED.value)
        return PipelineState.REPLIED

    def format_reply(self, transcription: Transcription) -> str:
        return self._message(BotMessages.TRANSCRIPT).format(
            text=escape_markdown(transcription.text),
            confidence=transcription.confidence * 100,
            duration=transcription.duration_s,
        )

    def _fail(self, chat_id, state: PipelineState) -> PipelineState:
        self._reply(chat_id, self._message(BotMessages.ERROR))
        log_message_flow(chat_id, state.value, PipelineState.FAILED.value, success=False)
        return PipelineState.FAILED

    def _message(self, key: str) -> str:
        return BotMessages.get(self.config.reply_language, key)

    def _reply(self, chat_id, text: str) -> bool:
        # Delivery is best effort; the messenger logs its own failures
        return self.messenger.send_message(chat_id, text, parse_mode=self.config.parse_mode)
