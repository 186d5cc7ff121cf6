import logging
import time
from typing import Callable, Optional

from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import speech

from ..asr_service import ASRService
from ..exceptions import RecognitionError
from ..types import AudioBlob, RecognitionAlternative, RecognitionResult, RecognitionSegment

logger = logging.getLogger(__name__)

# RecognitionConfig.sample_rate_hertz is an int32
MAX_SAMPLE_RATE_HZ = 2 ** 31 - 1


class GoogleSpeechASR(ASRService):
    """Google Cloud Speech-to-Text wrapper doing one synchronous recognize per message."""

    def __init__(self, language_code: str = "it-IT", encoding: str = "OGG_OPUS",
                 client_factory: Optional[Callable[[], speech.SpeechClient]] = None):
        self.language_code = language_code
        self.encoding = encoding
        # A fresh client per call; gRPC channels are not shared between requests
        self.client_factory = client_factory or speech.SpeechClient

    def build_config(self, sample_rate_hz: int) -> speech.RecognitionConfig:
        if not 0 < sample_rate_hz <= MAX_SAMPLE_RATE_HZ:
            raise RecognitionError(f"sample rate out of range for the backend: {sample_rate_hz}")
        return speech.RecognitionConfig(
            encoding=getattr(speech.RecognitionConfig.AudioEncoding, self.encoding),
            sample_rate_hertz=sample_rate_hz,
            language_code=self.language_code,
        )

    def recognize(self, audio: AudioBlob, sample_rate_hz: int,
                  timeout: Optional[float] = None) -> RecognitionResult:
        """Send the audio to Google and return its segments in order."""
        config = self.build_config(sample_rate_hz)
        recognition_audio = speech.RecognitionAudio(content=audio.data)

        call_kwargs = {'config': config, 'audio': recognition_audio, 'retry': None}
        if timeout is not None:
            call_kwargs['timeout'] = timeout

        logger.info(f"🎙️ Starting recognition: {len(audio.data)} bytes at {sample_rate_hz} Hz, "
                    f"language: {self.language_code}")

        try:
            with self.client_factory() as client:
                start = time.monotonic()
                response = client.recognize(**call_kwargs)
                elapsed = time.monotonic() - start
        except (google_exceptions.GoogleAPIError, auth_exceptions.GoogleAuthError) as e:
            raise RecognitionError(f"could not recognize audio: {e}") from e

        segments = [
            RecognitionSegment(alternatives=[
                RecognitionAlternative(transcript=alt.transcript, confidence=alt.confidence)
                for alt in result.alternatives
            ])
            for result in response.results
        ]

        logger.info(f"✅ Recognition completed: {len(segments)} segment(s) in {elapsed:.3f}s")
        return RecognitionResult(segments=segments, elapsed_s=elapsed)
