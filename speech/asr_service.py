from abc import ABC, abstractmethod
from typing import Optional

from .types import AudioBlob, RecognitionResult


class ASRService(ABC):
    """Abstract speech-to-text backend."""

    @abstractmethod
    def recognize(self, audio: AudioBlob, sample_rate_hz: int,
                  timeout: Optional[float] = None) -> RecognitionResult:
        """Recognize the audio; raise RecognitionError on backend failure."""
        raise NotImplementedError
