from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class AudioBlob:
    """Raw compressed audio of one voice message."""
    data: bytes


@dataclass(frozen=True)
class RecognitionAlternative:
    """One candidate transcript for a segment."""
    transcript: str
    confidence: float = 0.0


@dataclass
class RecognitionSegment:
    """A portion of recognized speech with its alternatives ranked best-first."""
    alternatives: List[RecognitionAlternative] = field(default_factory=list)

    @property
    def best(self) -> Optional[RecognitionAlternative]:
        return self.alternatives[0] if self.alternatives else None


@dataclass
class RecognitionResult:
    """Backend response: ordered segments plus wall-clock time of the call."""
    segments: List[RecognitionSegment]
    elapsed_s: float


@dataclass(frozen=True)
class Transcription:
    """Aggregated transcript of a voice message."""
    text: str
    confidence: float
    duration_s: int


@dataclass(frozen=True)
class VoiceAttachment:
    """Voice note reference as delivered by the chat webhook."""
    file_id: str
    duration: int
