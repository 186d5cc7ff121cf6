"""Speech processing package: Ogg/Opus header parsing, speech recognition and the voice pipeline."""

from .types import (
    AudioBlob, RecognitionAlternative, RecognitionSegment, RecognitionResult,
    Transcription, VoiceAttachment
)
from .exceptions import (
    VoicePipelineError, FetchError, HeaderError, RecognitionError, DeadlineExceeded
)

__all__ = [
    "AudioBlob",
    "RecognitionAlternative",
    "RecognitionSegment",
    "RecognitionResult",
    "Transcription",
    "VoiceAttachment",
    "VoicePipelineError",
    "FetchError",
    "HeaderError",
    "RecognitionError",
    "DeadlineExceeded",
]
