import struct
from typing import List, Optional

import pytest

from speech.asr_service import ASRService
from speech.exceptions import RecognitionError
from speech.types import RecognitionAlternative, RecognitionResult, RecognitionSegment


def build_ogg_opus(sample_rate: int = 48000, total_length: int = 90) -> bytes:
    """First Ogg page carrying an OpusHead packet, padded with payload bytes."""
    page_header = (
        b'OggS'
        + bytes([0, 2])                # version, beginning-of-stream flag
        + struct.pack('<q', 0)         # granule position
        + struct.pack('<I', 0x1234)    # serial number
        + struct.pack('<I', 0)         # page sequence
        + struct.pack('<I', 0)         # checksum (not verified here)
        + bytes([1, 19])               # one segment of 19 bytes
    )
    opus_head = (
        b'OpusHead'
        + bytes([1, 1])                # version, channel count
        + struct.pack('<H', 312)       # pre-skip
        + struct.pack('<I', sample_rate)
        + struct.pack('<h', 0)         # output gain
        + bytes([0])                   # channel mapping family
    )
    data = page_header + opus_head
    return data + b'\x00' * max(total_length - len(data), 0)


class FakeMessenger:
    """Stands in for the Telegram client: serves one file and records replies."""

    def __init__(self, data: Optional[bytes] = None, send_ok: bool = True):
        self.data = data
        self.send_ok = send_ok
        self.downloads: List[dict] = []
        self.sent: List[dict] = []

    def download_file(self, file_id, timeout=None):
        self.downloads.append({'file_id': file_id, 'timeout': timeout})
        return self.data

    def send_message(self, chat_id, text, parse_mode='markdown'):
        self.sent.append({'chat_id': chat_id, 'text': text, 'parse_mode': parse_mode})
        return self.send_ok

    @property
    def texts(self) -> List[str]:
        return [message['text'] for message in self.sent]


class FakeASR(ASRService):
    """Returns canned segments, or raises when given an error."""

    def __init__(self, segments=None, elapsed_s: float = 1.2, error: Exception = None):
        self.segments = segments or []
        self.elapsed_s = elapsed_s
        self.error = error
        self.calls: List[dict] = []

    def recognize(self, audio, sample_rate_hz, timeout=None):
        self.calls.append({'audio': audio, 'sample_rate_hz': sample_rate_hz, 'timeout': timeout})
        if self.error is not None:
            raise self.error
        return RecognitionResult(segments=list(self.segments), elapsed_s=self.elapsed_s)


def segment(*alternatives) -> RecognitionSegment:
    return RecognitionSegment(alternatives=[
        RecognitionAlternative(transcript=text, confidence=confidence)
        for text, confidence in alternatives
    ])


@pytest.fixture
def ogg_bytes() -> bytes:
    return build_ogg_opus()


@pytest.fixture
def messenger(ogg_bytes) -> FakeMessenger:
    return FakeMessenger(data=ogg_bytes)


@pytest.fixture
def failing_asr() -> FakeASR:
    return FakeASR(error=RecognitionError("backend unavailable"))
