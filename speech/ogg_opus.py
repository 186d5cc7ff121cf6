"""Sample rate lookup for Opus streams wrapped in an Ogg container.

The first Ogg page carries the Opus identification header
(https://wiki.xiph.org/OggOpus#ID_Header). Skipping the 27-byte page header,
the single-entry segment table and the 12 bytes of "OpusHead" magic, version,
channel count and pre-skip leaves the input sample rate at offset 40.
"""

import struct

from .exceptions import HeaderError

SAMPLE_RATE_OFFSET = 40
MIN_HEADER_LENGTH = SAMPLE_RATE_OFFSET + 4

_UINT32_LE = struct.Struct('<I')


def extract_sample_rate(data: bytes) -> int:
    """Return the little-endian uint32 sample rate stored at bytes 40-43."""
    if len(data) < MIN_HEADER_LENGTH:
        raise HeaderError(
            f"unexpected data length: {len(data)} (need at least {MIN_HEADER_LENGTH} bytes)"
        )

    (sample_rate,) = _UINT32_LE.unpack_from(data, SAMPLE_RATE_OFFSET)
    return sample_rate
