import math
from typing import Optional, Sequence

from .types import RecognitionSegment, Transcription


def aggregate_segments(segments: Sequence[RecognitionSegment], elapsed_s: float) -> Optional[Transcription]:
    """Merge per-segment best alternatives into one transcript.

    Returns None when the backend produced no segments at all. Segments
    without alternatives add no text and no confidence, but still count in
    the confidence divisor, so partially empty results score lower.
    """
    if not segments:
        return None

    parts = []
    total_confidence = 0.0
    for segment in segments:
        best = segment.best
        if best is None:
            continue
        parts.append(best.transcript)
        total_confidence += best.confidence

    return Transcription(
        text=' '.join(parts),
        confidence=total_confidence / len(segments),
        duration_s=int(math.floor(max(elapsed_s, 0.0))),
    )
