"""Errors raised while turning a voice message into a transcript."""


class VoicePipelineError(Exception):
    """Base class for failures that abort a single voice message."""

    stage = "pipeline"


class FetchError(VoicePipelineError):
    """The voice attachment could not be downloaded."""

    stage = "download"


class HeaderError(VoicePipelineError):
    """The audio container header is truncated or malformed."""

    stage = "sample rate extraction"


class RecognitionError(VoicePipelineError):
    """The speech backend call failed."""

    stage = "recognition"


class DeadlineExceeded(VoicePipelineError):
    """The per-request time budget ran out."""

    stage = "deadline check"
