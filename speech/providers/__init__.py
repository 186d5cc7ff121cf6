from .google_asr import GoogleSpeechASR

__all__ = ["GoogleSpeechASR"]
