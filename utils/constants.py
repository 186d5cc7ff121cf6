"""Constants and user-facing message catalogue"""


# Telegram update content we act on
class MessageTypes:
    VOICE = 'voice'
    TEXT = 'text'
    UNSUPPORTED = 'unsupported'


# Text commands
class Commands:
    START = '/start'
    ABOUT = '/about'


# Supported reply languages
class Languages:
    ENGLISH = 'en'
    ITALIAN = 'it'


# API Configuration
class APIConfig:
    TELEGRAM_BASE_URL = 'https://api.telegram.org'
    MAX_MESSAGE_LENGTH = 4096
    PARSE_MODE = 'markdown'
    SECRET_TOKEN_HEADER = 'X-Telegram-Bot-Api-Secret-Token'


# Speech recognition defaults
class SpeechDefaults:
    LANGUAGE_CODE = 'it-IT'
    ENCODING = 'OGG_OPUS'
    MAX_VOICE_DURATION = 60
    REQUEST_TIMEOUT = 30.0


class BotMessages:
    """Replies sent to users, per language"""

    START = 'start'
    ABOUT = 'about'
    TOO_LONG = 'too_long'
    IN_PROGRESS = 'in_progress'
    EMPTY = 'empty'
    ERROR = 'error'
    TRANSCRIPT = 'transcript'

    EN = {
        START: "Hi, I'm Amanuense. Forward me a voice message to transcribe.",
        ABOUT: "Created by @emilioschepis\n[Source code on GitHub](https://github.com/emilioschepis/amanuense-go)",
        TOO_LONG: "I only transcribe messages up to {limit} seconds!",
        IN_PROGRESS: "Transcription in progress...",
        EMPTY: "This message appears to be empty.",
        ERROR: "There was an error during the transcription. Please try again later.",
        TRANSCRIPT: "{text}\n\n\\[confidence: {confidence:.1f}%; duration: {duration} seconds]",
    }

    IT = {
        START: "Ciao, sono Amanuense. Inoltrami un messaggio audio da trascrivere.",
        ABOUT: "Creato da @emilioschepis\n[Codice disponibile su GitHub](https://github.com/emilioschepis/amanuense-go)",
        TOO_LONG: "Trascrivo solo messaggi fino a {limit} secondi!",
        IN_PROGRESS: "Trascrizione in corso...",
        EMPTY: "Questo messaggio sembra essere vuoto.",
        ERROR: "C'è stato un errore durante la trascrizione. Riprova più tardi.",
        TRANSCRIPT: "{text}\n\n\\[confidenza: {confidence:.1f}%; durata: {duration} secondi]",
    }

    @classmethod
    def get(cls, language: str, key: str) -> str:
        catalogue = cls.IT if language == Languages.ITALIAN else cls.EN
        return catalogue[key]
