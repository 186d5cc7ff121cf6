from config.settings import PipelineConfig
from conftest import FakeASR, segment
from speech.pipeline import VoiceMessagePipeline
from workflow.handlers import MessageHandler


def make_handler(messenger, asr=None, **config) -> MessageHandler:
    pipeline = VoiceMessagePipeline(asr or FakeASR([segment(("ciao", 0.9))]), messenger, PipelineConfig(**config))
    return MessageHandler(messenger, pipeline)


def test_start_command_sends_greeting(messenger) -> None:
    result = make_handler(messenger).handle_message({'chat_id': 5, 'type': 'text', 'text': '/start'})

    assert result['outcome'] == 'start'
    assert messenger.texts == ["Hi, I'm Amanuense. Forward me a voice message to transcribe."]
    assert messenger.sent[0]['parse_mode'] == 'markdown'


def test_about_command_with_bot_suffix(messenger) -> None:
    make_handler(messenger, reply_language='it').handle_message(
        {'chat_id': 5, 'type': 'text', 'text': '/about@AmanuenseBot'})

    assert messenger.texts[0].startswith("Creato da @emilioschepis")


def test_other_text_is_ignored(messenger) -> None:
    result = make_handler(messenger).handle_message({'chat_id': 5, 'type': 'text', 'text': 'hello'})

    assert result['outcome'] == 'ignored'
    assert messenger.sent == []


def test_voice_message_goes_through_pipeline(messenger) -> None:
    asr = FakeASR([segment(("ciao", 0.9))])

    result = make_handler(messenger, asr).handle_message(
        {'chat_id': 5, 'type': 'voice', 'voice': {'file_id': 'f1', 'duration': 3}})

    assert result['type'] == 'voice'
    assert result['outcome'] == 'replied'
    assert result['success'] is True
    assert messenger.downloads[0]['file_id'] == 'f1'
    assert len(asr.calls) == 1


def test_failed_voice_message_is_reported(messenger, failing_asr) -> None:
    result = make_handler(messenger, failing_asr).handle_message(
        {'chat_id': 5, 'type': 'voice', 'voice': {'file_id': 'f1', 'duration': 3}})

    assert result['outcome'] == 'failed'
    assert result['success'] is False


def test_unsupported_message_is_ignored(messenger) -> None:
    result = make_handler(messenger).handle_message({'chat_id': 5, 'type': 'unsupported'})

    assert result['outcome'] == 'ignored'
    assert messenger.sent == []
