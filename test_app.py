import pytest

from app import TranscriptionBotWorkflow, create_flask_app
from conftest import FakeASR, build_ogg_opus, segment
from telegram_api.client import TelegramClient

TOKEN = "123456:ABC-secret"
SECRET_HEADER = {'X-Telegram-Bot-Api-Secret-Token': 's3cret'}


class FakeResponse:
    def __init__(self, status_code=200, json_data=None, content=b''):
        self.status_code = status_code
        self._json = json_data
        self.content = content
        self.text = str(json_data)

    def json(self):
        return self._json


class BotAPISession:
    """Answers the handful of Bot API calls the webhook makes."""

    def __init__(self, audio: bytes):
        self.audio = audio
        self.sent = []
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append(url.rsplit('/', 1)[-1])
        if url.endswith('/getFile'):
            return FakeResponse(json_data={'ok': True, 'result': {'file_path': 'voice/file_1.oga'}})
        if url.endswith('/sendMessage'):
            self.sent.append(kwargs['json'])
            return FakeResponse(json_data={'ok': True, 'result': {}})
        if url.endswith('/getMe'):
            return FakeResponse(json_data={'ok': True, 'result': {'username': 'AmanuenseBot'}})
        if '/file/bot' in url:
            return FakeResponse(content=self.audio)
        return FakeResponse(status_code=404, json_data={'ok': False})


@pytest.fixture
def asr() -> FakeASR:
    return FakeASR([segment(("ciao", 0.9))], elapsed_s=0.4)


@pytest.fixture
def session() -> BotAPISession:
    return BotAPISession(build_ogg_opus())


@pytest.fixture
def app_client(asr, session):
    config = {'bot_token': TOKEN, 'webhook_secret_token': 's3cret'}
    telegram = TelegramClient(config)
    telegram.session = session
    workflow = TranscriptionBotWorkflow(config, telegram_client=telegram, asr_service=asr)
    app = create_flask_app(workflow=workflow)
    return app.test_client()


def voice_update(duration=10):
    return {
        'update_id': 100,
        'message': {'message_id': 1, 'chat': {'id': 77}, 'voice': {'file_id': 'f1', 'duration': duration}},
    }


def test_voice_update_is_transcribed(app_client, session, asr) -> None:
    response = app_client.post('/', json=voice_update(), headers=SECRET_HEADER)

    assert response.status_code == 200
    assert session.sent == [
        {'chat_id': 77, 'text': "Transcription in progress...", 'parse_mode': 'markdown'},
        {'chat_id': 77, 'text': "ciao\n\n\\[confidence: 90.0%; duration: 0 seconds]", 'parse_mode': 'markdown'},
    ]
    assert session.calls.count('sendMessage') == 2
    assert asr.calls[0]['sample_rate_hz'] == 48000


def test_webhook_path_alias(app_client, session) -> None:
    response = app_client.post('/webhook', json=voice_update(), headers=SECRET_HEADER)

    assert response.status_code == 200
    assert len(session.sent) == 2


def test_long_voice_update_is_rejected_without_backend_call(app_client, session, asr) -> None:
    response = app_client.post('/', json=voice_update(duration=61), headers=SECRET_HEADER)

    assert response.status_code == 200
    assert [message['text'] for message in session.sent] == ["I only transcribe messages up to 60 seconds!"]
    assert asr.calls == []
    assert 'getFile' not in session.calls


def test_wrong_secret_token_is_forbidden(app_client, session) -> None:
    response = app_client.post('/', json=voice_update(), headers={'X-Telegram-Bot-Api-Secret-Token': 'nope'})

    assert response.status_code == 403
    assert session.calls == []


def test_invalid_payload_is_rejected(app_client) -> None:
    response = app_client.post('/', json={'hello': 'world'}, headers=SECRET_HEADER)

    assert response.status_code == 400


def test_update_without_message_is_acknowledged(app_client, session) -> None:
    response = app_client.post('/', json={'update_id': 3, 'callback_query': {}}, headers=SECRET_HEADER)

    assert response.status_code == 200
    assert session.sent == []


def test_health_reports_telegram_status(app_client) -> None:
    response = app_client.get('/health')

    assert response.status_code == 200
    payload = response.get_json()
    assert payload['components']['telegram']['username'] == 'AmanuenseBot'
    assert payload['components']['speech']['language_code'] == 'it-IT'


def test_app_is_not_created_without_token(monkeypatch) -> None:
    monkeypatch.delenv('BOT_TOKEN', raising=False)

    assert create_flask_app() is None
