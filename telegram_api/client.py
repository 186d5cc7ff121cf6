import hmac
import logging
import time
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from utils.constants import APIConfig, MessageTypes
from utils.helpers import truncate_message

logger = logging.getLogger(__name__)


class TelegramClient:
    """Telegram Bot API client for the webhook bot"""

    def __init__(self, config: Dict[str, Any], retries: int = 0, timeout: float = 30.0):
        self.bot_token = config.get('bot_token')
        self.webhook_secret_token = config.get('webhook_secret_token')
        self.timeout = timeout

        self.base_url = f"{APIConfig.TELEGRAM_BASE_URL}/bot{self.bot_token}"
        self.file_base_url = f"{APIConfig.TELEGRAM_BASE_URL}/file/bot{self.bot_token}"

        self.session = self._create_session(retries)

        logger.info("✅ Telegram client initialized")

    def _create_session(self, retries: int) -> requests.Session:
        """Create session; messages are never re-sent automatically"""
        session = requests.Session()

        retry_strategy = Retry(
            total=retries,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET"]
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def _redact(self, url: str) -> str:
        return url.replace(self.bot_token, '<token>') if self.bot_token else url

    def _make_request(self, method: str, url: str, failure_level: int = logging.ERROR,
                      **kwargs) -> Optional[requests.Response]:
        """Make HTTP request with proper error handling; failures are logged at failure_level"""
        kwargs.setdefault('timeout', self.timeout)
        try:
            response = self.session.request(method, url, **kwargs)

            logger.debug(f"📡 {method} {self._redact(url)} - Status: {response.status_code}")

            if response.status_code == 401:
                logger.log(failure_level, "❌ Authentication failed - check bot token")
                return None
            elif response.status_code == 403:
                logger.log(failure_level, "❌ Forbidden - the bot was blocked or lacks permissions")
                return None
            elif response.status_code == 429:
                logger.warning("⚠️ Rate limit exceeded")
                return None
            elif response.status_code >= 500:
                logger.warning(f"⚠️ Server error {response.status_code}")
                return None

            return response

        except requests.exceptions.ConnectionError as e:
            logger.log(failure_level, f"❌ Connection error: {self._redact(str(e))}")
            return None
        except requests.exceptions.Timeout as e:
            logger.log(failure_level, f"❌ Request timeout: {self._redact(str(e))}")
            return None
        except requests.exceptions.RequestException as e:
            logger.log(failure_level, f"❌ Request failed: {self._redact(str(e))}")
            return None

    def _call(self, api_method: str, payload: Optional[Dict] = None, failure_level: int = logging.ERROR,
              **kwargs) -> Optional[Any]:
        """Call a Bot API method and return its ``result``"""
        url = f"{self.base_url}/{api_method}"
        response = self._make_request('POST', url, failure_level=failure_level, json=payload or {}, **kwargs)
        if response is None:
            return None

        try:
            data = response.json()
        except ValueError:
            logger.log(failure_level, f"❌ {api_method} returned a non-JSON body: {response.status_code}")
            return None

        if not data.get('ok'):
            logger.log(failure_level, f"❌ {api_method} failed: {data.get('error_code')} {data.get('description')}")
            return None

        return data.get('result')

    def get_me(self) -> Optional[Dict]:
        """Get the bot's own user record"""
        return self._call('getMe')

    def get_file(self, file_id: str, timeout: Optional[float] = None,
                 failure_level: int = logging.ERROR) -> Optional[Dict]:
        """Resolve a file_id to its file record (holding ``file_path``)"""
        kwargs = {'timeout': timeout} if timeout is not None else {}
        return self._call('getFile', {'file_id': file_id}, failure_level=failure_level, **kwargs)

    def get_file_url(self, file_path: str) -> str:
        return f"{self.file_base_url}/{file_path}"

    def download_file(self, file_id: str, timeout: Optional[float] = None) -> Optional[bytes]:
        """Download an attachment's bytes by file_id.

        ``timeout`` bounds both calls together. Failures are logged as warnings
        and reported as None; the caller owns the error.
        """
        started = time.monotonic()
        file_info = self.get_file(file_id, timeout=timeout, failure_level=logging.WARNING)
        if not file_info or not file_info.get('file_path'):
            logger.warning(f"⚠️ Failed to get file path for {file_id}")
            return None

        kwargs = {}
        if timeout is not None:
            remaining = timeout - (time.monotonic() - started)
            if remaining <= 0:
                logger.warning(f"⚠️ No time left to download {file_id}")
                return None
            kwargs['timeout'] = remaining

        response = self._make_request('GET', self.get_file_url(file_info['file_path']),
                                      failure_level=logging.WARNING, **kwargs)

        if response is not None and response.status_code == 200:
            return response.content

        logger.warning(f"⚠️ Failed to download file: {response.status_code if response is not None else 'No response'}")
        return None

    def send_message(self, chat_id, text: str, parse_mode: Optional[str] = APIConfig.PARSE_MODE) -> bool:
        """Send a text message; falls back to plain text if the markup is rejected"""
        payload = {'chat_id': chat_id, 'text': truncate_message(text)}
        if parse_mode:
            payload['parse_mode'] = parse_mode

        logger.info(f"📤 Sending text message to {chat_id}")

        response = self._make_request('POST', f"{self.base_url}/sendMessage", json=payload)
        if response is not None and response.status_code == 200:
            logger.info("✅ Message sent successfully")
            return True

        if response is not None and parse_mode and self._is_entity_parse_error(response):
            logger.warning("⚠️ Telegram could not parse message markup, sending as plain text")
            return self.send_message(chat_id, text, parse_mode=None)

        logger.error(f"❌ Failed to send message: {response.status_code if response is not None else 'No response'}")
        if response is not None:
            logger.error(f"Response: {response.text}")
        return False

    @staticmethod
    def _is_entity_parse_error(response: requests.Response) -> bool:
        if response.status_code != 400:
            return False
        try:
            description = response.json().get('description', '')
        except ValueError:
            return False
        return "can't parse entities" in description.lower()

    def verify_secret_token(self, received: Optional[str]) -> bool:
        """Check the webhook secret header when a secret is configured"""
        if not self.webhook_secret_token:
            return True
        if received and hmac.compare_digest(received, self.webhook_secret_token):
            return True
        logger.warning("❌ Webhook secret token verification failed!")
        return False

    def validate_webhook_payload(self, payload: Dict) -> bool:
        """Validate incoming webhook update"""
        return isinstance(payload, dict) and isinstance(payload.get('update_id'), int)

    def get_webhook_data(self, payload: Dict) -> Optional[Dict]:
        """Extract the message of an update, or None for updates we ignore"""
        message = payload.get('message')
        if not isinstance(message, dict):
            logger.info(f"Ignoring update {payload.get('update_id')} without a message")
            return None

        chat_id = (message.get('chat') or {}).get('id')
        if chat_id is None:
            logger.warning(f"Ignoring update {payload.get('update_id')} without a chat id")
            return None

        data = {
            'chat_id': chat_id,
            'message_id': message.get('message_id'),
            'type': MessageTypes.UNSUPPORTED,
        }

        voice = message.get('voice')
        if isinstance(voice, dict) and voice.get('file_id'):
            data['type'] = MessageTypes.VOICE
            data['voice'] = {
                'file_id': voice['file_id'],
                'duration': voice.get('duration', 0),
            }
        elif message.get('text'):
            data['type'] = MessageTypes.TEXT
            data['text'] = message['text']

        return data
