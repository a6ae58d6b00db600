"""
Direct Telegram Bot API forwarder.
"""

from collections.abc import Mapping
from typing import Any, Optional

from sms_forwarder.errors import ConfigError
from sms_forwarder.forwarders.base import HttpForwarder
from sms_forwarder.models.config import HttpMethod, TelegramBotFields, parse_fields
from sms_forwarder.models.message import SmsMessage
from sms_forwarder.transport.http import HttpRequest, HttpTransport
from sms_forwarder.transport.uri import encode_query

TELEGRAM_API_URL = "https://api.telegram.org"


def format_text(message: SmsMessage) -> str:
    return f"New SMS message from {message.sender}:\n{message.body}\n\nDate: {message.timestamp}."


class TelegramBotForwarder(HttpForwarder):
    """Forwards SMS messages to ``chat_id`` using the bot identified by ``token``."""

    tag = "TelegramBotForwarder"
    aliases = ("TelegramBot",)

    def __init__(self, token: str, chat_id: int, http: Optional[HttpTransport] = None):
        super().__init__(http)
        if not token:
            raise ConfigError("Missing the bot token.")
        self._token = token
        self._chat_id = chat_id

    @property
    def token(self) -> str:
        return self._token

    @property
    def chat_id(self) -> int:
        return self._chat_id

    @property
    def api(self) -> str:
        return f"{TELEGRAM_API_URL}/bot{self._token}"

    def api_method(self, name: str) -> str:
        return f"{self.api}/{name}"

    @classmethod
    def from_config(cls, config: Mapping[str, Any], http: Optional[HttpTransport] = None) -> "TelegramBotForwarder":
        f = parse_fields(TelegramBotFields, cls.unwrap(config), cls.tag)
        return cls(f.token, f.chat_id, http=http)

    def fields(self) -> dict[str, Any]:
        return {"token": self._token, "chatId": self._chat_id}

    def build_request(self, message: SmsMessage) -> HttpRequest:
        params = encode_query({"chat_id": self._chat_id, "text": format_text(message)})
        return HttpRequest(method=HttpMethod.POST, url=f"{self.api_method('sendMessage')}{params}")

    def __repr__(self) -> str:
        # Never print the bot token.
        return f"TelegramBotForwarder(chat_id={self._chat_id!r})"
