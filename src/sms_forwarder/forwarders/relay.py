"""
Managed relay forwarder.

The relay service links this device to a Telegram account. Setup works in
three steps:

1. A random confirmation code is generated when the forwarder is created.
2. The user opens the setup link, which starts the relay bot with
   ``{code}_{handle}`` and registers the pair on the service.
3. ``check_linked`` asks the service whether the pair is known.

Every forwarded message carries the code and handle so the service can route it.
"""

import asyncio
import logging
import random
import re
import string
from collections.abc import Mapping
from typing import Any, Optional

from sms_forwarder.errors import ConfigError, DeliveryFailure, SetupCheckFailure
from sms_forwarder.forwarders.callback import HttpCallbackForwarder
from sms_forwarder.models.config import (
    CODE_PATTERN,
    DEFAULT_BOT_HANDLE,
    DEFAULT_RELAY_URL,
    HttpMethod,
    ManagedRelayFields,
    parse_fields,
)
from sms_forwarder.models.message import SmsMessage
from sms_forwarder.transport.http import HttpRequest, HttpTransport
from sms_forwarder.transport.uri import encode_query

logger = logging.getLogger(__name__)

CODE_LENGTH = 8


def generate_code() -> str:
    """Random pairing code of uppercase letters. Not a secret."""
    return "".join(random.choices(string.ascii_uppercase, k=CODE_LENGTH))


class ManagedRelayForwarder(HttpCallbackForwarder):
    tag = "DeployedTelegramBotForwarder"
    aliases = ("ManagedRelay",)

    def __init__(
        self,
        tg_handle: str,
        base_url: str = DEFAULT_RELAY_URL,
        bot_handle: str = DEFAULT_BOT_HANDLE,
        code: Optional[str] = None,
        http: Optional[HttpTransport] = None,
    ):
        if not tg_handle:
            raise ConfigError("Missing the telegram handle.")
        super().__init__(f"{base_url}/forward", method=HttpMethod.POST, http=http)
        self._tg_handle = tg_handle
        self._base_url = base_url
        self._bot_handle = bot_handle
        if code is not None and not re.fullmatch(CODE_PATTERN, code):
            raise ConfigError(f"Malformed confirmation code: `{code}`")
        self._code = code or generate_code()
        self._linked = False

    @property
    def tg_handle(self) -> str:
        return self._tg_handle

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def bot_handle(self) -> str:
        return self._bot_handle

    @property
    def code(self) -> str:
        return self._code

    @property
    def linked(self) -> bool:
        """Result of the last link check. Not persisted."""
        return self._linked

    @classmethod
    def from_config(cls, config: Mapping[str, Any], http: Optional[HttpTransport] = None) -> "ManagedRelayForwarder":
        f = parse_fields(ManagedRelayFields, cls.unwrap(config), cls.tag)
        if f.tg_code is None:
            logger.info("No confirmation code stored for @%s, generated a new one; setup must be redone", f.tg_handle)
        return cls(
            f.tg_handle,
            base_url=f.base_url,
            bot_handle=f.bot_handle,
            code=f.tg_code,
            http=http,
        )

    def fields(self) -> dict[str, Any]:
        return ManagedRelayFields(
            tg_code=self._code,
            base_url=self._base_url,
            tg_handle=self._tg_handle,
            bot_handle=self._bot_handle,
        ).dump()

    def get_setup_url(self) -> str:
        """Deep link that starts the relay bot and registers the code."""
        return f"https://t.me/{self._bot_handle}?start={self._code}_{self._tg_handle}"

    def check_url(self) -> str:
        params = encode_query({"username": self._tg_handle, "code": self._code})
        return f"{self._base_url}/check_user{params}"

    async def verify_link(self) -> None:
        """Raise SetupCheckFailure unless the service knows this handle and code."""
        try:
            response = await self._http.get(self.check_url())
        except DeliveryFailure as e:
            raise SetupCheckFailure(f"Link check failed: {e}", details=e.details) from e
        if not response.ok:
            raise SetupCheckFailure(
                f"Link check rejected with HTTP {response.status_code}",
                details={"status_code": response.status_code},
            )

    async def check_linked(self) -> bool:
        try:
            await self.verify_link()
        except SetupCheckFailure as e:
            logger.info("@%s is not linked yet: %s", self._tg_handle, e)
            self._linked = False
        else:
            self._linked = True
        return self._linked

    async def wait_until_linked(self, attempts: int = 10, interval: float = 3.0) -> bool:
        """Poll the service until the link is confirmed or attempts run out."""
        for attempt in range(attempts):
            if await self.check_linked():
                return True
            if attempt < attempts - 1:
                await asyncio.sleep(interval)
        return False

    def build_request(self, message: SmsMessage) -> HttpRequest:
        params = message.to_payload()
        params.update(self.uri_payload)
        # Code and handle are appended verbatim after the encoded parameters.
        url = f"{self.callback_url}{encode_query(params)}code={self._code}&username={self._tg_handle}"
        return HttpRequest(method=HttpMethod.POST, url=url)
