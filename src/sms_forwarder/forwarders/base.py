"""
Forwarder contract and the shared HTTP send/response handling.
"""

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar, Optional

from sms_forwarder.errors import DeliveryFailure
from sms_forwarder.models.message import SmsMessage
from sms_forwarder.transport.http import HttpRequest, HttpResponse, HttpTransport

logger = logging.getLogger(__name__)


class Forwarder(ABC):
    """Turns an SMS message into an outbound delivery."""

    # Persisted variant tag, plus alternative tags accepted when decoding.
    tag: ClassVar[str]
    aliases: ClassVar[tuple[str, ...]] = ()

    @abstractmethod
    async def forward(self, message: SmsMessage) -> bool:
        """Deliver ``message``. Returns False on failure instead of raising."""

    @classmethod
    @abstractmethod
    def from_config(cls, config: Mapping[str, Any], http: Optional[HttpTransport] = None) -> "Forwarder":
        """Rebuild a forwarder from its persisted fields, raising ConfigError."""

    @abstractmethod
    def fields(self) -> dict[str, Any]:
        """The variant's persisted fields."""

    def to_config(self) -> dict[str, Any]:
        return {self.tag: self.fields()}

    def to_json(self) -> str:
        return json.dumps(self.to_config())

    @classmethod
    def unwrap(cls, config: Mapping[str, Any]) -> Any:
        """Strip the variant tag wrapper if present. Flat configs pass through."""
        for name in (cls.tag, *cls.aliases):
            if name in config:
                return config[name]
        return dict(config)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Forwarder):
            return NotImplemented
        return type(self) is type(other) and self.to_config() == other.to_config()

    def __hash__(self) -> int:
        return hash(json.dumps(self.to_config(), sort_keys=True))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.fields()!r})"


class HttpForwarder(Forwarder):
    """Base for forwarders that deliver with a single HTTP request.

    Subclasses implement ``build_request``; delivery succeeds only on status 200.
    """

    def __init__(self, http: Optional[HttpTransport] = None):
        self._http = http or HttpTransport()

    @abstractmethod
    def build_request(self, message: SmsMessage) -> HttpRequest:
        ...

    async def send(self, message: SmsMessage) -> HttpResponse:
        return await self._http.request(self.build_request(message))

    async def forward(self, message: SmsMessage) -> bool:
        try:
            response = await self.send(message)
        except DeliveryFailure as e:
            logger.warning("%s delivery failed: %s", self.tag, e)
            return False
        if not response.ok:
            logger.warning("%s delivery rejected with HTTP %d", self.tag, response.status_code)
            return False
        logger.debug("%s delivered message from %s", self.tag, message.sender)
        return True
