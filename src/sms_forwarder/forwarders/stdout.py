"""
Debug forwarder that prints messages locally.
"""

from collections.abc import Mapping
from typing import Any, Optional

from rich.console import Console

from sms_forwarder.forwarders.base import Forwarder
from sms_forwarder.models.message import SmsMessage
from sms_forwarder.transport.http import HttpTransport


class StdoutForwarder(Forwarder):
    tag = "StdoutForwarder"
    aliases = ("Stdout",)

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console()

    async def forward(self, message: SmsMessage) -> bool:
        self._console.print(f"Received an SMS from {message.sender}: {message.body}", markup=False)
        return True

    @classmethod
    def from_config(cls, config: Mapping[str, Any], http: Optional[HttpTransport] = None) -> "StdoutForwarder":
        return cls()

    def fields(self) -> dict[str, Any]:
        return {}
