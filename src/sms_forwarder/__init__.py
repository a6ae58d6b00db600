"""
sms-forwarder: relay incoming SMS messages to remote endpoints.

Supports plain HTTP callbacks, the Telegram Bot API and a managed Telegram
relay service.
"""

from sms_forwarder.client import AsyncSmsRelay, ForwardResult, SmsRelay
from sms_forwarder.codec import FORWARDER_TYPES, decode, dumps, encode, loads
from sms_forwarder.errors import ConfigError, DeliveryFailure, ForwarderError, SetupCheckFailure
from sms_forwarder.forwarders import (
    Forwarder,
    HttpCallbackForwarder,
    HttpForwarder,
    ManagedRelayForwarder,
    StdoutForwarder,
    TelegramBotForwarder,
)
from sms_forwarder.models.config import HttpMethod
from sms_forwarder.models.message import SmsMessage
from sms_forwarder.transport.http import HttpTransport
from sms_forwarder.transport.uri import encode_query

__version__ = "0.1.0"
__all__ = [
    "AsyncSmsRelay",
    "SmsRelay",
    "ForwardResult",
    "FORWARDER_TYPES",
    "decode",
    "dumps",
    "encode",
    "loads",
    "ForwarderError",
    "ConfigError",
    "DeliveryFailure",
    "SetupCheckFailure",
    "Forwarder",
    "HttpForwarder",
    "HttpCallbackForwarder",
    "ManagedRelayForwarder",
    "StdoutForwarder",
    "TelegramBotForwarder",
    "HttpMethod",
    "SmsMessage",
    "HttpTransport",
    "encode_query",
]
