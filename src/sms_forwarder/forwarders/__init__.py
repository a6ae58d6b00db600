from sms_forwarder.forwarders.base import Forwarder, HttpForwarder
from sms_forwarder.forwarders.callback import HttpCallbackForwarder
from sms_forwarder.forwarders.relay import ManagedRelayForwarder
from sms_forwarder.forwarders.stdout import StdoutForwarder
from sms_forwarder.forwarders.telegram import TelegramBotForwarder

__all__ = [
    "Forwarder",
    "HttpForwarder",
    "HttpCallbackForwarder",
    "ManagedRelayForwarder",
    "StdoutForwarder",
    "TelegramBotForwarder",
]
