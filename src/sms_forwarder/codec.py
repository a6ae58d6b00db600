"""
Encoding and decoding of persisted forwarder configurations.

A configuration is a JSON object with a single key naming the forwarder type::

    {"HttpCallbackForwarder": {"callbackUrl": "https://example.com/sms", "method": "GET"}}

Older configurations were stored without the wrapper; their type is inferred
from the fields they carry.
"""

import json
from collections.abc import Mapping
from typing import Any, Optional, Union

from sms_forwarder.errors import ConfigError
from sms_forwarder.forwarders import (
    Forwarder,
    HttpCallbackForwarder,
    ManagedRelayForwarder,
    StdoutForwarder,
    TelegramBotForwarder,
)
from sms_forwarder.transport.http import HttpTransport

FORWARDER_TYPES: dict[str, type[Forwarder]] = {
    cls.tag: cls
    for cls in (StdoutForwarder, HttpCallbackForwarder, TelegramBotForwarder, ManagedRelayForwarder)
}

_TAGS: dict[str, type[Forwarder]] = {
    **FORWARDER_TYPES,
    **{alias: cls for cls in FORWARDER_TYPES.values() for alias in cls.aliases},
}

# Checked in order: relay configs also carry callback fields in some versions.
_LEGACY_FIELDS: list[tuple[tuple[str, ...], type[Forwarder]]] = [
    (("tgHandle", "tgCode"), ManagedRelayForwarder),
    (("token", "chatId"), TelegramBotForwarder),
    (("callbackUrl",), HttpCallbackForwarder),
]


def encode(forwarder: Forwarder) -> dict[str, Any]:
    return forwarder.to_config()


def dumps(forwarder: Forwarder) -> str:
    return json.dumps(encode(forwarder))


def resolve_type(config: Mapping[str, Any]) -> type[Forwarder]:
    """Pick the forwarder class for a decoded config object."""
    if len(config) == 1:
        (key, value), = config.items()
        if key in _TAGS:
            return _TAGS[key]
        if isinstance(value, Mapping):
            raise ConfigError(f"Unknown forwarder type: `{key}`", details={"tag": key})
    for names, cls in _LEGACY_FIELDS:
        if any(name in config for name in names):
            return cls
    raise ConfigError("Cannot determine the forwarder type", details={"keys": sorted(config)})


def decode(config: Union[str, Mapping[str, Any]], http: Optional[HttpTransport] = None) -> Forwarder:
    """Rebuild a forwarder from a persisted config, raising ConfigError."""
    if isinstance(config, str):
        try:
            config = json.loads(config)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Config is not valid JSON: {e.msg}") from e
    if not isinstance(config, Mapping):
        raise ConfigError(f"Config must be a JSON object, got {type(config).__name__}")
    cls = resolve_type(config)
    return cls.from_config(config, http=http)


def loads(blob: str, http: Optional[HttpTransport] = None) -> Forwarder:
    return decode(blob, http=http)
