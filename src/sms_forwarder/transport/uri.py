"""
Query string encoding shared by every HTTP forwarder.
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

RESERVED_KEY = "thread_id"

# Characters left unescaped by URI component encoding besides letters and digits.
_COMPONENT_SAFE = "-_.!~*'()"


def encode_component(value: Any) -> str:
    return quote(str(value), safe=_COMPONENT_SAFE)


def encode_query(mapping: Mapping[str, Any]) -> str:
    """Encode a mapping as a query string with a trailing separator.

    The ``thread_id`` entry is always dropped, it never leaves the device.

    >>> encode_query({"msg": "test message", "code": 10})
    '?msg=test%20message&code=10&'
    """
    query = "?"
    for key, value in mapping.items():
        if key == RESERVED_KEY:
            continue
        query += f"{key}={encode_component(value)}&"
    return query
