"""
File-backed storage for the active forwarder configuration.
"""

import json
from pathlib import Path
from typing import Any, Optional

from sms_forwarder import codec
from sms_forwarder.errors import ConfigError
from sms_forwarder.forwarders import Forwarder
from sms_forwarder.transport.http import HttpTransport


class ForwarderStore:
    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load_raw(self) -> Optional[dict[str, Any]]:
        try:
            raw = json.loads(self._path.read_text())
        except FileNotFoundError:
            return None
        except json.JSONDecodeError as e:
            raise ConfigError(f"Stored config at {self._path} is not valid JSON: {e.msg}") from e
        if not isinstance(raw, dict):
            raise ConfigError(f"Stored config at {self._path} is not a JSON object")
        return raw

    def load(self, http: Optional[HttpTransport] = None) -> Optional[Forwarder]:
        raw = self.load_raw()
        if raw is None:
            return None
        return codec.decode(raw, http=http)

    def save(self, forwarder: Forwarder) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(codec.encode(forwarder), indent=2))

    def clear(self) -> bool:
        try:
            self._path.unlink()
        except FileNotFoundError:
            return False
        return True
