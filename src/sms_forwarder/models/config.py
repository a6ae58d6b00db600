"""
Raw configuration records for each forwarder variant.

Each record mirrors the persisted JSON field names (aliases) and fills defaults
for fields that older configurations do not carry. Validation failures are
reported as ConfigError.
"""

import logging
from enum import Enum
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from sms_forwarder.errors import ConfigError
from sms_forwarder.transport.uri import RESERVED_KEY

logger = logging.getLogger(__name__)

DEFAULT_RELAY_URL = "https://forwarder.whatever.team"
DEFAULT_BOT_HANDLE = "smsforwarderrobot"
CODE_PATTERN = r"^[A-Z]{8}$"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"


def clean_payload(payload: Any) -> dict[str, str]:
    """Stringify payload values and drop the reserved thread_id key."""
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValueError("payload must be an object")
    if RESERVED_KEY in payload:
        logger.warning("Dropping reserved key %r from payload", RESERVED_KEY)
    return {str(k): str(v) for k, v in payload.items() if k != RESERVED_KEY}


class ForwarderFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        # Null fields in old configs fall back to the declared defaults.
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    def dump(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class HttpCallbackFields(ForwarderFields):
    callback_url: str = Field(alias="callbackUrl", min_length=1)
    method: HttpMethod = HttpMethod.POST
    uri_payload: dict[str, str] = Field(default_factory=dict, alias="uriPayload")
    json_payload: dict[str, str] = Field(default_factory=dict, alias="jsonPayload")

    @field_validator("method", mode="before")
    @classmethod
    def default_method(cls, value: Any) -> Any:
        # Configs written before the method field existed store "" or nothing.
        if value == "":
            return HttpMethod.POST
        return value

    @field_validator("uri_payload", "json_payload", mode="before")
    @classmethod
    def stringify_payloads(cls, value: Any) -> dict[str, str]:
        return clean_payload(value)


class TelegramBotFields(ForwarderFields):
    token: str = Field(min_length=1)
    chat_id: int = Field(alias="chatId")


class ManagedRelayFields(ForwarderFields):
    tg_code: Optional[str] = Field(default=None, alias="tgCode", pattern=CODE_PATTERN)
    base_url: str = Field(default=DEFAULT_RELAY_URL, alias="baseUrl", min_length=1)
    tg_handle: str = Field(alias="tgHandle", min_length=1)
    bot_handle: str = Field(default=DEFAULT_BOT_HANDLE, alias="botHandle", min_length=1)


F = TypeVar("F", bound=ForwarderFields)


def parse_fields(model: type[F], raw: Any, variant: str) -> F:
    """Validate raw config fields, raising ConfigError with the offending fields."""
    if not isinstance(raw, dict):
        raise ConfigError(f"{variant} config must be an object, got {type(raw).__name__}")
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        missing = [".".join(str(p) for p in err["loc"]) for err in e.errors() if err["type"] == "missing"]
        invalid = [".".join(str(p) for p in err["loc"]) for err in e.errors() if err["type"] != "missing"]
        parts = []
        if missing:
            parts.append(f"missing {', '.join(missing)}")
        if invalid:
            parts.append(f"invalid {', '.join(invalid)}")
        raise ConfigError(
            f"Invalid {variant} config: {'; '.join(parts)}",
            details={"missing": missing, "invalid": invalid},
        ) from e
