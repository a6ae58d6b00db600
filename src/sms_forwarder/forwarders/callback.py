"""
Generic HTTP callback forwarder.
"""

from collections.abc import Mapping
from typing import Any, Optional, Union

from sms_forwarder.errors import ConfigError
from sms_forwarder.forwarders.base import HttpForwarder
from sms_forwarder.models.config import HttpCallbackFields, HttpMethod, clean_payload, parse_fields
from sms_forwarder.models.message import SmsMessage
from sms_forwarder.transport.http import HttpRequest, HttpTransport
from sms_forwarder.transport.uri import encode_query


class HttpCallbackForwarder(HttpForwarder):
    """Forwards SMS messages to a user-defined URL.

    GET requests carry the message and ``uri_payload`` in the query string.
    POST and PUT requests send the message merged with ``json_payload`` as a
    form body and append only ``uri_payload`` to the URL.
    """

    tag = "HttpCallbackForwarder"
    aliases = ("HttpCallback",)

    def __init__(
        self,
        callback_url: str,
        method: Union[HttpMethod, str] = HttpMethod.POST,
        uri_payload: Optional[dict[str, Any]] = None,
        json_payload: Optional[dict[str, Any]] = None,
        http: Optional[HttpTransport] = None,
    ):
        super().__init__(http)
        if not callback_url:
            raise ConfigError("Missing the callback url.")
        try:
            self.method = HttpMethod(method)
        except ValueError:
            raise ConfigError(f"Invalid HTTP method: `{method}`")
        # The caller is responsible for validating the URL scheme.
        self._callback_url = callback_url
        self.uri_payload = clean_payload(uri_payload)
        self.json_payload = clean_payload(json_payload)

    @property
    def callback_url(self) -> str:
        return self._callback_url

    @classmethod
    def from_config(cls, config: Mapping[str, Any], http: Optional[HttpTransport] = None) -> "HttpCallbackForwarder":
        f = parse_fields(HttpCallbackFields, cls.unwrap(config), cls.tag)
        return cls(
            f.callback_url,
            method=f.method,
            uri_payload=f.uri_payload,
            json_payload=f.json_payload,
            http=http,
        )

    def fields(self) -> dict[str, Any]:
        return HttpCallbackFields(
            callback_url=self._callback_url,
            method=self.method,
            uri_payload=self.uri_payload,
            json_payload=self.json_payload,
        ).dump()

    def build_request(self, message: SmsMessage) -> HttpRequest:
        if self.method == HttpMethod.GET:
            params = message.to_payload()
            params.update(self.uri_payload)
            return HttpRequest(method=HttpMethod.GET, url=f"{self._callback_url}{encode_query(params)}")

        body = message.to_payload()
        body.update(self.json_payload)
        url = f"{self._callback_url}{encode_query(self.uri_payload)}"
        return HttpRequest(method=self.method, url=url, data=body)
