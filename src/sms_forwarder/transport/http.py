"""
HTTP transport used by the forwarders.

Every request opens a short-lived httpx client, so a transport holds no
connections between calls and needs no explicit close.
"""

from typing import Optional

import httpx
from pydantic import BaseModel

from sms_forwarder.errors import DeliveryFailure
from sms_forwarder.models.config import HttpMethod

DEFAULT_TIMEOUT = 30.0
USER_AGENT = "sms-forwarder/0.1.0"


class HttpRequest(BaseModel):
    method: HttpMethod
    url: str
    data: Optional[dict[str, str]] = None  # form-encoded body


class HttpResponse(BaseModel):
    status_code: int
    text: str = ""

    @property
    def ok(self) -> bool:
        return self.status_code == 200


class HttpTransport:
    def __init__(
        self,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._timeout = timeout
        self._transport = transport

    async def request(self, request: HttpRequest) -> HttpResponse:
        async with httpx.AsyncClient(
            transport=self._transport,
            timeout=self._timeout,
            headers={"User-Agent": USER_AGENT},
        ) as client:
            try:
                resp = await client.request(request.method.value, request.url, data=request.data)
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                # The URL may embed a bot token, keep it out of the message.
                raise DeliveryFailure(
                    f"{request.method.value} request failed: {type(e).__name__}",
                    details={"error": str(e)},
                ) from e
        return HttpResponse(status_code=resp.status_code, text=resp.text)

    async def get(self, url: str) -> HttpResponse:
        return await self.request(HttpRequest(method=HttpMethod.GET, url=url))

    async def post(self, url: str, data: Optional[dict[str, str]] = None) -> HttpResponse:
        return await self.request(HttpRequest(method=HttpMethod.POST, url=url, data=data))

    async def put(self, url: str, data: Optional[dict[str, str]] = None) -> HttpResponse:
        return await self.request(HttpRequest(method=HttpMethod.PUT, url=url, data=data))
