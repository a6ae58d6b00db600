"""Shared fixtures: a recording mock transport and sample messages."""

from typing import Optional
from urllib.parse import parse_qsl

import httpx
import pytest

from sms_forwarder import HttpTransport, SmsMessage


class Recorder:
    """Mock HTTP endpoint that records every request it receives."""

    def __init__(self, status_code: int = 200, error: Optional[type[httpx.HTTPError]] = None):
        self.status_code = status_code
        self.error = error
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error("simulated failure", request=request)
        return httpx.Response(self.status_code, text="ok")

    @property
    def http(self) -> HttpTransport:
        return HttpTransport(transport=httpx.MockTransport(self.handler))

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_form(self) -> dict[str, str]:
        return dict(parse_qsl(self.last.content.decode()))

    @property
    def last_params(self) -> dict[str, str]:
        return dict(self.last.url.params)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def sms() -> SmsMessage:
    return SmsMessage(sender="A", body="hi", timestamp=0, thread_id=7)


@pytest.fixture
def make_recorder():
    return Recorder
