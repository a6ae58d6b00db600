"""Tests for the managed Telegram relay forwarder."""

import re

import httpx
import pytest

from sms_forwarder import (
    ConfigError,
    HttpMethod,
    HttpTransport,
    ManagedRelayForwarder,
    SetupCheckFailure,
    SmsMessage,
)
from sms_forwarder.forwarders.relay import generate_code
from sms_forwarder.models.config import DEFAULT_BOT_HANDLE, DEFAULT_RELAY_URL

CODE_RE = re.compile(r"^[A-Z]{8}$")


def _relay(**kwargs) -> ManagedRelayForwarder:
    defaults = {"tg_handle": "alice", "base_url": "https://relay.test", "code": "ABCDEFGH"}
    defaults.update(kwargs)
    return ManagedRelayForwarder(**defaults)


class TestSetup:
    def test_generated_code_format(self):
        for _ in range(50):
            assert CODE_RE.match(generate_code())

    def test_fresh_forwarder_gets_code(self):
        fwd = ManagedRelayForwarder("alice")
        assert CODE_RE.match(fwd.code)
        assert fwd.base_url == DEFAULT_RELAY_URL
        assert fwd.bot_handle == DEFAULT_BOT_HANDLE
        assert fwd.callback_url == f"{DEFAULT_RELAY_URL}/forward"
        assert fwd.method == HttpMethod.POST
        assert fwd.linked is False

    def test_setup_url(self):
        fwd = _relay(bot_handle="mybot")
        assert fwd.get_setup_url() == "https://t.me/mybot?start=ABCDEFGH_alice"

    def test_check_url(self):
        assert _relay().check_url() == "https://relay.test/check_user?username=alice&code=ABCDEFGH&"

    def test_requires_handle(self):
        with pytest.raises(ConfigError):
            ManagedRelayForwarder("")

    def test_rejects_malformed_code(self):
        with pytest.raises(ConfigError):
            _relay(code="abc")


class TestLinkCheck:
    @pytest.mark.asyncio
    async def test_linked_on_200(self, recorder):
        fwd = _relay(http=recorder.http)
        assert await fwd.check_linked() is True
        assert fwd.linked is True
        req = recorder.last
        assert req.method == "GET"
        assert req.url.path == "/check_user"
        assert recorder.last_params == {"username": "alice", "code": "ABCDEFGH"}

    @pytest.mark.asyncio
    async def test_not_linked_on_other_status(self, make_recorder):
        fwd = _relay(http=make_recorder(status_code=404).http)
        assert await fwd.check_linked() is False
        assert fwd.linked is False

    @pytest.mark.asyncio
    async def test_not_linked_on_transport_error(self, make_recorder):
        fwd = _relay(http=make_recorder(error=httpx.ConnectError).http)
        assert await fwd.check_linked() is False

    @pytest.mark.asyncio
    async def test_verify_link_raises(self, make_recorder):
        fwd = _relay(http=make_recorder(status_code=403).http)
        with pytest.raises(SetupCheckFailure) as exc:
            await fwd.verify_link()
        assert exc.value.details == {"status_code": 403}

    @pytest.mark.asyncio
    async def test_wait_until_linked_polls(self):
        statuses = iter([404, 404, 200])
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(next(statuses))

        fwd = _relay(http=HttpTransport(transport=httpx.MockTransport(handler)))
        assert await fwd.wait_until_linked(attempts=5, interval=0) is True
        assert len(seen) == 3

    @pytest.mark.asyncio
    async def test_wait_until_linked_gives_up(self, make_recorder):
        rec = make_recorder(status_code=404)
        fwd = _relay(http=rec.http)
        assert await fwd.wait_until_linked(attempts=2, interval=0) is False
        assert len(rec.requests) == 2


class TestForwarding:
    def test_build_request_appends_code_and_handle(self):
        msg = SmsMessage(sender="+1", body="hi there", timestamp=0, thread_id=5)
        req = _relay().build_request(msg)
        assert req.method == HttpMethod.POST
        assert req.url == (
            "https://relay.test/forward?sender=%2B1&body=hi%20there&timestamp=0&"
            "code=ABCDEFGH&username=alice"
        )
        assert req.data is None

    @pytest.mark.asyncio
    async def test_forward_on_the_wire(self, recorder, sms):
        fwd = _relay(http=recorder.http)
        assert await fwd.forward(sms) is True
        assert recorder.last.method == "POST"
        assert recorder.last.url.path == "/forward"
        assert recorder.last_params == {
            "sender": "A", "body": "hi", "timestamp": "0", "code": "ABCDEFGH", "username": "alice",
        }

    @pytest.mark.asyncio
    async def test_forward_failure(self, make_recorder, sms):
        fwd = _relay(http=make_recorder(status_code=502).http)
        assert await fwd.forward(sms) is False


class TestConfig:
    def test_round_trip_keeps_code(self):
        fwd = _relay(bot_handle="mybot")
        config = fwd.to_config()
        assert config == {
            "DeployedTelegramBotForwarder": {
                "tgCode": "ABCDEFGH",
                "baseUrl": "https://relay.test",
                "tgHandle": "alice",
                "botHandle": "mybot",
            }
        }
        assert ManagedRelayForwarder.from_config(config) == fwd

    def test_missing_code_is_regenerated(self, caplog):
        with caplog.at_level("INFO"):
            fwd = ManagedRelayForwarder.from_config({"tgHandle": "alice"})
        assert CODE_RE.match(fwd.code)
        assert fwd.base_url == DEFAULT_RELAY_URL
        assert fwd.bot_handle == DEFAULT_BOT_HANDLE
        assert "setup must be redone" in caplog.text

    def test_null_fields_use_defaults(self):
        fwd = ManagedRelayForwarder.from_config({"tgHandle": "alice", "baseUrl": None, "tgCode": None})
        assert fwd.base_url == DEFAULT_RELAY_URL

    def test_missing_handle(self):
        with pytest.raises(ConfigError) as exc:
            ManagedRelayForwarder.from_config({"DeployedTelegramBotForwarder": {"tgCode": "ABCDEFGH"}})
        assert exc.value.details["missing"] == ["tgHandle"]

    def test_malformed_code(self):
        with pytest.raises(ConfigError):
            ManagedRelayForwarder.from_config({"tgHandle": "alice", "tgCode": "short"})

    def test_linked_is_not_persisted(self):
        assert "linked" not in _relay().fields()
