"""
Live tests for sms-forwarder: send real requests to the configured endpoints.

Requires environment variables:
  SMSFWD_CALLBACK_URL: an HTTP endpoint answering 200 (e.g. a request bin)
  SMSFWD_TG_TOKEN: (optional) Telegram bot token
  SMSFWD_TG_CHAT_ID: (optional) Telegram chat id

Run: SMSFWD_INTEGRATION=1 pytest tests/integration/ -v
"""

import os
import time

import pytest

from sms_forwarder import AsyncSmsRelay, HttpCallbackForwarder, SmsMessage, TelegramBotForwarder

SKIP = not os.environ.get("SMSFWD_INTEGRATION")
CALLBACK_URL = os.environ.get("SMSFWD_CALLBACK_URL", "")
TG_TOKEN = os.environ.get("SMSFWD_TG_TOKEN", "")
TG_CHAT_ID = os.environ.get("SMSFWD_TG_CHAT_ID", "")

pytestmark = pytest.mark.skipif(SKIP, reason="SMSFWD_INTEGRATION not set")


def make_message() -> SmsMessage:
    return SmsMessage(sender="+15550000000", body="sms-forwarder live test", timestamp=int(time.time() * 1000))


class TestCallback:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["GET", "POST", "PUT"])
    async def test_forward(self, method):
        if not CALLBACK_URL:
            pytest.skip("SMSFWD_CALLBACK_URL not set")
        relay = AsyncSmsRelay(forwarder=HttpCallbackForwarder(CALLBACK_URL, method=method))
        result = await relay.forward(make_message())
        assert result.ok, result.error


class TestTelegram:
    @pytest.mark.asyncio
    async def test_forward(self):
        if not TG_TOKEN or not TG_CHAT_ID:
            pytest.skip("SMSFWD_TG_TOKEN / SMSFWD_TG_CHAT_ID not set")
        fwd = TelegramBotForwarder(TG_TOKEN, int(TG_CHAT_ID))
        assert await fwd.forward(make_message())

    @pytest.mark.asyncio
    async def test_bad_token_is_failure(self):
        fwd = TelegramBotForwarder("0:invalid", 1)
        assert await fwd.forward(make_message()) is False
