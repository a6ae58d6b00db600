"""
AsyncSmsRelay / SmsRelay: owners of the active forwarder.
"""

import asyncio
import logging
from collections.abc import AsyncIterable, Callable, Iterable, Mapping
from typing import Any, Optional, Union

from pydantic import BaseModel

from sms_forwarder import codec
from sms_forwarder.forwarders import Forwarder
from sms_forwarder.models.message import SmsMessage
from sms_forwarder.transport.http import DEFAULT_TIMEOUT, HttpTransport

logger = logging.getLogger(__name__)


class ForwardResult(BaseModel):
    ok: bool
    forwarder: Optional[str] = None
    error: Optional[str] = None


class AsyncSmsRelay:
    """Async relay (primary).

    Holds the active forwarder as a plain reference. Replacing it never touches
    the previous instance, so forwards already in flight finish with the
    forwarder they started with.
    """

    def __init__(
        self,
        forwarder: Optional[Forwarder] = None,
        http: Optional[HttpTransport] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
    ):
        self.http = http or HttpTransport(timeout=timeout)
        self._forwarder = forwarder

    @property
    def forwarder(self) -> Optional[Forwarder]:
        return self._forwarder

    @property
    def active(self) -> bool:
        return self._forwarder is not None

    def activate(self, config: Union[str, Mapping[str, Any]]) -> Forwarder:
        """Decode ``config`` and make it the active forwarder.

        Raises ConfigError and keeps the current forwarder if the config is broken.
        """
        forwarder = codec.decode(config, http=self.http)
        self._forwarder = forwarder
        logger.info("Activated %s", forwarder.tag)
        return forwarder

    def use(self, forwarder: Forwarder) -> None:
        self._forwarder = forwarder

    def deactivate(self) -> None:
        self._forwarder = None

    async def forward(self, message: SmsMessage) -> ForwardResult:
        return await self._forward_with(self._forwarder, message)

    async def _forward_with(self, forwarder: Optional[Forwarder], message: SmsMessage) -> ForwardResult:
        if forwarder is None:
            logger.warning("Dropped message from %s: no active forwarder", message.sender)
            return ForwardResult(ok=False, error="no active forwarder")
        ok = await forwarder.forward(message)
        return ForwardResult(
            ok=ok,
            forwarder=forwarder.tag,
            error=None if ok else "delivery failed",
        )

    async def forward_many(self, messages: Iterable[SmsMessage]) -> list[ForwardResult]:
        """Forward messages concurrently. Results keep the input order."""
        return list(await asyncio.gather(*(self._forward_isolated(m) for m in messages)))

    async def run(
        self,
        source: AsyncIterable[SmsMessage],
        on_result: Optional[Callable[[ForwardResult], None]] = None,
    ) -> list[ForwardResult]:
        """Forward every message from ``source`` as it arrives.

        Each message gets its own task, so a slow endpoint never holds up the
        next one. Results arrive in completion order. With ``on_result`` they are
        handed over one by one and not kept; otherwise they are returned once the
        source is exhausted.

        If the source fails, forwards already started still finish before the
        error propagates. Cancelling ``run`` cancels them.
        """
        results: list[ForwardResult] = []
        pending: set[asyncio.Future] = set()

        def _done(task: asyncio.Future) -> None:
            pending.discard(task)
            if task.cancelled():
                return
            if on_result is not None:
                try:
                    on_result(task.result())
                except Exception:
                    logger.exception("Result callback failed")
            else:
                results.append(task.result())

        try:
            async for message in source:
                task = asyncio.ensure_future(self._forward_isolated(message))
                pending.add(task)
                task.add_done_callback(_done)
        except asyncio.CancelledError:
            for task in pending:
                task.cancel()
            raise
        finally:
            if pending:
                await asyncio.wait(set(pending))
        return results

    async def _forward_isolated(self, message: SmsMessage) -> ForwardResult:
        forwarder = self._forwarder
        try:
            return await self._forward_with(forwarder, message)
        except Exception as e:
            logger.exception("Unexpected error forwarding message from %s", message.sender)
            return ForwardResult(
                ok=False,
                forwarder=forwarder.tag if forwarder else None,
                error=f"{type(e).__name__}: {e}",
            )


class SmsRelay:
    """Sync wrapper around AsyncSmsRelay. Runs the event loop internally."""

    def __init__(self, **kwargs: Any):
        self._async = AsyncSmsRelay(**kwargs)
        self._loop = asyncio.new_event_loop()

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def forwarder(self) -> Optional[Forwarder]:
        return self._async.forwarder

    @property
    def active(self) -> bool:
        return self._async.active

    def activate(self, config: Union[str, Mapping[str, Any]]) -> Forwarder:
        return self._async.activate(config)

    def use(self, forwarder: Forwarder) -> None:
        self._async.use(forwarder)

    def deactivate(self) -> None:
        self._async.deactivate()

    def forward(self, message: SmsMessage) -> ForwardResult:
        return self._run(self._async.forward(message))

    def forward_many(self, messages: Iterable[SmsMessage]) -> list[ForwardResult]:
        return self._run(self._async.forward_many(messages))

    def run(
        self,
        source: AsyncIterable[SmsMessage],
        on_result: Optional[Callable[[ForwardResult], None]] = None,
    ) -> list[ForwardResult]:
        return self._run(self._async.run(source, on_result))

    def close(self) -> None:
        self._loop.close()
