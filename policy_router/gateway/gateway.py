"""Policy gateway — wires the routing core into a request pipeline.

Per request:
  1. Snapshot overload once
  2. Resolve the requested model (virtual policies → concrete upstream model)
  3. Count the request on the concurrency gauge
  4. Clamp sampling parameters with the same overload snapshot
  5. Dispatch upstream
  6. Restore the virtual id on the response (unary body or every chunk)
  7. Release the gauge on every exit path

Usage:
    gateway = PolicyGateway(upstream=MyUpstream())

    response = await gateway.execute(ChatRequest(model="policy-a-ha", ...))

    async for chunk in gateway.stream(request):
        ...
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import aclosing, asynccontextmanager

from policy_router.core.metrics import record_overload_snapshot
from policy_router.gateway.spoofing import restore_model, restore_stream
from policy_router.gateway.types import (
    ChatCompletion,
    ChatCompletionChunk,
    ChatRequest,
    RoutingRecord,
)
from policy_router.routing.context import RoutingContext, get_routing_context

logger = logging.getLogger(__name__)


class BaseUpstream(ABC):
    """Transport to the upstream providers. Receives concrete model ids only."""

    @abstractmethod
    async def send(self, request: ChatRequest) -> ChatCompletion:
        """Send a unary request."""
        ...

    @abstractmethod
    def stream(self, request: ChatRequest) -> AsyncIterator[ChatCompletionChunk]:
        """Send a streaming request and iterate its chunks."""
        ...


class PolicyGateway:
    """Runs requests through resolve → count → clamp → dispatch → restore."""

    def __init__(
        self,
        upstream: BaseUpstream,
        context: RoutingContext | None = None,
    ):
        """
        Args:
            upstream: Transport that talks to the real providers
            context: Routing context; defaults to the process-wide one
        """
        self.upstream = upstream
        self.context = context or get_routing_context()

    def prepare(self, request: ChatRequest) -> RoutingRecord:
        """Resolve and clamp ``request`` in place; does not touch the gauge.

        Returns the record the response stage needs.
        """
        overloaded = self.context.overloaded()
        record_overload_snapshot(overloaded)

        original = request.model
        concrete, was_virtual = self.context.resolve(original, overloaded=overloaded)
        request.model = concrete

        self.context.clamp(request, overloaded=overloaded)

        if was_virtual:
            logger.debug(
                "Request %s routed %s -> %s",
                request.request_id,
                original,
                concrete,
                extra={
                    "request_id": request.request_id,
                    "virtual_model": original,
                    "concrete_model": concrete,
                },
            )

        return RoutingRecord(
            original_model=original,
            concrete_model=concrete,
            was_virtual=was_virtual,
            overloaded=overloaded,
        )

    @asynccontextmanager
    async def session(self, request: ChatRequest) -> AsyncIterator[RoutingRecord]:
        """Prepare ``request`` and hold one gauge slot for the enclosed block."""
        record = self.prepare(request)
        async with self.context.gauge.atrack() as load:
            logger.debug("Request %s admitted at load %d", request.request_id, load)
            yield record

    async def execute(self, request: ChatRequest) -> ChatCompletion:
        """Unary request. Upstream exceptions propagate after the gauge is released."""
        async with self.session(request) as record:
            response = await self.upstream.send(request)
        return restore_model(response, record)

    async def stream(self, request: ChatRequest) -> AsyncIterator[ChatCompletionChunk]:
        """Streaming request.

        The upstream stream is closed, then the gauge slot released, when the
        stream ends, fails or is closed early.
        """
        async with self.session(request) as record:
            async with aclosing(restore_stream(self.upstream.stream(request), record)) as chunks:
                async for chunk in chunks:
                    yield chunk

    def get_status(self) -> dict:
        """Current load as seen by this gateway."""
        gauge = self.context.gauge
        return {
            "active_requests": gauge.read(),
            "threshold": gauge.threshold,
            "overloaded": gauge.overloaded(),
        }
