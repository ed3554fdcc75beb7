"""Response rewrite — restores the client-facing model id on responses.

For requests that resolved a virtual policy, every response the client
sees (unary body or each stream chunk) reports the virtual id it asked
for, never the upstream model that served it. Non-virtual requests are
left exactly as the upstream reported them.

All helpers are idempotent.
"""

from __future__ import annotations

from collections.abc import AsyncIterable, AsyncIterator
from typing import TypeVar

from policy_router.gateway.types import ChatCompletion, ChatCompletionChunk, RoutingRecord

ResponseT = TypeVar("ResponseT", ChatCompletion, ChatCompletionChunk, dict)


def restore_model(response: ResponseT, record: RoutingRecord) -> ResponseT:
    """Overwrite ``response``'s model with the original virtual id, in place.

    Accepts response dataclasses and decoded JSON dicts.
    """
    if not record.was_virtual:
        return response

    if isinstance(response, dict):
        response["model"] = record.original_model
    else:
        response.model = record.original_model
    return response


async def restore_stream(
    chunks: AsyncIterable[ResponseT],
    record: RoutingRecord,
) -> AsyncIterator[ResponseT]:
    """Yield ``chunks`` with each chunk's model restored.

    Closes ``chunks`` (when it supports ``aclose``) on exit, early or not.
    """
    try:
        async for chunk in chunks:
            yield restore_model(chunk, record)
    finally:
        aclose = getattr(chunks, "aclose", None)
        if aclose is not None:
            await aclose()

