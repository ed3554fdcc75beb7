"""Overload Clamp — sampling parameter rewrite for outbound requests.

Under overload:
  - max_tokens above 100 is lowered to 100 (unset or lower values are kept)
  - temperature is overwritten with 1.2, whatever the caller sent
  - model is never touched

Temperature is overwritten rather than capped: a caller asking for 0.2
gets 1.2 under load.
"""

from __future__ import annotations

import logging
from typing import Protocol, TypeVar

from policy_router.core.metrics import record_clamp
from policy_router.routing.resolver import OverloadProbe
from policy_router.routing.types import OVERLOAD_MAX_TOKENS, OVERLOAD_TEMPERATURE

logger = logging.getLogger(__name__)


class SamplingParams(Protocol):
    """Anything with mutable ``max_tokens`` and ``temperature`` attributes."""

    model: str
    max_tokens: int | None
    temperature: float | None


RequestT = TypeVar("RequestT", bound=SamplingParams)


def apply_overload_clamp(request: RequestT, overloaded: bool) -> RequestT:
    """Clamp ``request`` in place when ``overloaded``; returns the same object.

    A no-op when not overloaded. Idempotent.
    """
    if not overloaded:
        return request

    original_max_tokens = request.max_tokens
    original_temperature = request.temperature

    if request.max_tokens is not None and request.max_tokens > OVERLOAD_MAX_TOKENS:
        request.max_tokens = OVERLOAD_MAX_TOKENS
    request.temperature = OVERLOAD_TEMPERATURE

    logger.debug(
        "Overload clamp on %s: max_tokens %s -> %s, temperature %s -> %s",
        request.model,
        original_max_tokens,
        request.max_tokens,
        original_temperature,
        request.temperature,
    )
    record_clamp()
    return request


class OverloadClamp:
    """Clamp bound to an overload probe.

    Usage:
        clamp = OverloadClamp(gauge.overloaded)
        clamp(request)                     # reads the probe now
        clamp(request, overloaded=snapshot)  # uses a per-request snapshot
    """

    def __init__(self, overload_probe: OverloadProbe):
        self._overload_probe = overload_probe

    def __call__(self, request: RequestT, overloaded: bool | None = None) -> RequestT:
        if overloaded is None:
            overloaded = self._overload_probe()
        return apply_overload_clamp(request, overloaded)
