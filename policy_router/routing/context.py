"""Routing context — the gauge, resolver and clamp behind one handle.

A gateway may own an explicit ``RoutingContext`` and pass it around, or use
the process-wide default via ``get_routing_context()`` and the module-level
helpers below.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field

from policy_router.routing.clamp import OverloadClamp, RequestT
from policy_router.routing.gauge import ConcurrencyGauge, active_requests
from policy_router.routing.resolver import PolicyResolver
from policy_router.routing.types import Resolution


@dataclass
class RoutingContext:
    """Gauge plus the resolver and clamp that read it."""

    gauge: ConcurrencyGauge = field(default_factory=ConcurrencyGauge)
    rng: random.Random | None = None
    resolver: PolicyResolver = field(init=False)
    clamp: OverloadClamp = field(init=False)

    def __post_init__(self) -> None:
        self.resolver = PolicyResolver(overload_probe=self.gauge.overloaded, rng=self.rng)
        self.clamp = OverloadClamp(self.gauge.overloaded)

    def overloaded(self) -> bool:
        return self.gauge.overloaded()

    def resolve(self, model: str, *, overloaded: bool | None = None) -> Resolution:
        return self.resolver.resolve(model, overloaded=overloaded)

    def is_virtual(self, model: str) -> bool:
        return self.resolver.is_virtual(model)


# Process-wide context, built once at import
_default_context = RoutingContext(gauge=active_requests)


def get_routing_context() -> RoutingContext:
    """Process-wide context built on the ``active_requests`` gauge."""
    return _default_context


def resolve(model: str) -> Resolution:
    return get_routing_context().resolve(model)


def is_virtual(model: str) -> bool:
    return get_routing_context().is_virtual(model)


def clamp_request(request: RequestT) -> RequestT:
    return get_routing_context().clamp(request)
