"""Routing core: concurrency gauge, policy resolver and overload clamp."""

from policy_router.routing.clamp import OverloadClamp, apply_overload_clamp
from policy_router.routing.context import (
    RoutingContext,
    clamp_request,
    get_routing_context,
    is_virtual,
    resolve,
)
from policy_router.routing.gauge import (
    ConcurrencyGauge,
    active_requests,
    decrement_active_requests,
    get_active_requests,
    increment_active_requests,
    should_activate_overload,
)
from policy_router.routing.resolver import PolicyResolver, is_virtual_policy
from policy_router.routing.types import (
    ConcreteModel,
    OverloadLimits,
    Resolution,
    VirtualPolicy,
    overload_limits,
)

__all__ = [
    "ConcreteModel",
    "ConcurrencyGauge",
    "OverloadClamp",
    "OverloadLimits",
    "PolicyResolver",
    "Resolution",
    "RoutingContext",
    "VirtualPolicy",
    "active_requests",
    "apply_overload_clamp",
    "clamp_request",
    "decrement_active_requests",
    "get_active_requests",
    "get_routing_context",
    "increment_active_requests",
    "is_virtual",
    "is_virtual_policy",
    "overload_limits",
    "resolve",
    "should_activate_overload",
]
