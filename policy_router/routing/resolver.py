"""Policy Resolver — maps virtual policy ids to concrete upstream models.

Rules:
  - policy-a-ha       u < 0.5 → gpt-4o, else claude-3-sonnet-20240229
  - policy-b-cost     u < 0.8 → gemini-1.5-flash-latest, else claude-3-haiku-20240307
  - policy-c-quality  gpt-4o
  - policy-d-degrade  overloaded → gpt-3.5-turbo-0125, else gpt-4o

``u`` is a uniform draw in [0, 1). Unknown ids pass through unchanged.

The overload dependency is an injected probe (any zero-arg callable
returning bool), so the resolver can be tested without touching the
process-wide gauge.
"""

from __future__ import annotations

import logging
import random
import threading
import time
from collections.abc import Callable

from policy_router.core.metrics import record_resolution
from policy_router.routing.types import (
    COST_PRIMARY_SHARE,
    HA_PRIMARY_SHARE,
    VIRTUAL_POLICY_IDS,
    ConcreteModel,
    Resolution,
    VirtualPolicy,
)

logger = logging.getLogger(__name__)

OverloadProbe = Callable[[], bool]

# Shared entropy source, seeded once at import from the wall clock
_default_rng = random.Random(time.time_ns())
_default_rng_lock = threading.Lock()


def is_virtual_policy(model: str) -> bool:
    """True iff ``model`` is one of the four virtual policy ids."""
    return model in VIRTUAL_POLICY_IDS


class PolicyResolver:
    """Resolves virtual policy ids.

    Usage:
        resolver = PolicyResolver(overload_probe=gauge.overloaded)
        concrete, was_virtual = resolver.resolve(request.model)
    """

    def __init__(
        self,
        overload_probe: OverloadProbe,
        rng: random.Random | None = None,
    ):
        """
        Args:
            overload_probe: Answers "is the gateway overloaded" in bounded time
            rng: Entropy source; defaults to the process-wide generator
        """
        self._overload_probe = overload_probe
        if rng is None:
            self._rng = _default_rng
            self._rng_lock = _default_rng_lock
        else:
            self._rng = rng
            self._rng_lock = threading.Lock()

    def is_virtual(self, model: str) -> bool:
        return is_virtual_policy(model)

    def resolve(self, model: str, *, overloaded: bool | None = None) -> Resolution:
        """Resolve ``model`` to a concrete upstream id.

        Args:
            model: Requested model id
            overloaded: Overload snapshot for the degrade policy. When None
                the probe is consulted at call time.

        Returns:
            Resolution(concrete, was_virtual). Never raises.
        """
        if not is_virtual_policy(model):
            return Resolution(model, False)

        policy = VirtualPolicy(model)
        if policy is VirtualPolicy.HA:
            concrete = self._resolve_ha()
        elif policy is VirtualPolicy.COST:
            concrete = self._resolve_cost()
        elif policy is VirtualPolicy.QUALITY:
            concrete = ConcreteModel.GPT_4O.value
        else:
            if overloaded is None:
                overloaded = self._overload_probe()
            concrete = self._resolve_degrade(overloaded)

        logger.debug("Virtual policy %s resolved to %s", model, concrete)
        record_resolution(model, concrete)
        return Resolution(concrete, True)

    def _draw(self) -> float:
        with self._rng_lock:
            return self._rng.random()

    def _resolve_ha(self) -> str:
        if self._draw() < HA_PRIMARY_SHARE:
            return ConcreteModel.GPT_4O.value
        return ConcreteModel.CLAUDE_3_SONNET.value

    def _resolve_cost(self) -> str:
        if self._draw() < COST_PRIMARY_SHARE:
            return ConcreteModel.GEMINI_FLASH.value
        return ConcreteModel.CLAUDE_3_HAIKU.value

    @staticmethod
    def _resolve_degrade(overloaded: bool) -> str:
        if overloaded:
            return ConcreteModel.GPT_35_TURBO.value
        return ConcreteModel.GPT_4O.value
