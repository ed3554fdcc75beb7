"""Core identifiers and fixed constants for virtual policy routing."""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class VirtualPolicy(str, Enum):
    """Synthetic model ids exposed to clients. Each names a routing rule."""

    HA = "policy-a-ha"  # High availability split
    COST = "policy-b-cost"  # Cost-biased split
    QUALITY = "policy-c-quality"  # Always the strongest model
    DEGRADE = "policy-d-degrade"  # Load-aware downgrade


class ConcreteModel(str, Enum):
    """Upstream models the resolver may emit."""

    GPT_4O = "gpt-4o"
    CLAUDE_3_SONNET = "claude-3-sonnet-20240229"
    GEMINI_FLASH = "gemini-1.5-flash-latest"
    CLAUDE_3_HAIKU = "claude-3-haiku-20240307"
    GPT_35_TURBO = "gpt-3.5-turbo-0125"


VIRTUAL_POLICY_IDS: frozenset[str] = frozenset(p.value for p in VirtualPolicy)
CONCRETE_MODEL_IDS: frozenset[str] = frozenset(m.value for m in ConcreteModel)


# ---------------------------------------------------------------------------
# Fixed constants
# ---------------------------------------------------------------------------

OVERLOAD_THRESHOLD = 50  # Strictly more in-flight requests than this = overloaded
OVERLOAD_MAX_TOKENS = 100  # max_tokens ceiling under overload
OVERLOAD_TEMPERATURE = 1.2  # temperature written under overload

HA_PRIMARY_SHARE = 0.5  # gpt-4o vs claude-3-sonnet
COST_PRIMARY_SHARE = 0.8  # gemini-flash vs claude-3-haiku


class OverloadLimits(NamedTuple):
    """The three overload constants, grouped for callers that report them."""

    max_tokens: int
    temperature: float
    threshold: int


def overload_limits() -> OverloadLimits:
    """Return the fixed overload clamp values and threshold."""
    return OverloadLimits(
        max_tokens=OVERLOAD_MAX_TOKENS,
        temperature=OVERLOAD_TEMPERATURE,
        threshold=OVERLOAD_THRESHOLD,
    )


# ---------------------------------------------------------------------------
# Resolution result
# ---------------------------------------------------------------------------


class Resolution(NamedTuple):
    """Result of resolving a requested model id.

    Unpacks as ``concrete, was_virtual = resolver.resolve(model)``.
    """

    concrete: str
    was_virtual: bool
