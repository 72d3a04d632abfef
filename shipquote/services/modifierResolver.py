"""
Modifier Resolver -- looks up the ``{flat, percent}`` modifier that applies
to one pricing dimension of a modifier set.

Missing keys are never an error: an unknown state, route bucket or vehicle
class resolves to ``ZERO_MODIFIER``.  Callers that need an audit trail use
``is_known_key`` and log the miss themselves.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from shipquote.models import ZERO_MODIFIER, Modifier, ModifierSet, ServiceLevelOption

logger = logging.getLogger(__name__)


def resolve_modifier(mapping: Optional[Mapping[str, Modifier]], key: Optional[str]) -> Modifier:
    """Exact-key lookup defaulting to the zero modifier."""
    if not mapping or key is None:
        return ZERO_MODIFIER
    modifier = mapping.get(key)
    if modifier is None:
        logger.debug("No modifier configured for key %r", key)
        return ZERO_MODIFIER
    return modifier


def is_known_key(mapping: Optional[Mapping[str, Modifier]], key: Optional[str]) -> bool:
    return bool(mapping) and key is not None and key in mapping


def resolve_route(modifier_set: ModifierSet, bucket: Optional[str]) -> Modifier:
    """Route modifier for a precomputed distance bucket key."""
    return resolve_modifier(modifier_set.routes, bucket)


def resolve_state(modifier_set: ModifierSet, code: Optional[str]) -> Modifier:
    """State modifier by two-letter code."""
    return resolve_modifier(modifier_set.states, code.strip().upper() if code else None)


def resolve_vehicle_class(modifier_set: ModifierSet, pricing_class: Optional[str]) -> Modifier:
    return resolve_modifier(modifier_set.vehicles, pricing_class)


def resolve_service_level(
    modifier_set: ModifierSet,
    level: ServiceLevelOption,
) -> Optional[float]:
    """Explicit final price for ``level``, or None when absent or not positive.

    The first entry for a level wins.
    """
    level = ServiceLevelOption(level)
    for entry in modifier_set.service_levels:
        if entry.service_level == level:
            return entry.value if entry.value > 0 else None
    return None
