from __future__ import annotations

import numpy as np

from variant_counts.config import OrderingConfig
from variant_counts.ordering.base import OrderingStrategy, PinPolicy
from variant_counts.ordering.strategies import (
    AllTimeMaxOrdering,
    CurrentHighestOrdering,
    RangeOrdering,
    ShuffleOrdering,
)

STRATEGY_NAMES = (
    RangeOrdering.name,
    AllTimeMaxOrdering.name,
    CurrentHighestOrdering.name,
    ShuffleOrdering.name,
)


def build_strategy(
    config: OrderingConfig,
    rng: np.random.Generator | None = None,
    *,
    strategy: str | None = None,
) -> OrderingStrategy:
    pin_policy = PinPolicy(
        pinned_categories=tuple(config.pinned_categories),
        pin_position=config.pin_position,
    )
    name = strategy or config.strategy
    if name == RangeOrdering.name:
        return RangeOrdering(descending=config.descending, pin_policy=pin_policy)
    if name == AllTimeMaxOrdering.name:
        return AllTimeMaxOrdering(pin_policy=pin_policy)
    if name == CurrentHighestOrdering.name:
        return CurrentHighestOrdering(pin_policy=pin_policy)
    if name == ShuffleOrdering.name:
        if rng is None:
            rng = np.random.default_rng(config.random_seed)
        return ShuffleOrdering(rng=rng, pin_policy=pin_policy)
    raise ValueError(f"Unknown ordering strategy '{name}'. Known: {', '.join(STRATEGY_NAMES)}")
