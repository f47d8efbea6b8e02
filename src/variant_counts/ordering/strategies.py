from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd

from variant_counts.io.schema import DATE_COLUMN
from variant_counts.ordering.base import (
    OrderingStrategy,
    PinPolicy,
    ScoredOrdering,
    validate_variant_ids,
)


class RangeOrdering(ScoredOrdering):
    """Score by the spread between a variant's largest and smallest value."""

    name = "range"

    def __init__(self, descending: bool = False, pin_policy: PinPolicy | None = None) -> None:
        super().__init__(pin_policy=pin_policy)
        self.descending = descending

    def score(self, scaled: pd.DataFrame, variant_ids: list[str]) -> pd.Series:
        values = scaled[variant_ids]
        return values.max(axis=0) - values.min(axis=0)


class AllTimeMaxOrdering(ScoredOrdering):
    name = "all_time_max"

    def score(self, scaled: pd.DataFrame, variant_ids: list[str]) -> pd.Series:
        return scaled[variant_ids].max(axis=0)


class CurrentHighestOrdering(ScoredOrdering):
    """Score from the most recent sample only."""

    name = "current_highest"

    def score(self, scaled: pd.DataFrame, variant_ids: list[str]) -> pd.Series:
        # argmax picks the first row holding the latest date, by position.
        latest = int(scaled[DATE_COLUMN].to_numpy().argmax())
        return scaled.iloc[latest][variant_ids].astype(float)


class ShuffleOrdering(OrderingStrategy):
    name = "shuffle"

    def __init__(
        self,
        rng: np.random.Generator | None = None,
        pin_policy: PinPolicy | None = None,
    ) -> None:
        super().__init__(pin_policy=pin_policy)
        self.rng = rng if rng is not None else np.random.default_rng()

    def order(self, scaled: pd.DataFrame, variant_ids: Sequence[str]) -> list[str]:
        ids = validate_variant_ids(scaled, variant_ids)
        free, pinned = self.pin_policy.split(ids)
        # Pinned ids keep their current index; only the free slots are shuffled.
        shuffled = iter(fisher_yates(free, self.rng))
        held = set(pinned)
        return [name if name in held else next(shuffled) for name in ids]


def fisher_yates(items: Sequence[str], rng: np.random.Generator) -> list[str]:
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = int(rng.integers(0, i + 1))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled
