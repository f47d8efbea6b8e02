from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Sequence

import pandas as pd

from variant_counts.errors import EmptySeriesError, SchemaMismatchError

PinPosition = Literal["start", "end"]


@dataclass(frozen=True)
class PinPolicy:
    """Catch-all categories held at a fixed end of every order."""

    pinned_categories: tuple[str, ...] = ()
    pin_position: PinPosition = "end"

    def split(self, variant_ids: Sequence[str]) -> tuple[list[str], list[str]]:
        present = set(variant_ids)
        pinned = [name for name in dict.fromkeys(self.pinned_categories) if name in present]
        pinned_set = set(pinned)
        free = [name for name in variant_ids if name not in pinned_set]
        return free, pinned

    def combine(self, free: list[str], pinned: list[str]) -> list[str]:
        if self.pin_position == "start":
            return [*pinned, *free]
        return [*free, *pinned]


def validate_variant_ids(scaled: pd.DataFrame, variant_ids: Sequence[str]) -> list[str]:
    ids = [str(name) for name in variant_ids]
    if len(set(ids)) != len(ids):
        raise SchemaMismatchError("Variant order contains duplicate identifiers")
    missing = [name for name in ids if name not in scaled.columns]
    if missing:
        raise SchemaMismatchError(
            f"Scaled samples have no column for variant(s): {', '.join(missing)}"
        )
    return ids


class OrderingStrategy:
    name: str

    def __init__(self, pin_policy: PinPolicy | None = None) -> None:
        self.pin_policy = pin_policy or PinPolicy()

    def order(self, scaled: pd.DataFrame, variant_ids: Sequence[str]) -> list[str]:
        raise NotImplementedError


class ScoredOrdering(OrderingStrategy):
    """Order by a per-variant score; ties fall back to identifier order."""

    descending: bool = True

    def score(self, scaled: pd.DataFrame, variant_ids: list[str]) -> pd.Series:
        raise NotImplementedError

    def order(self, scaled: pd.DataFrame, variant_ids: Sequence[str]) -> list[str]:
        ids = validate_variant_ids(scaled, variant_ids)
        if scaled.empty:
            raise EmptySeriesError(f"Cannot compute '{self.name}' order from an empty series")

        free, pinned = self.pin_policy.split(ids)
        scores = self.score(scaled, free) if free else pd.Series(dtype=float)
        sign = -1.0 if self.descending else 1.0
        ranked = sorted(free, key=lambda name: (sign * float(scores[name]), name))
        return self.pin_policy.combine(ranked, pinned)
