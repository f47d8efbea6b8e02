from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Sequence

import numpy as np
import pandas as pd

from variant_counts.colors import assign_colors, regenerate_palette
from variant_counts.config import AppConfig
from variant_counts.io.schema import DATE_COLUMN, VariantSchema, extract_variant_schema
from variant_counts.io.total_fields import resolve_total_fields
from variant_counts.ordering.base import OrderingStrategy
from variant_counts.ordering.registry import build_strategy
from variant_counts.pipeline.join import join_series
from variant_counts.preprocess.normalize import normalize_proportions, normalize_totals

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class DerivedSeries:
    schema: VariantSchema
    proportions: pd.DataFrame
    totals: pd.DataFrame
    scaled: pd.DataFrame
    order: list[str]
    palette: list[str]
    colors: dict[str, str]
    unmatched_dates: list[pd.Timestamp] = field(default_factory=list)

    @property
    def variant_ids(self) -> tuple[str, ...]:
        return self.schema.variant_ids

    def scaled_view(self) -> pd.DataFrame:
        return self.scaled.copy()

    def proportion_view(self) -> pd.DataFrame:
        return self.proportions.copy()

    def to_payload(self) -> dict[str, Any]:
        return {
            "variants": list(self.variant_ids),
            "order": list(self.order),
            "colors": dict(self.colors),
            "scaled": _frame_records(self.scaled),
            "unmatched_dates": [_format_date(value) for value in self.unmatched_dates],
        }


def _format_date(value: pd.Timestamp) -> str:
    stamp = pd.Timestamp(value)
    if stamp == stamp.normalize():
        return stamp.date().isoformat()
    return stamp.isoformat()


def _frame_records(frame: pd.DataFrame) -> list[dict[str, Any]]:
    records: list[dict[str, Any]] = []
    for row in frame.to_dict(orient="records"):
        record: dict[str, Any] = {DATE_COLUMN: _format_date(row.pop(DATE_COLUMN))}
        record.update({name: float(value) for name, value in row.items()})
        records.append(record)
    return records


def build_derived_series(
    proportion_rows: Sequence[Mapping[str, Any]],
    total_rows: Sequence[Mapping[str, Any]],
    config: AppConfig,
    rng: np.random.Generator | None = None,
) -> DerivedSeries:
    """Run the full derivation: schema, normalization, join, order and colors."""
    schema = extract_variant_schema(proportion_rows, date_field=config.columns.proportion_date)
    total_fields = resolve_total_fields(
        version=config.totals.schema_version,
        override=config.totals.fields,
    )

    proportions = normalize_proportions(
        proportion_rows,
        schema,
        normalize_dates=config.join.normalize_dates,
    )
    totals = normalize_totals(
        total_rows,
        date_field=config.columns.total_date,
        total_fields=total_fields,
        normalize_dates=config.join.normalize_dates,
    )
    joined = join_series(
        proportions,
        totals,
        schema.variant_ids,
        missing_partner=config.join.missing_partner,
    )

    ordering_rng = rng if rng is not None else np.random.default_rng(config.ordering.random_seed)
    palette_rng = rng if rng is not None else np.random.default_rng(config.palette.random_seed)

    strategy = build_strategy(config.ordering, rng=ordering_rng)
    order = strategy.order(joined.scaled, schema.variant_ids)
    palette = regenerate_palette(config.palette.size, rng=palette_rng)
    colors = assign_colors(palette, schema.variant_ids)

    LOGGER.info(
        "Derived %d scaled samples for %d variants using %s ordering (totals: %s)",
        len(joined.scaled),
        len(schema.variant_ids),
        strategy.name,
        ", ".join(total_fields),
    )
    return DerivedSeries(
        schema=schema,
        proportions=proportions,
        totals=totals,
        scaled=joined.scaled,
        order=order,
        palette=palette,
        colors=colors,
        unmatched_dates=joined.unmatched_dates,
    )


def reorder(derived: DerivedSeries, strategy: OrderingStrategy) -> DerivedSeries:
    """Recompute the order with ``strategy``, starting from the current order."""
    return replace(derived, order=strategy.order(derived.scaled, derived.order))


def recolor(
    derived: DerivedSeries,
    rng: np.random.Generator | None = None,
    size: int | None = None,
) -> DerivedSeries:
    palette = regenerate_palette(size or len(derived.palette), rng=rng)
    return replace(derived, palette=palette, colors=assign_colors(palette, derived.variant_ids))
