from __future__ import annotations

from collections import Counter

import numpy as np
import pandas as pd
import pytest

from variant_counts.config import AppConfig
from variant_counts.errors import EmptySeriesError, MissingJoinPartnerError
from variant_counts.ordering.strategies import AllTimeMaxOrdering, ShuffleOrdering
from variant_counts.pipeline.derive import build_derived_series, recolor, reorder

PROPORTION_ROWS = [
    {"week_end": "2024-01-06", "A": 60, "B": 30, "Other": 10},
    {"week_end": "2024-01-13", "A": 20, "B": None, "Other": 80},
]
TOTAL_ROWS = [
    {"date": "2024-01-06", "Midwest": 100, "National": 500, "Northeast": 100, "South": 200,
     "West": 100},
    {"date": "2024-01-13", "Midwest": 200, "National": 1000, "Northeast": 300, "South": 300,
     "West": 200},
]


def _config(**overrides: object) -> AppConfig:
    return AppConfig.model_validate(overrides)


def test_build_derived_series_end_to_end() -> None:
    derived = build_derived_series(
        PROPORTION_ROWS,
        TOTAL_ROWS,
        _config(ordering={"strategy": "all_time_max"}),
        rng=np.random.default_rng(0),
    )

    assert derived.variant_ids == ("A", "B", "Other")
    assert derived.totals["total"].tolist() == [1000.0, 2000.0]
    assert derived.scaled["A"].tolist() == pytest.approx([600.0, 400.0])
    assert derived.scaled["B"].tolist() == pytest.approx([300.0, 0.0])
    assert derived.scaled["Other"].tolist() == pytest.approx([100.0, 1600.0])
    assert derived.order == ["A", "B", "Other"]
    assert len(derived.palette) == 500
    assert derived.colors == {"A": derived.palette[0], "B": derived.palette[1],
                              "Other": derived.palette[2]}
    assert derived.unmatched_dates == []


def test_build_derived_series_payload_is_json_ready() -> None:
    derived = build_derived_series(PROPORTION_ROWS, TOTAL_ROWS, _config())

    payload = derived.to_payload()

    assert payload["variants"] == ["A", "B", "Other"]
    assert Counter(payload["order"]) == Counter(["A", "B", "Other"])
    assert payload["order"][-1] == "Other"
    assert payload["scaled"][0] == {"date": "2024-01-06", "A": 600.0, "B": 300.0, "Other": 100.0}
    assert payload["unmatched_dates"] == []


def test_build_derived_series_honours_total_field_override() -> None:
    derived = build_derived_series(
        PROPORTION_ROWS,
        TOTAL_ROWS,
        _config(totals={"fields": ["National"]}),
    )
    assert derived.totals["total"].tolist() == [500.0, 1000.0]
    assert derived.scaled["A"].tolist() == pytest.approx([300.0, 200.0])


def test_build_derived_series_missing_partner_policies() -> None:
    totals = TOTAL_ROWS[:1]

    with pytest.raises(MissingJoinPartnerError):
        build_derived_series(PROPORTION_ROWS, totals, _config())

    derived = build_derived_series(
        PROPORTION_ROWS, totals, _config(join={"missing_partner": "skip"})
    )
    assert len(derived.scaled) == 1
    assert derived.to_payload()["unmatched_dates"] == ["2024-01-13"]

    zero_filled = build_derived_series(
        PROPORTION_ROWS, totals, _config(join={"missing_partner": "zero_fill"})
    )
    assert zero_filled.scaled["Other"].tolist() == pytest.approx([100.0, 0.0])


def test_build_derived_series_requires_proportion_rows() -> None:
    with pytest.raises(EmptySeriesError):
        build_derived_series([], TOTAL_ROWS, _config())


def test_reorder_and_recolor_replace_state_without_mutation() -> None:
    derived = build_derived_series(
        PROPORTION_ROWS, TOTAL_ROWS, _config(), rng=np.random.default_rng(1)
    )
    original_order = list(derived.order)
    original_colors = dict(derived.colors)

    by_max = reorder(derived, AllTimeMaxOrdering())
    shuffled = reorder(derived, ShuffleOrdering(rng=np.random.default_rng(4)))
    recolored = recolor(derived, rng=np.random.default_rng(99))

    assert by_max.order == ["Other", "A", "B"]
    assert Counter(shuffled.order) == Counter(original_order)
    assert derived.order == original_order
    assert derived.colors == original_colors
    assert recolored.order == derived.order
    assert recolored.palette != derived.palette
    assert len(recolored.palette) == len(derived.palette)
    assert set(recolored.colors) == set(derived.colors)
    pd.testing.assert_frame_equal(recolored.scaled, derived.scaled)


def test_views_return_copies() -> None:
    derived = build_derived_series(PROPORTION_ROWS, TOTAL_ROWS, _config())

    view = derived.scaled_view()
    view.loc[0, "A"] = -1.0

    assert derived.scaled.loc[0, "A"] == pytest.approx(600.0)
    assert derived.proportion_view()["A"].tolist() == [60.0, 20.0]
