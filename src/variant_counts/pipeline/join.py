from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal, Sequence

import pandas as pd

from variant_counts.errors import MissingJoinPartnerError, SchemaMismatchError
from variant_counts.io.schema import DATE_COLUMN

LOGGER = logging.getLogger(__name__)

JOIN_TOTAL_COLUMN = "__join_total__"

MissingPartnerPolicy = Literal["raise", "skip", "zero_fill"]


@dataclass(frozen=True)
class JoinResult:
    scaled: pd.DataFrame
    unmatched_dates: list[pd.Timestamp] = field(default_factory=list)


def _format_dates(dates: Sequence[pd.Timestamp]) -> list[str]:
    return [pd.Timestamp(value).isoformat() for value in dates]


def _unique_totals(totals: pd.DataFrame) -> pd.DataFrame:
    duplicated = totals[DATE_COLUMN].duplicated(keep="first")
    if duplicated.any():
        LOGGER.warning(
            "Totals series has %d duplicate date(s); keeping the first total for each: %s",
            int(duplicated.sum()),
            ", ".join(_format_dates(totals.loc[duplicated, DATE_COLUMN].tolist())),
        )
    return totals.loc[~duplicated, [DATE_COLUMN, "total"]].rename(
        columns={"total": JOIN_TOTAL_COLUMN}
    )


def find_unmatched_dates(proportions: pd.DataFrame, totals: pd.DataFrame) -> list[pd.Timestamp]:
    """Return proportion dates with no exactly-equal total date, in input order."""
    known = set(totals[DATE_COLUMN].tolist())
    unmatched: list[pd.Timestamp] = []
    for value in proportions[DATE_COLUMN].tolist():
        if value not in known and value not in unmatched:
            unmatched.append(value)
    return unmatched


def join_series(
    proportions: pd.DataFrame,
    totals: pd.DataFrame,
    variant_ids: Sequence[str],
    missing_partner: MissingPartnerPolicy = "raise",
) -> JoinResult:
    """Scale each proportion sample by the total sharing its exact date.

    ``scaled[v] = proportion[v] * total / 100``. Dates without a total are
    handled by ``missing_partner``: ``raise`` fails the join, ``skip`` drops
    them from the output, ``zero_fill`` treats the missing total as zero.
    Skipped and zero-filled dates are reported on the result.
    """
    missing_columns = [name for name in variant_ids if name not in proportions.columns]
    if missing_columns:
        raise SchemaMismatchError(
            f"Proportion samples are missing variant column(s): {', '.join(missing_columns)}"
        )

    unmatched = find_unmatched_dates(proportions, totals)
    if unmatched and missing_partner == "raise":
        raise MissingJoinPartnerError(_format_dates(unmatched))

    merged = proportions[[DATE_COLUMN, *variant_ids]].merge(
        _unique_totals(totals),
        on=DATE_COLUMN,
        how="left",
        validate="many_to_one",
    )
    has_total = merged[JOIN_TOTAL_COLUMN].notna()

    if unmatched:
        LOGGER.warning(
            "No total for %d proportion date(s) (%s): %s",
            len(unmatched),
            missing_partner,
            ", ".join(_format_dates(unmatched)),
        )
        if missing_partner == "skip":
            merged = merged.loc[has_total].reset_index(drop=True)
        else:
            merged[JOIN_TOTAL_COLUMN] = merged[JOIN_TOTAL_COLUMN].fillna(0.0)

    scaled = pd.DataFrame({DATE_COLUMN: merged[DATE_COLUMN]})
    for variant_id in variant_ids:
        scaled[variant_id] = merged[variant_id] * merged[JOIN_TOTAL_COLUMN] / 100.0
    return JoinResult(scaled=scaled, unmatched_dates=unmatched)
