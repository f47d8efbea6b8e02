from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping, Sequence

import pandas as pd

from variant_counts.errors import InvalidValueError
from variant_counts.io.schema import DATE_COLUMN, VariantSchema, validate_row_keys

LOGGER = logging.getLogger(__name__)


def _reject_non_text_dates(values: pd.Series, field_name: str) -> None:
    for position, value in enumerate(values.tolist()):
        if value is None or isinstance(value, (str, date)):
            continue
        raise InvalidValueError(
            f"Unparseable date in field '{field_name}' at row {position}: {value!r}"
        )


def parse_dates(values: pd.Series, field_name: str, normalize: bool = True) -> pd.Series:
    """Parse raw date values into naive UTC timestamps.

    Timezone-aware inputs are converted to UTC before the zone is dropped so
    that both series compare on the same instant. With ``normalize`` the
    instants are floored to midnight. Numeric values are read as epoch
    milliseconds; booleans and columns mixing numbers with text are rejected.
    """
    if pd.api.types.is_bool_dtype(values):
        raise InvalidValueError(f"Boolean values are not dates in field '{field_name}'")
    if pd.api.types.is_numeric_dtype(values):
        parsed = pd.to_datetime(values, errors="coerce", utc=True, unit="ms")
    else:
        if pd.api.types.is_object_dtype(values):
            _reject_non_text_dates(values, field_name)
        parsed = pd.to_datetime(values, errors="coerce", utc=True, format="mixed")
    invalid = parsed.isna()
    if invalid.any():
        position = int(invalid.to_numpy().nonzero()[0][0])
        raise InvalidValueError(
            f"Unparseable date in field '{field_name}' at row {position}: "
            f"{values.iloc[position]!r}"
        )
    parsed = parsed.dt.tz_convert(None)
    if normalize:
        parsed = parsed.dt.normalize()
    return parsed.reset_index(drop=True)


def _coerce_numeric(raw: pd.Series, field_name: str, *, series_name: str) -> pd.Series:
    null = raw.isna()
    numeric = pd.to_numeric(raw, errors="coerce")
    invalid = numeric.isna() & ~null
    if invalid.any():
        position = int(invalid.to_numpy().nonzero()[0][0])
        raise InvalidValueError(
            f"Non-numeric value in {series_name} field '{field_name}' at row {position}: "
            f"{raw.iloc[position]!r}"
        )
    return numeric.fillna(0.0).astype(float).reset_index(drop=True)


def normalize_proportions(
    rows: Sequence[Mapping[str, Any]],
    schema: VariantSchema,
    normalize_dates: bool = True,
) -> pd.DataFrame:
    """Convert raw proportion rows into typed samples, nulls coerced to zero."""
    validate_row_keys(rows, schema)
    raw = pd.DataFrame.from_records(
        list(rows),
        columns=[schema.date_field, *schema.variant_ids],
    )

    working = pd.DataFrame(
        {DATE_COLUMN: parse_dates(raw[schema.date_field], schema.date_field, normalize_dates)}
    )
    for variant_id in schema.variant_ids:
        working[variant_id] = _coerce_numeric(
            raw[variant_id],
            variant_id,
            series_name="proportion",
        )
    LOGGER.debug(
        "Normalized %d proportion rows across %d variants",
        len(working),
        len(schema.variant_ids),
    )
    return working


def normalize_totals(
    rows: Sequence[Mapping[str, Any]],
    date_field: str,
    total_fields: Sequence[str],
    normalize_dates: bool = True,
) -> pd.DataFrame:
    """Convert raw regional rows into ``date``/``total`` samples."""
    if not total_fields:
        raise ValueError("At least one total field is required")

    for index, row in enumerate(rows):
        missing = [name for name in (date_field, *total_fields) if name not in row]
        if missing:
            raise InvalidValueError(
                f"Total row {index} is missing field(s): {', '.join(missing)}"
            )

    raw = pd.DataFrame.from_records(list(rows), columns=[date_field, *total_fields])
    parts = [_coerce_numeric(raw[name], name, series_name="total") for name in total_fields]
    total = pd.concat(parts, axis=1).sum(axis=1)
    working = pd.DataFrame(
        {
            DATE_COLUMN: parse_dates(raw[date_field], date_field, normalize_dates),
            "total": total.astype(float).reset_index(drop=True),
        }
    )
    LOGGER.debug("Normalized %d total rows from fields %s", len(working), list(total_fields))
    return working
