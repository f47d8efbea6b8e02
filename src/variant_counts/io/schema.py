from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from variant_counts.errors import EmptySeriesError, SchemaMismatchError

DATE_COLUMN = "date"


@dataclass(frozen=True)
class VariantSchema:
    date_field: str
    variant_ids: tuple[str, ...]

    @property
    def field_names(self) -> frozenset[str]:
        return frozenset((self.date_field, *self.variant_ids))


def extract_variant_schema(
    rows: Sequence[Mapping[str, Any]],
    date_field: str,
) -> VariantSchema:
    """Derive the closed variant set from the first proportion row."""
    if not rows:
        raise EmptySeriesError("Proportion series has no rows; cannot extract variant schema")

    first = rows[0]
    if date_field not in first:
        raise SchemaMismatchError(f"First proportion row is missing date field: {date_field}")

    variant_ids = tuple(str(key) for key in first if key != date_field)
    if DATE_COLUMN in variant_ids:
        raise SchemaMismatchError(
            f"Variant id collides with reserved column name: {DATE_COLUMN}"
        )
    return VariantSchema(date_field=date_field, variant_ids=variant_ids)


def validate_row_keys(rows: Sequence[Mapping[str, Any]], schema: VariantSchema) -> None:
    expected = schema.field_names
    for index, row in enumerate(rows):
        keys = frozenset(str(key) for key in row)
        if keys == expected:
            continue
        missing = sorted(expected - keys)
        extra = sorted(keys - expected)
        details = []
        if missing:
            details.append(f"missing {', '.join(missing)}")
        if extra:
            details.append(f"unexpected {', '.join(extra)}")
        raise SchemaMismatchError(
            f"Proportion row {index} does not match variant schema: {'; '.join(details)}"
        )
