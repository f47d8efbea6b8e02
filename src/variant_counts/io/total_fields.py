from __future__ import annotations

from dataclasses import dataclass

from variant_counts.config import DEFAULT_TOTALS_SCHEMA


@dataclass(frozen=True)
class TotalFieldSchema:
    version: str
    fields: tuple[str, ...]
    description: str


TOTAL_FIELD_SCHEMAS: dict[str, TotalFieldSchema] = {
    schema.version: schema
    for schema in (
        TotalFieldSchema(
            version="nwss_regional_v1",
            fields=("Midwest", "National", "Northeast", "South", "West"),
            description="NWSS regional level export, national column included in the sum",
        ),
        TotalFieldSchema(
            version="nwss_regions_only",
            fields=("Midwest", "Northeast", "South", "West"),
            description="NWSS regional level export, census regions only",
        ),
    )
}


def resolve_total_fields(
    version: str | None = None,
    override: list[str] | None = None,
) -> tuple[str, ...]:
    """Return the sub-field names summed into a total.

    An explicit ``override`` list wins over the named schema version.
    """
    if override:
        fields = tuple(str(name) for name in override)
        if len(set(fields)) != len(fields):
            raise ValueError(f"Duplicate total field names: {', '.join(fields)}")
        return fields

    key = version or DEFAULT_TOTALS_SCHEMA
    schema = TOTAL_FIELD_SCHEMAS.get(key)
    if schema is None:
        known = ", ".join(sorted(TOTAL_FIELD_SCHEMAS))
        raise ValueError(f"Unknown total field schema '{key}'. Known schemas: {known}")
    return schema.fields
