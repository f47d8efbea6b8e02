from __future__ import annotations


class EmptySeriesError(ValueError):
    """A series has no rows to extract a schema or a score from."""


class InvalidValueError(ValueError):
    """A raw field could not be coerced to the expected type."""


class SchemaMismatchError(InvalidValueError):
    """A row or variant list disagrees with the extracted variant schema."""


class MissingJoinPartnerError(ValueError):
    def __init__(self, dates: list[str]) -> None:
        self.dates = list(dates)
        super().__init__(
            "No total found for proportion date(s): " + ", ".join(self.dates)
        )


class InsufficientPaletteError(ValueError):
    def __init__(self, pool_size: int, variant_count: int) -> None:
        self.pool_size = pool_size
        self.variant_count = variant_count
        super().__init__(
            f"Color pool has {pool_size} colors but {variant_count} variants need one each"
        )
