from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np

from variant_counts.errors import InsufficientPaletteError, SchemaMismatchError

DEFAULT_PALETTE_SIZE = 500
MAX_RGB = 0xFFFFFF


def regenerate_palette(
    size: int = DEFAULT_PALETTE_SIZE,
    rng: np.random.Generator | None = None,
) -> list[str]:
    """Draw ``size`` uniformly random ``#rrggbb`` colors."""
    if size < 0:
        raise ValueError(f"Palette size must be non-negative, got {size}")
    generator = rng if rng is not None else np.random.default_rng()
    values = generator.integers(0, MAX_RGB + 1, size=size)
    return [f"#{int(value):06x}" for value in values]


def assign_colors(color_pool: Sequence[str], variant_ids: Iterable[str]) -> dict[str, str]:
    """Zip lexicographically sorted variant ids against the pool in order."""
    ids = [str(name) for name in variant_ids]
    if len(set(ids)) != len(ids):
        raise SchemaMismatchError("Variant ids passed to color assignment contain duplicates")
    sorted_ids = sorted(ids)
    if len(color_pool) < len(sorted_ids):
        raise InsufficientPaletteError(pool_size=len(color_pool), variant_count=len(sorted_ids))
    return {variant_id: color_pool[index] for index, variant_id in enumerate(sorted_ids)}
