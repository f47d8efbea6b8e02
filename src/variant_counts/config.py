from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field

TOTALS_SCHEMA_ENV_VAR = "VARIANT_COUNTS_TOTALS_SCHEMA"
DEFAULT_TOTALS_SCHEMA = "nwss_regional_v1"


class ColumnsConfig(BaseModel):
    proportion_date: str = "week_end"
    total_date: str = "date"


class TotalsConfig(BaseModel):
    schema_version: str | None = None
    fields: list[str] | None = None


class JoinConfig(BaseModel):
    missing_partner: Literal["raise", "skip", "zero_fill"] = "raise"
    normalize_dates: bool = True


class OrderingConfig(BaseModel):
    strategy: Literal["range", "all_time_max", "current_highest", "shuffle"] = "range"
    descending: bool = False
    pinned_categories: list[str] = Field(default_factory=lambda: ["Other"])
    pin_position: Literal["start", "end"] = "end"
    random_seed: int | None = Field(default=None, ge=0)


class PaletteConfig(BaseModel):
    size: int = Field(default=500, ge=1)
    random_seed: int | None = Field(default=None, ge=0)


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    columns: ColumnsConfig = Field(default_factory=ColumnsConfig)
    totals: TotalsConfig = Field(default_factory=TotalsConfig)
    join: JoinConfig = Field(default_factory=JoinConfig)
    ordering: OrderingConfig = Field(default_factory=OrderingConfig)
    palette: PaletteConfig = Field(default_factory=PaletteConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    config = AppConfig.model_validate(data)
    config.totals.schema_version = (
        config.totals.schema_version
        or os.getenv(TOTALS_SCHEMA_ENV_VAR)
        or DEFAULT_TOTALS_SCHEMA
    )
    return config
