from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pandas as pd


def _frame_to_records(frame: pd.DataFrame) -> list[dict[str, Any]]:
    cleaned = frame.astype(object).where(frame.notna(), None)
    return cleaned.to_dict(orient="records")


def load_table(path: Path) -> pd.DataFrame:
    if path.suffix == ".parquet":
        return pd.read_parquet(path)
    if path.suffix == ".csv":
        # utf-8-sig strips BOM-prefixed headers commonly found in exported CSV files.
        return pd.read_csv(path, encoding="utf-8-sig")
    raise ValueError(f"Unsupported table file type: {path.suffix}")


def load_rows(path: Path) -> list[dict[str, Any]]:
    """Load a row-oriented series as raw records, keeping nulls as None."""
    if path.suffix == ".json":
        payload = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(payload, list) or not all(isinstance(row, dict) for row in payload):
            raise ValueError(f"JSON series must be a list of objects: {path}")
        return payload
    return _frame_to_records(load_table(path))
