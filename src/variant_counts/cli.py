from __future__ import annotations

import json
from pathlib import Path

import numpy as np
import typer

from variant_counts.colors import DEFAULT_PALETTE_SIZE, regenerate_palette
from variant_counts.config import DEFAULT_CONFIG_PATH, AppConfig, load_config
from variant_counts.io.read import load_rows
from variant_counts.io.total_fields import TOTAL_FIELD_SCHEMAS
from variant_counts.logging import configure_logging
from variant_counts.ordering.registry import STRATEGY_NAMES
from variant_counts.pipeline.derive import build_derived_series

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load_app_config(config_path: Path) -> AppConfig:
    return load_config(config_path)


@app.command()
def derive(
    proportions: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    totals: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    strategy: str | None = typer.Option(
        None,
        help=f"Override ordering.strategy. One of: {', '.join(STRATEGY_NAMES)}.",
    ),
    seed: int | None = typer.Option(
        None,
        min=0,
        help="Seed for shuffle ordering and palette draws.",
    ),
    log_level: str = typer.Option("INFO"),
) -> None:
    """Derive absolute per-variant counts, display order and colors as JSON."""
    configure_logging(log_level)
    cfg = _load_app_config(config)
    if strategy is not None:
        if strategy not in STRATEGY_NAMES:
            raise typer.BadParameter(
                f"Unknown strategy '{strategy}'. Choose from: {', '.join(STRATEGY_NAMES)}"
            )
        cfg.ordering.strategy = strategy

    rng = np.random.default_rng(seed) if seed is not None else None
    try:
        derived = build_derived_series(
            proportion_rows=load_rows(proportions),
            total_rows=load_rows(totals),
            config=cfg,
            rng=rng,
        )
    except ValueError as exc:
        typer.echo(f"Derivation failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(json.dumps(derived.to_payload(), indent=2))


@app.command()
def palette(
    size: int = typer.Option(DEFAULT_PALETTE_SIZE, min=1),
    seed: int | None = typer.Option(None, min=0),
) -> None:
    """Print a freshly drawn color pool, one color per line."""
    rng = np.random.default_rng(seed)
    for color in regenerate_palette(size, rng=rng):
        typer.echo(color)


@app.command("total-schemas")
def total_schemas() -> None:
    """List the known total-field schema versions."""
    for version in sorted(TOTAL_FIELD_SCHEMAS):
        schema = TOTAL_FIELD_SCHEMAS[version]
        typer.echo(f"{version}: {', '.join(schema.fields)}")
        typer.echo(f"  {schema.description}")


if __name__ == "__main__":
    app()
