"""
Ops Insight Engine — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging (stderr, so stdout stays clean JSON).
  3. Build a record store: ``--records FILE`` → in-memory JSON snapshot,
     otherwise SQLite at the configured ``db_path``.
  4. Run the engine operation.
  5. Print the result as JSON to stdout.

Install and run::

    pip install -e .
    ops-insights --help
    ops-insights init-db
    ops-insights import-records data/records.json
    ops-insights insights
    ops-insights recommendations
    ops-insights recommendations --licenses --today 2024-06-01
    ops-insights analytics --records data/records.json
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any, Optional

import typer

app = typer.Typer(
    name="ops-insights",
    help="Ops Insight Engine — client, license and financial insights from operational records.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from ops_insights.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    from ops_insights.utils.logging import configure_logging
    configure_logging(config.logging)


def _build_store_or_exit(config, records: Optional[str], db_path: Optional[str]):
    """In-memory store for ``--records``, SQLite store otherwise."""
    from ops_insights.store import InMemoryRecordStore, SqliteRecordStore

    if records:
        try:
            return InMemoryRecordStore.from_json(Path(records))
        except FileNotFoundError as exc:
            typer.echo(f"[ERROR] {exc}", err=True)
            raise typer.Exit(code=1)
        except ValueError as exc:
            # pydantic.ValidationError subclasses ValueError
            typer.echo(f"[ERROR] Invalid records file: {exc}", err=True)
            raise typer.Exit(code=1)

    return SqliteRecordStore.from_config(config.database, db_path)


def _parse_date_or_exit(value: Optional[str], flag: str) -> Optional[date]:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        typer.echo(f"[ERROR] {flag} must be YYYY-MM-DD, got '{value}'.", err=True)
        raise typer.Exit(code=1)


def _run_or_exit(fn, *args):
    """Run an engine operation, turning a total source failure into exit 1."""
    from ops_insights.errors import InsightEngineError

    try:
        return fn(*args)
    except InsightEngineError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2))


# Shared options
_RECORDS_OPT = typer.Option(None, "--records", help="Read records from a JSON snapshot instead of SQLite.")
_DB_PATH_OPT = typer.Option(None, "--db-path", help="Override DB path from config.")
_CONFIG_OPT = typer.Option(None, "--config", help="Path to TOML config file.")
_TODAY_OPT = typer.Option(None, "--today", help="Reference date YYYY-MM-DD (default: today UTC).")


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = _CONFIG_OPT,
    show_full: bool = typer.Option(False, "--full", help="Print full config as JSON."),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Database path:    {config.database.db_path}")
    typer.echo(f"  Records file:     {config.data.records_file}")
    typer.echo(f"  Renewal window:   {config.engine.renewal_window_days} days")
    typer.echo(f"  Forecast periods: {config.engine.forecast_periods}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))


@app.command("init-db")
def init_db(
    db_path: Optional[str] = _DB_PATH_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
) -> None:
    """Create the SQLite database and apply the schema.

    Safe to run multiple times — all DDL uses IF NOT EXISTS.
    """
    from ops_insights.db.connection import get_connection
    from ops_insights.db.schema import ALL_TABLE_NAMES, apply_schema

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    target_path = db_path or config.database.db_path
    typer.echo(f"Initializing database at: {target_path}")

    with get_connection(
        target_path,
        wal_mode=config.database.wal_mode,
        busy_timeout_ms=config.database.busy_timeout_ms,
    ) as conn:
        apply_schema(conn)

    typer.echo(f"  Tables: {len(ALL_TABLE_NAMES)} created/verified.")
    typer.echo("[OK] Database ready.")


@app.command("import-records")
def import_records(
    records_file: Optional[str] = typer.Argument(
        None, help="JSON snapshot to import (default: [data] records_file)."
    ),
    db_path: Optional[str] = _DB_PATH_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
) -> None:
    """Validate a JSON record snapshot and write it into SQLite.

    Clients and licenses are upserted by id; financial rows are appended.
    """
    from ops_insights.db.connection import get_connection
    from ops_insights.db.schema import apply_schema
    from ops_insights.ingestion.record_loader import load_records_json
    from ops_insights.store import SqliteRecordStore

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    source = Path(records_file or config.data.records_file)
    try:
        bundle = load_records_json(source)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except ValueError as exc:
        typer.echo(f"[ERROR] Invalid records file: {exc}", err=True)
        raise typer.Exit(code=1)

    store = SqliteRecordStore.from_config(config.database, db_path)
    with get_connection(store.db_path, store.wal_mode, store.busy_timeout_ms) as conn:
        apply_schema(conn)
    written = store.import_bundle(bundle)

    typer.echo(f"  Clients:    {len(bundle.clients)}")
    typer.echo(f"  Licenses:   {len(bundle.licenses)}")
    typer.echo(f"  Financials: {len(bundle.financials)}")
    typer.echo(f"[OK] Imported {written} records into {store.db_path}")


@app.command("insights")
def insights(
    records: Optional[str] = _RECORDS_OPT,
    db_path: Optional[str] = _DB_PATH_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
) -> None:
    """Churn risks, cost optimization, growth opportunities, client health, forecast."""
    from ops_insights.pipeline.engine import InsightEngine

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    engine = InsightEngine(_build_store_or_exit(config, records, db_path), config)

    summary = _run_or_exit(engine.compute_business_insights)
    _echo_json(summary.model_dump(mode="json"))


@app.command("recommendations")
def recommendations(
    licenses: bool = typer.Option(
        False, "--licenses", help="License portfolio recommendations instead of the cross-entity list."
    ),
    today: Optional[str] = _TODAY_OPT,
    records: Optional[str] = _RECORDS_OPT,
    db_path: Optional[str] = _DB_PATH_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
) -> None:
    """Prioritized recommendations as a JSON array."""
    from ops_insights.pipeline.engine import InsightEngine

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    as_of = _parse_date_or_exit(today, "--today")
    engine = InsightEngine(_build_store_or_exit(config, records, db_path), config)

    if licenses:
        recs = _run_or_exit(engine.compute_license_recommendations, as_of)
    else:
        recs = _run_or_exit(engine.compute_recommendations)
    _echo_json([r.model_dump(mode="json") for r in recs])


@app.command("analytics")
def analytics(
    today: Optional[str] = _TODAY_OPT,
    records: Optional[str] = _RECORDS_OPT,
    db_path: Optional[str] = _DB_PATH_OPT,
    config_path: Optional[str] = _CONFIG_OPT,
) -> None:
    """Client, license and financial analytics."""
    from ops_insights.pipeline.engine import InsightEngine

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    as_of = _parse_date_or_exit(today, "--today")
    engine = InsightEngine(_build_store_or_exit(config, records, db_path), config)

    report = _run_or_exit(engine.compute_business_analytics, as_of)
    _echo_json(report.model_dump(mode="json"))


if __name__ == "__main__":
    app()
