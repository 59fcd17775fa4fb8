"""CLI entrypoint.

Commands:
- `laundry-analytics-provision [--provider postgres|bigquery|snowflake] [--apply] [--output PATH]`

Prints the warehouse DDL for the chosen provider (or applies it when
``--apply`` is given for Postgres) and writes the ingestion plan as JSON.
Settings come from ``WAREHOUSE_*`` and ``EVENT_BUS_*`` variables, optionally
read from ``--env-file`` first.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from laundry_analytics.adapters.sqlalchemy import create_warehouse_engine
from laundry_analytics.application.provisioning import apply_statements, build_ingestion_plan, build_statements
from laundry_analytics.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    EventBusSettings,
    SettingsFactory,
    SettingsLoader,
    WarehouseSettings,
)
from laundry_analytics.config.settings.pipeline import WAREHOUSE_PROVIDERS
from laundry_analytics.config.validation import ConfigError
from laundry_analytics.kernel.errors import BaseError
from laundry_analytics.observability.logging import JsonLoggerFactory, get_logger

logger = get_logger(__name__)


def _parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="laundry-analytics-provision",
        description="Provision analytics warehouse tables.",
    )
    p.add_argument("--provider", choices=WAREHOUSE_PROVIDERS, help="Defaults to WAREHOUSE_PROVIDER or postgres")
    p.add_argument("--apply", action="store_true", help="Execute the DDL (postgres only; needs WAREHOUSE_DATABASE_URL)")
    p.add_argument("--output", default="provisioning-plan.json", help="Where to write the ingestion plan JSON")
    p.add_argument("--env-file", help="Load settings from this .env file before the environment")
    p.add_argument("--log-level", default="INFO")
    return p


async def _apply(statements: list[str], database_url: str) -> None:
    engine = create_warehouse_engine(database_url)
    try:
        await apply_statements(statements, engine)
    finally:
        await engine.dispose()


def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    JsonLoggerFactory.configure(level=args.log_level)

    loaders: list[SettingsLoader] = [EnvSettingsLoader()]
    if args.env_file:
        loaders.append(DotenvSettingsLoader(args.env_file))

    try:
        warehouse = SettingsFactory.create(WarehouseSettings, loaders=loaders)
        bus = SettingsFactory.create(EventBusSettings, loaders=loaders)
        provider = args.provider or warehouse.provider
        statements = build_statements(
            provider,
            dataset=warehouse.bigquery_dataset,
            schema=warehouse.snowflake_schema,
        )
        plan = build_ingestion_plan(provider, bus_settings=bus, warehouse_settings=warehouse)

        if args.apply and provider != "postgres":
            raise ConfigError(f"--apply is only supported for postgres, not {provider!r}")
        if args.apply:
            if not warehouse.database_url:
                raise ConfigError("WAREHOUSE_DATABASE_URL must be set to apply changes")
            asyncio.run(_apply(statements, warehouse.database_url))
            print("Postgres analytics warehouse provisioned")
        else:
            print(f"Provisioning statements for {provider}:")
            for statement in statements:
                print(f"{statement};\n")

        output = Path(args.output)
        output.write_text(json.dumps(plan, indent=2) + "\n", encoding="utf-8")
        print(f"Ingestion configuration written to {output}")
    except BaseError as exc:
        logger.error("provisioning.failed", error=exc.to_dict())
        print(f"Warehouse provisioning failed: {exc.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
