"""Application provisioning – warehouse DDL and ingestion plans."""
from laundry_analytics.application.provisioning.ddl import (
    bigquery_table,
    build_statements,
    postgres_statements,
    snowflake_table,
)
from laundry_analytics.application.provisioning.plan import apply_statements, build_ingestion_plan

__all__ = [
    "apply_statements",
    "bigquery_table",
    "build_ingestion_plan",
    "build_statements",
    "postgres_statements",
    "snowflake_table",
]
