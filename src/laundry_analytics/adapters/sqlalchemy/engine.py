"""SQLAlchemy adapter – async engine factory."""
from __future__ import annotations

from typing import Any


def _require_sqlalchemy() -> None:
    try:
        import sqlalchemy  # noqa: F401
    except ImportError as exc:
        raise ImportError("Install 'sqlalchemy[asyncio]' to use the SQLAlchemy adapter") from exc


def async_database_url(database_url: str) -> str:
    """Select an async driver for bare ``postgres://`` / ``postgresql://`` URLs.

    ``WAREHOUSE_DATABASE_URL`` is usually a libpq-style URL; URLs that
    already name a driver (``postgresql+asyncpg://``, ``sqlite+aiosqlite://``)
    are returned unchanged.
    """
    scheme, sep, rest = database_url.partition("://")
    if not sep:
        raise ValueError(f"Not a database URL: {database_url!r}")
    if scheme in ("postgres", "postgresql"):
        return f"postgresql+asyncpg://{rest}"
    return database_url


def create_warehouse_engine(database_url: str, **engine_kwargs: Any) -> Any:
    """Create an :class:`~sqlalchemy.ext.asyncio.AsyncEngine` for *database_url*."""
    _require_sqlalchemy()
    from sqlalchemy.ext.asyncio import create_async_engine  # type: ignore[import-untyped]

    url = async_database_url(database_url)
    try:
        return create_async_engine(url, **engine_kwargs)
    except ModuleNotFoundError as exc:
        raise ImportError(
            f"Database driver for {url.split('://', 1)[0]!r} is not installed; "
            "install 'laundry-analytics[postgres]' for asyncpg"
        ) from exc


__all__ = ["async_database_url", "create_warehouse_engine"]
