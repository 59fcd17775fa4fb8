"""Mapping – category → warehouse table name."""
from __future__ import annotations

import re

from laundry_analytics.kernel.events import EventCategory

_CATEGORY_RE = re.compile(r"^[A-Za-z0-9_.\-]+$")


def table_name_for(category: str | EventCategory) -> str:
    """Return the warehouse table that stores events of *category*.

    ``order.lifecycle`` → ``analytics_order_lifecycle_events``.  The result
    depends on the category string alone, so the sink and the provisioning
    tooling always agree on table names.

    Raises
    ------
    ValueError
        If *category* is empty or contains characters that cannot appear in
        an unquoted SQL identifier once ``.`` and ``-`` are replaced.
    """
    value = category.value if isinstance(category, EventCategory) else category
    if not isinstance(value, str) or not _CATEGORY_RE.match(value):
        raise ValueError(f"Invalid event category for table naming: {category!r}")
    slug = value.replace(".", "_").replace("-", "_").lower()
    return f"analytics_{slug}_events"


__all__ = ["table_name_for"]
