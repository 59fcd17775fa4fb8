"""Mapping – TableMapping and TableMappingRegistry.

A :class:`TableMapping` ties one event category to one warehouse table: the
column layout, the payload keys projected into dedicated columns, and the
secondary indexes provisioning should create.  The sink looks mappings up
by category, so supporting a new category means registering a mapping.
"""
from __future__ import annotations

import dataclasses
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from laundry_analytics.application.mapping.columns import CREATED_AT, ColumnSpec, base_columns
from laundry_analytics.application.mapping.naming import table_name_for
from laundry_analytics.kernel.events import AnalyticsEvent, EventCategory

type Row = dict[str, Any]


@dataclasses.dataclass(frozen=True)
class TableMapping:
    """How events of one category land in the warehouse.

    Parameters
    ----------
    category:
        Event category handled by this mapping.
    table:
        Target table; always ``table_name_for(category)``.
    columns:
        Full column layout, envelope columns first.
    payload_columns:
        ``column -> payload key`` for the category-specific columns.
    indexes:
        ``(index_name, column)`` pairs for secondary indexes.
    """

    category: str
    table: str
    columns: tuple[ColumnSpec, ...]
    payload_columns: Mapping[str, str]
    indexes: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "payload_columns", MappingProxyType(dict(self.payload_columns)))
        names = [c.name for c in self.columns]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate column names in mapping for {self.table!r}")
        unknown = set(self.payload_columns) - set(names)
        if unknown:
            raise ValueError(f"Payload columns {sorted(unknown)} are not declared on {self.table!r}")

    @classmethod
    def build(
        cls,
        category: str | EventCategory,
        category_columns: tuple[tuple[ColumnSpec, str], ...],
        indexes: tuple[tuple[str, str], ...] = (),
    ) -> "TableMapping":
        """Assemble a mapping from ``(column, payload_key)`` pairs.

        Envelope columns come first and ``created_at`` last, mirroring the
        provisioned table layout.
        """
        value = category.value if isinstance(category, EventCategory) else category
        return cls(
            category=value,
            table=table_name_for(value),
            columns=(*base_columns(), *(c for c, _ in category_columns), CREATED_AT),
            payload_columns={c.name: key for c, key in category_columns},
            indexes=indexes,
        )

    @property
    def writable_columns(self) -> tuple[str, ...]:
        return tuple(c.name for c in self.columns if c.writable)

    def column(self, name: str) -> ColumnSpec:
        for col in self.columns:
            if col.name == name:
                return col
        raise KeyError(name)

    def project(self, event: AnalyticsEvent) -> Row:
        """Return the row for *event*: exactly :attr:`writable_columns`.

        JSON columns carry plain dicts, ``occurred_at`` stays a datetime and
        absent optional payload keys become ``None``.
        """
        if event.category != self.category:
            raise ValueError(
                f"Event category {event.category!r} does not match mapping for {self.category!r}"
            )
        actor = event.actor
        row: Row = {
            "event_id": event.event_id,
            "occurred_at": event.occurred_at,
            "source": event.source,
            "schema_version": event.schema_version,
            "actor_id": actor.actor_id if actor else None,
            "actor_type": actor.actor_type if actor else None,
            "actor_name": actor.actor_name if actor else None,
            "context": event.context_dict() or None,
            "payload": event.payload_dict(),
        }
        payload = event.payload
        for column, key in self.payload_columns.items():
            row[column] = payload.get(key)
        return row


class TableMappingRegistry:
    """Category → :class:`TableMapping` lookup."""

    def __init__(self, mappings: tuple[TableMapping, ...] | list[TableMapping] = ()) -> None:
        self._by_category: dict[str, TableMapping] = {}
        for mapping in mappings:
            self.register(mapping)

    def register(self, mapping: TableMapping) -> None:
        if mapping.category in self._by_category:
            raise ValueError(f"A table mapping for {mapping.category!r} is already registered")
        if mapping.table in self.tables():
            raise ValueError(f"Table {mapping.table!r} is already mapped")
        self._by_category[mapping.category] = mapping

    def resolve(self, category: str) -> TableMapping | None:
        return self._by_category.get(category)

    def for_table(self, table: str) -> TableMapping | None:
        for mapping in self._by_category.values():
            if mapping.table == table:
                return mapping
        return None

    def tables(self) -> list[str]:
        return [m.table for m in self._by_category.values()]

    def __contains__(self, category: object) -> bool:
        return category in self._by_category

    def __iter__(self) -> Iterator[TableMapping]:
        return iter(list(self._by_category.values()))

    def __len__(self) -> int:
        return len(self._by_category)


# ---------------------------------------------------------------------------
# Built-in categories
# ---------------------------------------------------------------------------

ORDER_LIFECYCLE_MAPPING = TableMapping.build(
    EventCategory.ORDER_LIFECYCLE,
    (
        (ColumnSpec("order_id", "text", nullable=False), "orderId"),
        (ColumnSpec("branch_id", "text"), "branchId"),
        (ColumnSpec("customer_id", "text"), "customerId"),
        (ColumnSpec("delivery_id", "text"), "deliveryId"),
        (ColumnSpec("status", "text", nullable=False), "status"),
        (ColumnSpec("previous_status", "text"), "previousStatus"),
        (ColumnSpec("promised_ready_date", "text"), "promisedReadyDate"),
        (ColumnSpec("delivery_status", "text"), "deliveryStatus"),
        (ColumnSpec("total", "numeric"), "total"),
    ),
    indexes=(
        ("idx_order_events_occurred_at", "occurred_at"),
        ("idx_order_events_branch", "branch_id"),
    ),
)

DRIVER_TELEMETRY_MAPPING = TableMapping.build(
    EventCategory.DRIVER_TELEMETRY,
    (
        (ColumnSpec("driver_id", "text", nullable=False), "driverId"),
        (ColumnSpec("lat", "double", nullable=False), "lat"),
        (ColumnSpec("lng", "double", nullable=False), "lng"),
        (ColumnSpec("heading", "double"), "heading"),
        (ColumnSpec("speed_kph", "double"), "speedKph"),
        (ColumnSpec("accuracy_meters", "double"), "accuracyMeters"),
        (ColumnSpec("order_id", "text"), "orderId"),
        (ColumnSpec("delivery_id", "text"), "deliveryId"),
    ),
    indexes=(
        ("idx_driver_events_occurred_at", "occurred_at"),
        ("idx_driver_events_driver", "driver_id"),
    ),
)

CAMPAIGN_INTERACTION_MAPPING = TableMapping.build(
    EventCategory.CAMPAIGN_INTERACTION,
    (
        (ColumnSpec("customer_id", "text", nullable=False), "customerId"),
        (ColumnSpec("campaign_id", "text"), "campaignId"),
        (ColumnSpec("branch_id", "text"), "branchId"),
        (ColumnSpec("channel", "text"), "channel"),
        (ColumnSpec("template_key", "text"), "templateKey"),
        (ColumnSpec("status", "text"), "status"),
        (ColumnSpec("reason", "text"), "reason"),
    ),
    indexes=(
        ("idx_campaign_events_customer", "customer_id"),
        ("idx_campaign_events_status", "status"),
    ),
)


def default_table_registry() -> TableMappingRegistry:
    """Fresh registry holding the order, driver and campaign mappings."""
    return TableMappingRegistry(
        [ORDER_LIFECYCLE_MAPPING, DRIVER_TELEMETRY_MAPPING, CAMPAIGN_INTERACTION_MAPPING]
    )


__all__ = [
    "CAMPAIGN_INTERACTION_MAPPING",
    "DRIVER_TELEMETRY_MAPPING",
    "ORDER_LIFECYCLE_MAPPING",
    "Row",
    "TableMapping",
    "TableMappingRegistry",
    "default_table_registry",
]
