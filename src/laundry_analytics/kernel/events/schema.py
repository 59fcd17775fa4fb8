"""Payload schemas per event category and the category registry.

A :class:`CategorySchema` lists the event names allowed in a category and
the typed payload fields each event must carry.  Validation is strict:
unknown payload keys are rejected unless the schema sets ``extra_allowed``.

Adding a category means registering one more schema::

    registry = default_category_registry()
    registry.register(
        CategorySchema(
            category="payment.settlement",
            names=frozenset({"captured", "refunded"}),
            fields=(
                PayloadField("paymentId", STRING, required=True, non_empty=True),
                PayloadField("amount", NUMBER, required=True, non_negative=True),
            ),
        )
    )
"""
from __future__ import annotations

import dataclasses
from collections.abc import Iterator, Mapping
from datetime import datetime
from typing import Any

from laundry_analytics.kernel.events.categories import (
    CampaignChannel,
    CampaignStatus,
    EventCategory,
)

STRING: tuple[type, ...] = (str,)
NUMBER: tuple[type, ...] = (int, float)
MAPPING: tuple[type, ...] = (Mapping,)


@dataclasses.dataclass(frozen=True)
class PayloadField:
    """Declares one payload key and the constraints on its value."""

    name: str
    kinds: tuple[type, ...]
    required: bool = False
    nullable: bool = False
    non_empty: bool = False
    non_negative: bool = False
    iso_datetime: bool = False
    choices: frozenset[str] | None = None

    def check(self, value: Any) -> str | None:
        """Return a failure message for *value*, or ``None`` when it is valid."""
        if value is None:
            return None if self.nullable else "must not be null"
        # bool is an int subclass; never accept it where a number is expected
        if isinstance(value, bool) and bool not in self.kinds:
            return f"expected {self._kind_names()}, got bool"
        if not isinstance(value, self.kinds):
            return f"expected {self._kind_names()}, got {type(value).__name__}"
        if self.non_empty and isinstance(value, str) and not value.strip():
            return "must not be empty"
        if self.non_negative and isinstance(value, (int, float)) and value < 0:
            return "must be non-negative"
        if self.choices is not None and value not in self.choices:
            return f"must be one of {sorted(self.choices)}"
        if self.iso_datetime:
            try:
                datetime.fromisoformat(value)
            except ValueError:
                return "must be an ISO-8601 datetime string"
        return None

    def _kind_names(self) -> str:
        if self.kinds == NUMBER:
            return "number"
        if self.kinds == MAPPING:
            return "object"
        return "|".join(k.__name__ for k in self.kinds)


@dataclasses.dataclass(frozen=True)
class CategorySchema:
    """Allowed event names and payload shape for one category."""

    category: str
    names: frozenset[str]
    fields: tuple[PayloadField, ...]
    extra_allowed: bool = False

    @property
    def required_fields(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields if f.required)

    def validate(self, name: str, payload: Mapping[str, Any]) -> list[dict[str, Any]]:
        """Return every field-level failure for an event of this category."""
        errors: list[dict[str, Any]] = []
        if name not in self.names:
            errors.append({
                "field": "name",
                "message": f"unknown event name {name!r} for category {self.category!r}",
            })
        declared = {f.name: f for f in self.fields}
        if not self.extra_allowed:
            for key in payload:
                if key not in declared:
                    errors.append({"field": f"payload.{key}", "message": "unknown field"})
        for spec in self.fields:
            if spec.name not in payload:
                if spec.required:
                    errors.append({"field": f"payload.{spec.name}", "message": "field required"})
                continue
            failure = spec.check(payload[spec.name])
            if failure is not None:
                errors.append({"field": f"payload.{spec.name}", "message": failure})
        return errors


class CategoryRegistry:
    """The registered (closed) set of event categories."""

    def __init__(self, schemas: list[CategorySchema] | None = None) -> None:
        self._schemas: dict[str, CategorySchema] = {}
        for schema in schemas or []:
            self.register(schema)

    def register(self, schema: CategorySchema) -> None:
        if schema.category in self._schemas:
            raise ValueError(f"Category '{schema.category}' is already registered")
        self._schemas[schema.category] = schema

    def get(self, category: str) -> CategorySchema | None:
        return self._schemas.get(category)

    def categories(self) -> list[str]:
        return list(self._schemas)

    def __contains__(self, category: object) -> bool:
        return category in self._schemas

    def __iter__(self) -> Iterator[CategorySchema]:
        return iter(self._schemas.values())

    def __len__(self) -> int:
        return len(self._schemas)


ORDER_LIFECYCLE_SCHEMA = CategorySchema(
    category=EventCategory.ORDER_LIFECYCLE.value,
    names=frozenset({
        "created",
        "status_changed",
        "delivery_created",
        "delivery_status_changed",
        "request_accepted",
    }),
    fields=(
        PayloadField("orderId", STRING, required=True, non_empty=True),
        PayloadField("status", STRING, required=True, non_empty=True),
        PayloadField("deliveryId", STRING, nullable=True),
        PayloadField("branchId", STRING, nullable=True),
        PayloadField("customerId", STRING, nullable=True),
        PayloadField("previousStatus", STRING, nullable=True),
        PayloadField("deliveryStatus", STRING, nullable=True),
        PayloadField("total", NUMBER, non_negative=True),
        PayloadField("promisedReadyDate", STRING, iso_datetime=True),
        PayloadField("metadata", MAPPING),
    ),
)

DRIVER_TELEMETRY_SCHEMA = CategorySchema(
    category=EventCategory.DRIVER_TELEMETRY.value,
    names=frozenset({"location_updated", "speed_alert"}),
    fields=(
        PayloadField("driverId", STRING, required=True, non_empty=True),
        PayloadField("lat", NUMBER, required=True),
        PayloadField("lng", NUMBER, required=True),
        PayloadField("heading", NUMBER),
        PayloadField("speedKph", NUMBER),
        PayloadField("accuracyMeters", NUMBER),
        PayloadField("orderId", STRING, nullable=True),
        PayloadField("deliveryId", STRING, nullable=True),
    ),
)

CAMPAIGN_INTERACTION_SCHEMA = CategorySchema(
    category=EventCategory.CAMPAIGN_INTERACTION.value,
    names=frozenset({"plan_updated", "outreach_attempted", "outreach_completed"}),
    fields=(
        PayloadField("customerId", STRING, required=True, non_empty=True),
        PayloadField("campaignId", STRING, nullable=True),
        PayloadField("branchId", STRING, nullable=True),
        PayloadField(
            "channel",
            STRING,
            nullable=True,
            choices=frozenset(c.value for c in CampaignChannel),
        ),
        PayloadField("templateKey", STRING, nullable=True),
        PayloadField("status", STRING, choices=frozenset(s.value for s in CampaignStatus)),
        PayloadField("reason", STRING, nullable=True),
        PayloadField("metadata", MAPPING),
    ),
)


def default_category_registry() -> CategoryRegistry:
    """Return a fresh registry holding the built-in categories."""
    return CategoryRegistry([
        ORDER_LIFECYCLE_SCHEMA,
        DRIVER_TELEMETRY_SCHEMA,
        CAMPAIGN_INTERACTION_SCHEMA,
    ])


__all__ = [
    "CAMPAIGN_INTERACTION_SCHEMA",
    "DRIVER_TELEMETRY_SCHEMA",
    "MAPPING",
    "NUMBER",
    "ORDER_LIFECYCLE_SCHEMA",
    "STRING",
    "CategoryRegistry",
    "CategorySchema",
    "PayloadField",
    "default_category_registry",
]
