"""AnalyticsEvent value object and its factory."""

from __future__ import annotations

import dataclasses
import json
import math
from collections.abc import Mapping
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any
from uuid import UUID, uuid4

from laundry_analytics.kernel.errors import SerializationError, ValidationError
from laundry_analytics.kernel.events.categories import ActorType, EventCategory
from laundry_analytics.kernel.events.schema import CategoryRegistry, default_category_registry
from laundry_analytics.kernel.time import Clock, SystemClock
from laundry_analytics.observability.correlation import CorrelationContext

_DEFAULT_REGISTRY = default_category_registry()
_SYSTEM_CLOCK = SystemClock()


@dataclasses.dataclass(frozen=True)
class EventActor:
    """Who or what caused an event."""

    actor_id: str | None = None
    actor_type: str | None = None
    actor_name: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "EventActor":
        """Build from producer-style keys (``actorId``) or column-style keys (``actor_id``)."""
        actor_type = data.get("actorType", data.get("actor_type"))
        if isinstance(actor_type, ActorType):
            actor_type = actor_type.value
        return cls(
            actor_id=data.get("actorId", data.get("actor_id")),
            actor_type=actor_type,
            actor_name=data.get("actorName", data.get("actor_name")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "actorId": self.actor_id,
            "actorType": self.actor_type,
            "actorName": self.actor_name,
        }


@dataclasses.dataclass(frozen=True, eq=False)
class AnalyticsEvent:
    """Immutable, typed analytics event.

    ``payload`` and ``context`` are deep-frozen at construction: nested dicts
    become read-only mappings and lists become tuples.  Use :meth:`to_dict`
    for a mutable copy.

    Build instances with :func:`create_analytics_event`, which validates the
    category and payload; direct construction skips validation.
    """

    event_id: str
    occurred_at: datetime
    source: str
    category: str
    name: str
    payload: Mapping[str, Any]
    schema_version: int = 1
    actor: EventActor | None = None
    context: Mapping[str, Any] = dataclasses.field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        object.__setattr__(self, "payload", _freeze(self.payload))
        object.__setattr__(self, "context", _freeze(self.context or {}))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AnalyticsEvent):
            return NotImplemented
        return self.event_id == other.event_id

    def __hash__(self) -> int:
        return hash(self.event_id)

    @property
    def event_type(self) -> str:
        return f"{self.category}/{self.name}"

    def payload_dict(self) -> dict[str, Any]:
        return _thaw(self.payload)

    def context_dict(self) -> dict[str, Any]:
        return _thaw(self.context)

    def to_dict(self) -> dict[str, Any]:
        """Wire representation with producer-style (camelCase) keys."""
        data: dict[str, Any] = {
            "eventId": self.event_id,
            "occurredAt": self.occurred_at.isoformat(),
            "source": self.source,
            "category": self.category,
            "name": self.name,
            "schemaVersion": self.schema_version,
            "payload": self.payload_dict(),
        }
        if self.actor is not None:
            data["actor"] = self.actor.to_dict()
        if self.context:
            data["context"] = self.context_dict()
        return data

    def to_json(self) -> str:
        try:
            return json.dumps(self.to_dict(), ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise SerializationError(
                f"Event '{self.event_id}' is not JSON-serialisable: {exc}",
                payload_type=self.category,
                cause=exc,
            ) from exc

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        *,
        registry: CategoryRegistry | None = None,
    ) -> "AnalyticsEvent":
        """Rebuild (and re-validate) an event from its wire representation."""
        return create_analytics_event(
            source=data.get("source", ""),
            category=data.get("category", ""),
            name=data.get("name", ""),
            payload=data.get("payload") or {},
            actor=data.get("actor"),
            context=data.get("context"),
            event_id=data.get("eventId"),
            occurred_at=data.get("occurredAt"),
            schema_version=data.get("schemaVersion", 1),
            registry=registry,
        )


def create_analytics_event(
    *,
    source: str,
    category: str | EventCategory,
    name: str,
    payload: Mapping[str, Any],
    actor: EventActor | Mapping[str, Any] | None = None,
    context: Mapping[str, Any] | None = None,
    event_id: str | None = None,
    occurred_at: datetime | str | None = None,
    schema_version: int = 1,
    registry: CategoryRegistry | None = None,
    clock: Clock | None = None,
) -> AnalyticsEvent:
    """Validate producer input and return a fully populated :class:`AnalyticsEvent`.

    A fresh ``event_id`` and the current ``occurred_at`` are assigned unless
    supplied.  When *context* carries no ``correlationId`` and a request
    context is active, its correlation and tenant ids are copied in.

    Raises
    ------
    ValidationError
        Unknown category or event name, missing/mistyped payload fields,
        non-JSON payload or context, bad actor, event id or timestamp.
    """
    registry = registry or _DEFAULT_REGISTRY
    category_value = category.value if isinstance(category, EventCategory) else category
    errors: list[dict[str, Any]] = []

    if not isinstance(source, str) or not source.strip():
        errors.append({"field": "source", "message": "must be a non-empty string"})
    if isinstance(schema_version, bool) or not isinstance(schema_version, int) or schema_version < 1:
        errors.append({"field": "schemaVersion", "message": "must be a positive integer"})

    schema = registry.get(category_value) if isinstance(category_value, str) else None
    if schema is None:
        raise ValidationError(
            f"Unknown event category {category_value!r}",
            errors=[{"field": "category", "message": "unknown category"}],
            detail={"known_categories": registry.categories()},
        )

    if not isinstance(payload, Mapping):
        errors.append({"field": "payload", "message": "must be an object"})
        payload = {}
    else:
        errors.extend(_check_json_like(payload, "payload"))
        if not any(e["field"].startswith("payload") for e in errors):
            errors.extend(schema.validate(name, payload))
        elif name not in schema.names:
            errors.append({"field": "name", "message": f"unknown event name {name!r}"})

    event_actor = _coerce_actor(actor, errors)
    event_context = _coerce_context(context, errors)
    resolved_id = _coerce_event_id(event_id, errors)
    resolved_at = _coerce_occurred_at(occurred_at, clock or _SYSTEM_CLOCK, errors)

    if errors:
        raise ValidationError(
            f"Invalid {category_value} event {name!r}",
            errors=errors,
            detail={"category": category_value, "name": name},
        )

    return AnalyticsEvent(
        event_id=resolved_id,
        occurred_at=resolved_at,
        source=source,
        category=category_value,
        name=name,
        payload=payload,
        schema_version=schema_version,
        actor=event_actor,
        context=event_context,
    )


def validate_event(event: AnalyticsEvent, *, registry: CategoryRegistry | None = None) -> None:
    """Re-check an already built event against *registry*.

    Events constructed directly skip the factory's checks; the bus calls
    this before forwarding or delivering anything.

    Raises
    ------
    ValidationError
        Unknown category or event name, or a payload that does not match
        the category schema.
    """
    registry = registry or _DEFAULT_REGISTRY
    schema = registry.get(event.category)
    if schema is None:
        raise ValidationError(
            f"Unknown event category {event.category!r}",
            errors=[{"field": "category", "message": "unknown category"}],
            detail={"event_id": event.event_id, "known_categories": registry.categories()},
        )
    errors: list[dict[str, Any]] = []
    if not isinstance(event.source, str) or not event.source.strip():
        errors.append({"field": "source", "message": "must be a non-empty string"})
    errors.extend(schema.validate(event.name, event.payload))
    if errors:
        raise ValidationError(
            f"Invalid {event.category} event {event.name!r}",
            errors=errors,
            detail={"event_id": event.event_id, "category": event.category, "name": event.name},
        )


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------


def _coerce_actor(
    actor: EventActor | Mapping[str, Any] | None,
    errors: list[dict[str, Any]],
) -> EventActor | None:
    if actor is None:
        return None
    if isinstance(actor, Mapping):
        actor = EventActor.from_mapping(actor)
    if not isinstance(actor, EventActor):
        errors.append({"field": "actor", "message": "must be an EventActor or object"})
        return None
    if actor.actor_type is not None and actor.actor_type not in {t.value for t in ActorType}:
        errors.append({
            "field": "actor.actorType",
            "message": f"must be one of {sorted(t.value for t in ActorType)}",
        })
    for attr in ("actor_id", "actor_name"):
        value = getattr(actor, attr)
        if value is not None and (not isinstance(value, str) or not value):
            errors.append({"field": f"actor.{attr}", "message": "must be a non-empty string"})
    return actor


def _coerce_context(
    context: Mapping[str, Any] | None,
    errors: list[dict[str, Any]],
) -> dict[str, Any]:
    if context is not None and not isinstance(context, Mapping):
        errors.append({"field": "context", "message": "must be an object"})
        return {}
    result = dict(context or {})
    errors.extend(_check_json_like(result, "context"))

    ambient = CorrelationContext.get()
    if ambient is not None and "correlationId" not in result:
        result["correlationId"] = ambient.correlation_id
        if ambient.tenant_id is not None:
            result.setdefault("tenantId", ambient.tenant_id)
    return result


def _coerce_event_id(event_id: str | None, errors: list[dict[str, Any]]) -> str:
    if event_id is None:
        return str(uuid4())
    try:
        return str(UUID(str(event_id)))
    except ValueError:
        errors.append({"field": "eventId", "message": "must be a UUID"})
        return str(event_id)


def _coerce_occurred_at(
    occurred_at: datetime | str | None,
    clock: Clock,
    errors: list[dict[str, Any]],
) -> datetime:
    if occurred_at is None:
        return clock.now()
    if isinstance(occurred_at, str):
        try:
            occurred_at = datetime.fromisoformat(occurred_at)
        except ValueError:
            errors.append({"field": "occurredAt", "message": "must be an ISO-8601 datetime"})
            return clock.now()
    if not isinstance(occurred_at, datetime):
        errors.append({"field": "occurredAt", "message": "must be a datetime"})
        return clock.now()
    if occurred_at.tzinfo is None:
        return occurred_at.replace(tzinfo=UTC)
    return occurred_at.astimezone(UTC)


def _check_json_like(value: Any, path: str, _seen: frozenset[int] = frozenset()) -> list[dict[str, Any]]:
    """Reject values that cannot round-trip through JSON (callables, cycles, NaN, …)."""
    if value is None or isinstance(value, (bool, int, str)):
        return []
    if isinstance(value, float):
        if math.isfinite(value):
            return []
        return [{"field": path, "message": "must be a finite number"}]
    if isinstance(value, (Mapping, list, tuple)):
        if id(value) in _seen:
            return [{"field": path, "message": "contains a reference cycle"}]
        seen = _seen | {id(value)}
        errors: list[dict[str, Any]] = []
        if isinstance(value, Mapping):
            for key, item in value.items():
                if not isinstance(key, str):
                    errors.append({"field": path, "message": f"key {key!r} is not a string"})
                    continue
                errors.extend(_check_json_like(item, f"{path}.{key}", seen))
        else:
            for index, item in enumerate(value):
                errors.extend(_check_json_like(item, f"{path}[{index}]", seen))
        return errors
    return [{"field": path, "message": f"{type(value).__name__} is not JSON-serialisable"}]


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


__all__ = ["AnalyticsEvent", "EventActor", "create_analytics_event", "validate_event"]
