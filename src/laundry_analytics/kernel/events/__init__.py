"""Kernel events – analytics event records, categories and payload schemas."""
from laundry_analytics.kernel.events.categories import (
    ActorType,
    CampaignChannel,
    CampaignStatus,
    EventCategory,
)
from laundry_analytics.kernel.events.event import (
    AnalyticsEvent,
    EventActor,
    create_analytics_event,
    validate_event,
)
from laundry_analytics.kernel.events.schema import (
    CategoryRegistry,
    CategorySchema,
    PayloadField,
    default_category_registry,
)

__all__ = [
    "ActorType",
    "AnalyticsEvent",
    "CampaignChannel",
    "CampaignStatus",
    "CategoryRegistry",
    "CategorySchema",
    "EventActor",
    "EventCategory",
    "PayloadField",
    "create_analytics_event",
    "default_category_registry",
    "validate_event",
]
