"""Closed taxonomies for analytics events."""
from __future__ import annotations

from enum import Enum


class EventCategory(str, Enum):
    """Event category: selects the payload shape and the destination table."""

    ORDER_LIFECYCLE = "order.lifecycle"
    DRIVER_TELEMETRY = "driver.telemetry"
    CAMPAIGN_INTERACTION = "campaign.interaction"


class ActorType(str, Enum):
    """Who or what caused an event."""

    SYSTEM = "system"
    USER = "user"
    DRIVER = "driver"
    CUSTOMER = "customer"
    AUTOMATION = "automation"


class CampaignChannel(str, Enum):
    SMS = "sms"
    EMAIL = "email"
    WHATSAPP = "whatsapp"
    PUSH = "push"
    IN_APP = "in_app"


class CampaignStatus(str, Enum):
    QUEUED = "queued"
    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"
    UPDATED = "updated"


__all__ = ["ActorType", "CampaignChannel", "CampaignStatus", "EventCategory"]
