"""Kafka adapter – event transport for the bus."""
from laundry_analytics.adapters.kafka.transport import KafkaEventTransport

__all__ = ["KafkaEventTransport"]
