"""Application writer – warehouse and dead-letter ports."""
from laundry_analytics.application.writer.ports import DeadLetterSink, Row, WarehouseWriter

__all__ = ["DeadLetterSink", "Row", "WarehouseWriter"]
