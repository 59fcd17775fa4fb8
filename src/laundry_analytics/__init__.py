"""
laundry_analytics – analytics event pipeline for the laundry/delivery platform.

Import path convention::

    from laundry_analytics.kernel.events import create_analytics_event
    from laundry_analytics.application.bus import InMemoryEventBus
    from laundry_analytics.application.sink import EventSink
    from laundry_analytics.adapters.sqlalchemy import SqlAlchemyWarehouseWriter
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
