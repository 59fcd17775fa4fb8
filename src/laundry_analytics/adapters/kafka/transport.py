"""Kafka adapter – KafkaEventTransport."""
from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

from laundry_analytics.application.bus import EventTransport
from laundry_analytics.observability.logging import get_logger

logger = get_logger(__name__)


def _require_aiokafka() -> Any:
    try:
        import aiokafka  # type: ignore[import-untyped]
        return aiokafka
    except ImportError as exc:
        raise ImportError("Install 'laundry-analytics[kafka]' to use the Kafka transport") from exc


class KafkaEventTransport(EventTransport):
    """aiokafka-backed transport forwarding every published event to one topic.

    The record key is the event id; ``category``, ``name`` and ``event_id``
    travel as headers.  The producer is created and started once, on first use.
    """

    def __init__(
        self,
        bootstrap_servers: str | list[str],
        topic: str = "analytics.events",
        *,
        client_id: str = "laundryao-api",
        **producer_kwargs: Any,
    ) -> None:
        self._aiokafka = _require_aiokafka()
        self._bootstrap_servers = (
            ",".join(bootstrap_servers) if isinstance(bootstrap_servers, list) else bootstrap_servers
        )
        self._topic = topic
        self._client_id = client_id
        self._producer_kwargs = producer_kwargs
        self._producer: Any = None
        self._start_lock = asyncio.Lock()

    @property
    def topic(self) -> str:
        return self._topic

    async def start(self) -> None:
        if self._producer is not None:
            return
        # concurrent first sends share one producer
        async with self._start_lock:
            if self._producer is not None:
                return
            producer = self._aiokafka.AIOKafkaProducer(
                bootstrap_servers=self._bootstrap_servers,
                client_id=self._client_id,
                **self._producer_kwargs,
            )
            await producer.start()
            self._producer = producer

    async def close(self) -> None:
        if self._producer is None:
            return
        producer, self._producer = self._producer, None
        await producer.stop()

    async def __aenter__(self) -> "KafkaEventTransport":
        await self.start()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()

    async def send(self, event_json: bytes, key: str, attributes: Mapping[str, str]) -> None:
        await self.start()
        headers = [(k, str(v).encode()) for k, v in attributes.items()]
        await self._producer.send_and_wait(
            self._topic,
            value=event_json,
            key=key.encode(),
            headers=headers,
        )
        logger.debug("kafka.event_sent", topic=self._topic, key=key)


__all__ = ["KafkaEventTransport"]
