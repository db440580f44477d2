import asyncio
from typing import Any, Awaitable, Callable, Dict, Iterable, List
from coordinator import Emit
from logging_config import get_logger

logger = get_logger(__name__)

# send(event, payload) for one live connection
Sender = Callable[[str, Any], Awaitable[Any]]


class Transport:
    """Routes outbound events to live connections, whichever adapter owns them.

    Delivery is fire-and-forget: failures are logged and never propagate to
    the coordinator or to other recipients.
    """

    def __init__(self):
        self._senders: Dict[str, Sender] = {}

    def register(self, connection_id: str, sender: Sender):
        self._senders[connection_id] = sender
        logger.debug(f"Connection {connection_id} attached to transport ({len(self._senders)} live)")

    def unregister(self, connection_id: str):
        if self._senders.pop(connection_id, None) is not None:
            logger.debug(f"Connection {connection_id} detached from transport ({len(self._senders)} live)")

    def is_connected(self, connection_id: str) -> bool:
        return connection_id in self._senders

    def __len__(self) -> int:
        return len(self._senders)

    def clear(self):
        self._senders.clear()

    async def deliver(self, outbound: Iterable[Emit]) -> int:
        """Send every effect to its recipients; returns the number of sends attempted."""
        send_tasks: List[Awaitable[Any]] = []
        targets: List[str] = []
        for emit in outbound:
            for connection_id in emit.to:
                sender = self._senders.get(connection_id)
                if sender is None:
                    logger.debug(f"Skipping {emit.event} for {connection_id}: no live connection")
                    continue
                send_tasks.append(sender(emit.event, emit.payload))
                targets.append(connection_id)

        if not send_tasks:
            return 0
        results = await asyncio.gather(*send_tasks, return_exceptions=True)
        for connection_id, result in zip(targets, results):
            if isinstance(result, Exception):
                logger.warning(f"Error sending to connection {connection_id}: {result}")
        logger.debug(f"Delivered {len(send_tasks)} event(s)")
        return len(send_tasks)


transport = Transport()
