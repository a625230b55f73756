"""
Room broadcast channels.

A channel is a per-room pub/sub pipe that carries `{event, payload}`
JSON frames to every other subscriber of the same room. Delivery is
at-most-once and unordered across senders; the sender never receives its
own frames.

Two implementations:

    InMemoryBroadcastHub / InMemoryChannel
        Process-local rooms. Frames are queued and delivered on flush(),
        or on the next event-loop tick with auto_flush=True.
    RelayChannel
        A websocket client for the relay served by commandtable.api.rooms.
"""

import asyncio
import functools
import json
import logging
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Callable
from typing import Any

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from commandtable.config import settings

logger = logging.getLogger(__name__)

# Called with the raw event name and its (unvalidated) payload
MessageHandler = Callable[[str, dict[str, Any]], None]


class ChannelError(Exception):
    """Raised when a channel cannot be opened."""

    pass


class BroadcastChannel(ABC):
    """One client's subscription to one room."""

    def __init__(self, room_code: str) -> None:
        self.room_code = room_code

    @property
    @abstractmethod
    def is_subscribed(self) -> bool: ...

    @abstractmethod
    async def subscribe(self, handler: MessageHandler) -> None:
        """
        Start receiving frames for this room.

        Raises:
            ChannelError: If the subscription cannot be established
        """
        ...

    @abstractmethod
    def send(self, event: str, payload: dict[str, Any]) -> None:
        """Fire-and-forget a frame to the other subscribers."""
        ...

    @abstractmethod
    async def unsubscribe(self) -> None: ...


ChannelFactory = Callable[[str], BroadcastChannel]


# =============================================================================
# IN-MEMORY
# =============================================================================


class InMemoryBroadcastHub:
    """
    Process-local rooms.

    The hub is itself a ChannelFactory: `GameSession(channel_factory=hub)`.
    Payloads are copied through JSON on send, so receivers never share
    objects with the sender or with each other.
    """

    def __init__(self, *, auto_flush: bool = False) -> None:
        self.auto_flush = auto_flush
        self._rooms: dict[str, list["InMemoryChannel"]] = {}
        self._queue: deque[tuple["InMemoryChannel", str]] = deque()
        self._flush_scheduled = False

    def __call__(self, room_code: str) -> "InMemoryChannel":
        return self.channel(room_code)

    def channel(self, room_code: str) -> "InMemoryChannel":
        return InMemoryChannel(self, room_code)

    def subscribers(self, room_code: str) -> list["InMemoryChannel"]:
        return list(self._rooms.get(room_code, []))

    @property
    def pending(self) -> int:
        return len(self._queue)

    def _join(self, channel: "InMemoryChannel") -> None:
        self._rooms.setdefault(channel.room_code, []).append(channel)

    def _leave(self, channel: "InMemoryChannel") -> None:
        members = self._rooms.get(channel.room_code, [])
        if channel in members:
            members.remove(channel)
        if not members:
            self._rooms.pop(channel.room_code, None)

    def _publish(self, sender: "InMemoryChannel", event: str, payload: dict[str, Any]) -> None:
        self._queue.append((sender, json.dumps({"event": event, "payload": payload})))
        if self.auto_flush and not self._flush_scheduled:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                return
            self._flush_scheduled = True
            loop.call_soon(self.flush)

    def flush(self) -> int:
        """
        Deliver queued frames in FIFO order, including frames sent by
        handlers during the flush.

        Returns:
            Number of frames delivered (one per receiving subscriber)
        """
        self._flush_scheduled = False
        delivered = 0
        while self._queue:
            sender, frame = self._queue.popleft()
            for channel in self.subscribers(sender.room_code):
                if channel is sender or not channel.is_subscribed:
                    continue
                message = json.loads(frame)
                channel._deliver(message["event"], message["payload"])
                delivered += 1
        return delivered


class InMemoryChannel(BroadcastChannel):
    def __init__(self, hub: InMemoryBroadcastHub, room_code: str) -> None:
        super().__init__(room_code)
        self._hub = hub
        self._handler: MessageHandler | None = None

    @property
    def is_subscribed(self) -> bool:
        return self._handler is not None

    async def subscribe(self, handler: MessageHandler) -> None:
        if self._handler is None:
            self._hub._join(self)
        self._handler = handler

    def send(self, event: str, payload: dict[str, Any]) -> None:
        if self._handler is None:
            return
        self._hub._publish(self, event, payload)

    async def unsubscribe(self) -> None:
        self._handler = None
        self._hub._leave(self)

    def _deliver(self, event: str, payload: dict[str, Any]) -> None:
        if self._handler is not None:
            self._handler(event, payload)


# =============================================================================
# WEBSOCKET RELAY
# =============================================================================


class RelayChannel(BroadcastChannel):
    """
    Websocket client for the room relay.

    Outbound frames go through a queue drained by a writer task, so send()
    stays synchronous. A reader task hands inbound frames to the handler.

    Args:
        relay_url: Relay base URL, e.g. "ws://localhost:8000"
        room_code: Room to join
        open_timeout: Seconds to wait for the websocket handshake
    """

    def __init__(self, relay_url: str, room_code: str, *, open_timeout: float = 10.0) -> None:
        super().__init__(room_code)
        self.relay_url = relay_url.rstrip("/")
        self.open_timeout = open_timeout
        self._connection: Any = None
        self._handler: MessageHandler | None = None
        self._outbox: asyncio.Queue[str] | None = None
        self._tasks: list[asyncio.Task[None]] = []

    @property
    def url(self) -> str:
        return f"{self.relay_url}/rooms/{self.room_code}/ws"

    @property
    def is_subscribed(self) -> bool:
        return self._connection is not None

    async def subscribe(self, handler: MessageHandler) -> None:
        try:
            self._connection = await websockets.connect(self.url, open_timeout=self.open_timeout)
        except (OSError, TimeoutError, WebSocketException) as e:
            raise ChannelError(f"Could not connect to relay at {self.url}: {e}") from e

        self._handler = handler
        self._outbox = asyncio.Queue()
        self._tasks = [
            asyncio.create_task(self._read_loop()),
            asyncio.create_task(self._write_loop()),
        ]
        logger.info("relay_connected", extra={"room_code": self.room_code})

    def send(self, event: str, payload: dict[str, Any]) -> None:
        if self._outbox is None:
            logger.debug("relay_send_dropped", extra={"event": event})
            return
        self._outbox.put_nowait(json.dumps({"event": event, "payload": payload}))

    async def _write_loop(self) -> None:
        assert self._outbox is not None
        while True:
            frame = await self._outbox.get()
            try:
                await self._connection.send(frame)
            except ConnectionClosed:
                logger.warning("relay_connection_closed", extra={"room_code": self.room_code})
                return

    async def _read_loop(self) -> None:
        try:
            async for frame in self._connection:
                try:
                    message = json.loads(frame)
                except json.JSONDecodeError:
                    logger.warning("relay_frame_not_json", extra={"room_code": self.room_code})
                    continue
                if not isinstance(message, dict) or not isinstance(message.get("event"), str):
                    continue
                payload = message.get("payload")
                if self._handler is not None:
                    self._handler(message["event"], payload if isinstance(payload, dict) else {})
        except ConnectionClosed:
            logger.info("relay_disconnected", extra={"room_code": self.room_code})

    async def unsubscribe(self) -> None:
        for task in self._tasks:
            task.cancel()
        self._tasks = []
        self._handler = None
        self._outbox = None

        if self._connection is not None:
            connection, self._connection = self._connection, None
            await connection.close()


def relay_channel_factory(relay_url: str) -> ChannelFactory:
    return functools.partial(RelayChannel, relay_url)


def default_channel_factory() -> ChannelFactory | None:
    """Relay factory from settings, or None when no relay is configured."""
    if not settings.relay_url:
        return None
    return relay_channel_factory(settings.relay_url)
