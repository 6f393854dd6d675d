"""
Realtime transport: a publish/subscribe channel per room (can implement later for Supabase Realtime / websockets etc.)

The session only relies on the `Transport` / `Channel` protocols. `InMemoryRelay` implements them for peers that
live in the same process (and for the tests): it broadcasts every message to all other channels of the same room.
"""

import logging
from collections import defaultdict
from copy import deepcopy
from typing import Any, Callable, Optional, Protocol

from src.core.exceptions import ChannelUnavailable
from src.sync.protocol import room_topic

_log = logging.getLogger(__name__)

Payload = dict[str, Any]
MessageHandler = Callable[[Payload], Any]


class Channel(Protocol):
    """One peer's subscription to a room"""

    room_code: str

    def on_message(self, kind: str, handler: MessageHandler) -> None:
        """Register a handler for messages of the given kind sent by other peers."""
        ...

    def send(self, kind: str, payload: Payload) -> None:
        """Fire-and-forget broadcast to the other peers in the room."""
        ...

    def close(self) -> None:
        """Stop receiving messages."""
        ...


class Transport(Protocol):
    def open_channel(self, room_code: str) -> Channel:
        """Subscribe to the channel scoped to the room code. Raises ChannelUnavailable if the transport cannot serve it."""
        ...


class RelayChannel:
    """Channel handed out by the InMemoryRelay"""

    def __init__(self, relay: "InMemoryRelay", room_code: str) -> None:
        self.relay = relay
        self.room_code = room_code
        self.handlers: dict[str, list[MessageHandler]] = defaultdict(list)
        self.is_open = True

    def on_message(self, kind: str, handler: MessageHandler) -> None:
        self.handlers[kind].append(handler)

    def send(self, kind: str, payload: Payload) -> None:
        if not self.is_open:
            _log.debug("Dropping %r message on closed channel %s", kind, self.topic)
            return
        self.relay.publish(self, kind, payload)

    def close(self) -> None:
        self.is_open = False
        self.relay.unsubscribe(self)

    @property
    def topic(self) -> str:
        return room_topic(self.room_code)

    def deliver(self, kind: str, payload: Payload) -> None:
        for handler in self.handlers.get(kind, []):
            handler(deepcopy(payload))


class InMemoryRelay:
    """
    In-process broadcast hub.
    ----

    With `autoflush=True` (default) messages are delivered as soon as they are sent.
    With `autoflush=False` they queue up in `pending` until `flush()` is called, which allows replaying them
    out of order or more than once (the channel gives no ordering or delivery guarantees).
    """

    def __init__(self, autoflush: bool = True) -> None:
        self.autoflush = autoflush
        self.rooms: dict[str, list[RelayChannel]] = defaultdict(list)
        self.pending: list[tuple[RelayChannel, str, Payload]] = []
        self.is_running = True

    def open_channel(self, room_code: str) -> RelayChannel:
        if not self.is_running:
            raise ChannelUnavailable(f"Relay is shut down, cannot subscribe to {room_topic(room_code)}")
        channel = RelayChannel(self, room_code)
        self.rooms[room_code].append(channel)
        _log.info("Peer subscribed to %s (%d peers)", channel.topic, len(self.rooms[room_code]))
        return channel

    def shutdown(self) -> None:
        """Close every channel and refuse new subscriptions. Queued messages are dropped."""
        self.is_running = False
        for peers in list(self.rooms.values()):
            for channel in list(peers):
                channel.close()
        self.pending.clear()

    def unsubscribe(self, channel: RelayChannel) -> None:
        peers = self.rooms.get(channel.room_code, [])
        if channel in peers:
            peers.remove(channel)

    def publish(self, sender: RelayChannel, kind: str, payload: Payload) -> None:
        self.pending.append((sender, kind, deepcopy(payload)))
        if self.autoflush:
            self.flush()

    def flush(self, order: Optional[list[int]] = None) -> int:
        """
        Deliver queued messages, either as queued or in the given order of indices into `pending`.
        Indices may repeat (duplicate delivery); queued messages left out of `order` are lost.
        Returns the number of messages delivered.
        """
        queued, self.pending = self.pending, []
        selection = [queued[i] for i in order] if order is not None else queued
        for sender, kind, payload in selection:
            self._broadcast(sender, kind, payload)
        return len(selection)

    def _broadcast(self, sender: RelayChannel, kind: str, payload: Payload) -> None:
        for channel in list(self.rooms.get(sender.room_code, [])):
            if channel is sender or not channel.is_open:
                continue
            channel.deliver(kind, payload)
