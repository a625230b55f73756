"""
Multiplayer synchronizer.

Replicates the local seat's board to up to three peers over a room
broadcast channel. Replication is full-state: after every local change the
whole PlayerState of the local seat is sent as a `player_state` message.
Remote boards are stored wholesale as received; the engine never replays
a peer's actions.

INVARIANT: Only inbound `player_state` messages write a remote seat's
stored state. Viewing a remote seat loads a copy into the session's proxy
fields, and mutations are no-ops until the local seat is viewed again.

INVARIANT: The last applied `player_state` for a seat wins, regardless of
the order the messages were produced. Stale-message rejection by timestamp
is available behind `reject_stale_player_state`.

Offline, every seat is local (hot-seat play): switching views persists the
proxy into the seat being left.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from commandtable.config import settings
from commandtable.models.log import LogActionType
from commandtable.models.player import PlayerState
from commandtable.models.targeting import IDLE
from commandtable.multiplayer.channel import BroadcastChannel, ChannelError, ChannelFactory
from commandtable.multiplayer.messages import (
    Event,
    GameLogEntrySchema,
    GameLogMessage,
    PlayerJoinMessage,
    PlayerLeaveMessage,
    PlayerStateMessage,
    PlayerStateSchema,
    PresencePingMessage,
    WireModel,
    decode,
)
from commandtable.multiplayer.room import (
    HOST_SEAT,
    SEAT_IDS,
    generate_room_code,
    is_seat_id,
    is_valid_room_code,
    normalize_room_code,
)

if TYPE_CHECKING:
    from commandtable.engine.session import GameSession
    from commandtable.models.log import GameLogEntry

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def seat_label(seat: str) -> str:
    """"player-2" -> "Player 2"."""
    return seat.replace("-", " ").capitalize()


class MultiplayerSynchronizer:
    """
    Seat bookkeeping and replication for one GameSession.

    Args:
        session: The session whose proxy fields hold the viewed board
        channel_factory: Opens a channel for a room code; None disables multiplayer
        user_id: Stable id announced in presence messages
        reject_stale: Drop player_state messages older than the last applied
            one for the same seat. Defaults to settings.reject_stale_player_state
        clock: Millisecond clock for message timestamps
    """

    def __init__(
        self,
        session: GameSession,
        channel_factory: ChannelFactory | None,
        *,
        user_id: str | None = None,
        reject_stale: bool | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._session = session
        self.channel_factory = channel_factory
        self.user_id = user_id or str(uuid.uuid4())
        self.reject_stale = (
            settings.reject_stale_player_state if reject_stale is None else reject_stale
        )
        self._clock = clock or _now_ms

        self.channel: BroadcastChannel | None = None
        self.room_code: str | None = None
        self.local_player_id: str = HOST_SEAT
        self.viewing_player_id: str = HOST_SEAT
        self.local_name = ""

        self.players: dict[str, PlayerState] = {}
        self.connected: dict[str, PlayerJoinMessage] = {}
        self._last_applied: dict[str, int] = {}

        session.log.subscribe(self._on_local_log_entry)

    # =========================================================================
    # STATUS
    # =========================================================================

    @property
    def is_online(self) -> bool:
        return self.channel is not None and self.channel.is_subscribed

    @property
    def is_viewing_local(self) -> bool:
        """True when the proxy fields hold a board this client may edit."""
        return not self.is_online or self.viewing_player_id == self.local_player_id

    @property
    def turn_order(self) -> list[str]:
        """Occupied seats in seat order."""
        return [
            seat for seat in SEAT_IDS if seat == self.local_player_id or seat in self.connected
        ]

    # =========================================================================
    # PROXY FIELDS
    # =========================================================================

    def _seat_name(self, seat: str) -> str:
        if seat == self.local_player_id:
            return self.local_name
        stored = self.players.get(seat)
        return stored.name if stored is not None else ""

    def _capture(self, seat: str) -> PlayerState:
        """Copy the proxy fields into a PlayerState for `seat`."""
        session = self._session
        return PlayerState(
            id=seat,
            name=self._seat_name(seat),
            life=session.life,
            counters=session.counters.clone(),
            mana_pool=session.mana_pool.clone(),
            cards=[card.clone() for card in session.cards],
            card_positions=dict(session.card_positions),
            commander_card_id=session.commander_card_id,
            is_top_card_revealed=session.is_top_card_revealed,
        )

    def _load(self, state: PlayerState) -> None:
        """Copy a PlayerState into the proxy fields. Nothing is shared."""
        state = state.clone()
        session = self._session
        session.life = state.life
        session.counters = state.counters
        session.mana_pool = state.mana_pool
        session.cards = state.cards
        session.card_positions = state.card_positions
        session.commander_card_id = state.commander_card_id
        session.is_top_card_revealed = state.is_top_card_revealed

    def switch_view(self, target: str) -> None:
        """
        Show another seat's board in the proxy fields.

        The board being left is persisted only if it is the local seat (or
        the client is offline); a remote seat's stored state is never
        written from the proxy.
        """
        if target == self.viewing_player_id:
            return
        if not is_seat_id(target):
            logger.debug("switch_view_unknown_seat", extra={"seat": target})
            return

        online = self.is_online
        if not online or self.viewing_player_id == self.local_player_id:
            self.players[self.viewing_player_id] = self._capture(self.viewing_player_id)

        self.viewing_player_id = target
        stored = self.players.get(target)
        if stored is None:
            stored = PlayerState(id=target, life=self._session.starting_life)
            self.players[target] = stored
        self._load(stored)
        self._session.targeting = IDLE

        if not online:
            # Snapshots belong to the seat they were taken on
            self._session.history.clear()

    def view_local(self) -> None:
        self.switch_view(self.local_player_id)

    def _adopt_local_seat(self, seat: str, name: str) -> None:
        """Carry the board currently shown over to a new local seat."""
        state = self._capture(seat)
        state.name = name
        self.players = {seat: state}
        self.local_player_id = seat
        self.viewing_player_id = seat
        self.local_name = name
        self._session.targeting = IDLE

    # =========================================================================
    # ROOMS
    # =========================================================================

    async def create_room(self, name: str) -> str | None:
        """
        Open a new room and take the host seat.

        Returns:
            The room code, or None if the channel could not be opened
        """
        code = generate_room_code()
        if await self._go_online(code, HOST_SEAT, name):
            return code
        return None

    async def join_room(self, code: str, seat: str, name: str) -> bool:
        code = normalize_room_code(code)
        if not is_valid_room_code(code) or not is_seat_id(seat):
            logger.warning("join_room_rejected", extra={"room_code": code, "seat": seat})
            return False
        return await self._go_online(code, seat, name)

    async def start_solo_mode(self, name: str) -> None:
        await self.leave_room()
        self._adopt_local_seat(HOST_SEAT, name)

    async def _go_online(self, code: str, seat: str, name: str) -> bool:
        if self.channel_factory is None:
            logger.warning("multiplayer_unavailable", extra={"room_code": code})
            return False

        await self.leave_room()

        channel = self.channel_factory(code)
        try:
            await channel.subscribe(self._handle_message)
        except ChannelError as e:
            logger.warning("channel_subscribe_failed", extra={"room_code": code, "error": str(e)})
            return False

        self.view_local()
        self._adopt_local_seat(seat, name)
        self.connected = {}
        self._last_applied = {}
        self.channel = channel
        self.room_code = code

        self._announce()
        self.broadcast_player_state()
        logger.info("room_joined", extra={"room_code": code, "seat": seat})
        return True

    async def leave_room(self) -> None:
        """Announce departure, close the channel and continue offline."""
        if self.channel is None:
            return

        self.view_local()
        channel = self.channel
        channel.send(
            Event.PLAYER_LEAVE.value,
            PlayerLeaveMessage(player_id=self.local_player_id).to_payload(),
        )
        self.channel = None
        logger.info("room_left", extra={"room_code": self.room_code})
        self.room_code = None
        self.connected = {}
        self._last_applied = {}
        self.players = {
            seat: state for seat, state in self.players.items() if seat == self.local_player_id
        }
        await channel.unsubscribe()

    async def discover_seats(self, code: str, wait: float | None = None) -> dict[str, str]:
        """
        Lobby check: which seats in a room are taken, before committing to one.

        Subscribes a throwaway channel, sends `presence_ping` and collects
        `player_join` replies for `wait` seconds. The host seat is always
        reported as taken.

        Returns:
            Seat id -> player name
        """
        taken: dict[str, str] = {HOST_SEAT: "Host"}
        if self.channel_factory is None:
            return taken

        def on_message(event: str, payload: dict[str, Any]) -> None:
            if event != Event.PLAYER_JOIN.value:
                return
            try:
                presence = PlayerJoinMessage.model_validate(payload)
            except ValueError:
                return
            taken[presence.player_id] = presence.name

        channel = self.channel_factory(normalize_room_code(code))
        try:
            await channel.subscribe(on_message)
        except ChannelError as e:
            logger.warning("seat_discovery_failed", extra={"room_code": code, "error": str(e)})
            return taken

        try:
            channel.send(Event.PRESENCE_PING.value, PresencePingMessage().to_payload())
            await asyncio.sleep(settings.lobby_discovery_window if wait is None else wait)
        finally:
            await channel.unsubscribe()
        return taken

    # =========================================================================
    # OUTBOUND
    # =========================================================================

    def _send(self, event: Event, message: WireModel) -> None:
        if self.channel is None or not self.channel.is_subscribed:
            return
        self.channel.send(event.value, message.to_payload())

    def _announce(self) -> None:
        self._send(
            Event.PLAYER_JOIN,
            PlayerJoinMessage(
                user_id=self.user_id,
                player_id=self.local_player_id,
                name=self.local_name,
                last_seen=self._clock(),
            ),
        )

    def broadcast_player_state(self) -> None:
        """
        Publish the local seat's board.

        Uses the live proxy fields when the local seat is viewed; otherwise
        the stored local copy, which is current because edits are blocked
        while a remote seat is viewed.
        """
        if not self.is_online:
            return

        if self.viewing_player_id == self.local_player_id:
            state = self._capture(self.local_player_id)
        else:
            stored = self.players.get(self.local_player_id)
            if stored is None:
                return
            state = stored

        self._send(
            Event.PLAYER_STATE,
            PlayerStateMessage(
                player_id=self.local_player_id,
                state=PlayerStateSchema.from_domain(state),
                timestamp=self._clock(),
            ),
        )

    def _on_local_log_entry(self, entry: GameLogEntry) -> None:
        self._send(
            Event.GAME_LOG,
            GameLogMessage(
                entry=GameLogEntrySchema.from_domain(entry), player_id=self.local_player_id
            ),
        )

    # =========================================================================
    # INBOUND
    # =========================================================================

    def handle_remote_player_state(
        self, seat: str, state: PlayerState, timestamp: int | None = None
    ) -> bool:
        """
        Store a peer's board.

        Returns:
            False if the message was ignored (own seat, or stale when
            stale rejection is enabled)
        """
        if seat == self.local_player_id:
            return False

        if self.reject_stale and timestamp is not None:
            last = self._last_applied.get(seat)
            if last is not None and timestamp < last:
                logger.debug(
                    "stale_player_state_dropped",
                    extra={"seat": seat, "timestamp": timestamp, "last_applied": last},
                )
                return False

        self.players[seat] = state
        if timestamp is not None:
            self._last_applied[seat] = timestamp
        if self.viewing_player_id == seat:
            self._load(state)
        return True

    def _handle_message(self, event: str, payload: dict[str, Any]) -> None:
        try:
            kind = Event(event)
        except ValueError:
            logger.debug("unknown_event_ignored", extra={"event": event})
            return

        try:
            message = decode(kind, payload)
        except ValueError as e:
            logger.warning("invalid_message_dropped", extra={"event": event, "error": str(e)})
            return

        if isinstance(message, PlayerStateMessage):
            self._handle_player_state(message)
        elif isinstance(message, PlayerJoinMessage):
            self._handle_join(message)
        elif isinstance(message, PlayerLeaveMessage):
            self._handle_leave(message)
        elif isinstance(message, GameLogMessage):
            self._handle_game_log(message)
        elif isinstance(message, PresencePingMessage):
            self._announce()

    def _handle_player_state(self, message: PlayerStateMessage) -> None:
        try:
            state = message.state.to_domain()
        except (KeyError, ValueError) as e:
            logger.warning(
                "invalid_player_state_dropped",
                extra={"seat": message.player_id, "error": str(e)},
            )
            return
        state.id = message.player_id
        self.handle_remote_player_state(message.player_id, state, message.timestamp)

    def _handle_join(self, message: PlayerJoinMessage) -> None:
        seat = message.player_id
        if seat == self.local_player_id:
            if message.user_id != self.user_id:
                logger.warning("seat_conflict", extra={"seat": seat, "user_id": message.user_id})
            return

        is_new = seat not in self.connected
        self.connected[seat] = message
        stored = self.players.get(seat)
        if stored is None:
            self.players[seat] = PlayerState(
                id=seat, name=message.name, life=self._session.starting_life
            )
        else:
            stored.name = message.name

        if not is_new:
            return

        self._session.log.add(
            LogActionType.OTHER,
            f"{message.name or seat_label(seat)} joined as {seat_label(seat)}",
            broadcast=False,
        )
        # Let the newcomer discover us and our board
        self._announce()
        self.broadcast_player_state()

    def _handle_leave(self, message: PlayerLeaveMessage) -> None:
        presence = self.connected.pop(message.player_id, None)
        if presence is None:
            return
        self._session.log.add(
            LogActionType.OTHER,
            f"{presence.name or seat_label(message.player_id)} left the game",
            broadcast=False,
        )

    def _handle_game_log(self, message: GameLogMessage) -> None:
        if message.player_id == self.local_player_id:
            return
        self._session.log.append_remote(message.entry.to_domain(player_id=message.player_id))
