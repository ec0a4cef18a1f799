"""Authoritative in-memory store for rooms and connection memberships.

A ``SessionStore`` owns two maps: room id -> ``Room`` and connection id ->
``Membership``. Every public method takes the store lock for its whole
duration, so socket handlers running on separate threads (or greenlets)
never observe a half-applied change. Methods hand back deep copies of rooms;
the live objects never leave the store.
"""

import copy
import functools
import logging
import random
import string
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional

from .errors import Result, RoomError
from .models import GamePhase, GameState, Membership, Player, Room, RoomStatus, utcnow

logger = logging.getLogger(__name__)

ROOM_CAPACITY = 2
ROOM_ID_ALPHABET = string.ascii_uppercase + string.digits


@dataclass
class Departure:
    room_id: str
    player_name: str
    remaining_count: int
    # None when the room was deleted because nobody is left
    room: Optional[Room]


@dataclass
class RoomCreated:
    room_id: str
    room: Room
    departed: Optional[Departure] = None


@dataclass
class RoomJoined:
    room: Room
    room_full: bool
    departed: Optional[Departure] = None

    @property
    def message(self) -> str:
        return f"Successfully joined {self.room.id}!"


@dataclass
class ReadyUpdate:
    room_id: str
    player_name: str
    ready: bool
    room: Room


@dataclass
class StoreStats:
    room_count: int
    player_count: int
    active_game_count: int

    @property
    def waiting_room_count(self) -> int:
        return self.room_count - self.active_game_count


def _guarded(fallback: Callable[[], Any]):
    """Run an operation under the store lock.

    Unexpected exceptions are logged and replaced by ``fallback()``.
    """
    def decorator(op):
        @functools.wraps(op)
        def wrapper(self, *args, **kwargs):
            with self._lock:
                try:
                    return op(self, *args, **kwargs)
                except Exception:
                    logger.exception(f"[store-fault] op={op.__name__}")
                    return fallback()
        return wrapper
    return decorator


def _internal_error() -> Result:
    return Result.failure(RoomError.INTERNAL_ERROR)


def _nothing() -> None:
    return None


class SessionStore:

    def __init__(
        self,
        room_id_length: int = 6,
        max_age: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = utcnow,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._rooms: Dict[str, Room] = {}
        self._members: Dict[str, Membership] = {}
        self._lock = threading.RLock()
        self.room_id_length = room_id_length
        self.max_age = max_age
        self._clock = clock
        self._rng = rng or random.Random()

    # ---- internal helpers (caller holds the lock) ----

    def _generate_room_id(self) -> str:
        while True:
            room_id = ''.join(self._rng.choices(ROOM_ID_ALPHABET, k=self.room_id_length))
            if room_id not in self._rooms:
                return room_id

    def _depart(self, connection_id: str) -> Optional[Departure]:
        membership = self._members.pop(connection_id, None)
        if membership is None:
            return None
        room = self._rooms.get(membership.room_id)
        player = room.find_player(connection_id) if room else None
        if player is None:
            logger.warning(f"[member-stale] sid={connection_id} room={membership.room_id} no matching player")
            return None

        room.players.remove(player)
        if not room.players:
            del self._rooms[room.id]
            logger.info(f"[room-delete] room={room.id} no players left")
        else:
            room.status = RoomStatus.WAITING
            room.game_state = None
        logger.info(f"[room-leave] room={room.id} player={player.name} remaining={len(room.players)}")
        return Departure(
            room_id=room.id,
            player_name=player.name,
            remaining_count=len(room.players),
            room=copy.deepcopy(room) if room.players else None,
        )

    # ---- operations ----

    @_guarded(_internal_error)
    def create_room(self, connection_id: str, player_name: str, player_id: Optional[str] = None) -> Result:
        departed = self._depart(connection_id)
        room = Room(id=self._generate_room_id(), created_at=self._clock())
        room.players.append(Player(
            id=player_id or connection_id,
            name=player_name,
            connection_id=connection_id,
            is_host=True,
        ))
        self._rooms[room.id] = room
        self._members[connection_id] = Membership(room_id=room.id, player_name=player_name)
        logger.info(f"[room-create] room={room.id} player={player_name}")
        return Result.success(RoomCreated(room_id=room.id, room=copy.deepcopy(room), departed=departed))

    @_guarded(_internal_error)
    def join_room(self, connection_id: str, room_id: str, player_name: str, player_id: Optional[str] = None) -> Result:
        room = self._rooms.get(room_id)
        if room is None:
            return Result.failure(RoomError.ROOM_NOT_FOUND)
        if len(room.players) >= ROOM_CAPACITY:
            return Result.failure(RoomError.ROOM_FULL)
        if room.status == RoomStatus.IN_PROGRESS:
            return Result.failure(RoomError.GAME_IN_PROGRESS)
        if room.has_name(player_name):
            return Result.failure(RoomError.NAME_TAKEN)
        if room.find_player(connection_id):
            return Result.failure(RoomError.ALREADY_IN_ROOM)

        # Target room cannot be the one being left, so it survives the departure
        departed = self._depart(connection_id)
        room.players.append(Player(
            id=player_id or connection_id,
            name=player_name,
            connection_id=connection_id,
        ))
        self._members[connection_id] = Membership(room_id=room.id, player_name=player_name)
        room_full = len(room.players) == ROOM_CAPACITY
        if room_full:
            room.status = RoomStatus.READY_TO_START
        logger.info(f"[room-join] room={room.id} player={player_name} players={len(room.players)}/{ROOM_CAPACITY}")
        return Result.success(RoomJoined(room=copy.deepcopy(room), room_full=room_full, departed=departed))

    @_guarded(_internal_error)
    def start_game(self, connection_id: str, room_id: str) -> Result:
        room = self._rooms.get(room_id)
        if room is None:
            return Result.failure(RoomError.ROOM_NOT_FOUND)
        if len(room.players) != ROOM_CAPACITY:
            return Result.failure(RoomError.NOT_ENOUGH_PLAYERS)
        host = room.host
        if host is None or host.connection_id != connection_id:
            return Result.failure(RoomError.NOT_HOST)
        if room.status == RoomStatus.IN_PROGRESS:
            return Result.failure(RoomError.GAME_IN_PROGRESS)

        room.status = RoomStatus.IN_PROGRESS
        room.game_state = GameState(
            current_turn_player_id=host.id,
            phase=GamePhase.SHIP_PLACEMENT,
            started_at=self._clock(),
        )
        logger.info(f"[game-start] room={room.id} first_turn={host.id}")
        return Result.success(copy.deepcopy(room))

    @_guarded(_nothing)
    def set_ready(self, connection_id: str, ready: bool) -> Optional[ReadyUpdate]:
        membership = self._members.get(connection_id)
        if membership is None:
            return None
        room = self._rooms.get(membership.room_id)
        player = room.find_player(connection_id) if room else None
        if player is None:
            return None
        player.ready = bool(ready)
        logger.info(f"[player-ready] room={room.id} player={player.name} ready={player.ready}")
        return ReadyUpdate(
            room_id=room.id,
            player_name=player.name,
            ready=player.ready,
            room=copy.deepcopy(room),
        )

    @_guarded(_nothing)
    def remove_member(self, connection_id: str) -> Optional[Departure]:
        return self._depart(connection_id)

    def sweep_stale_rooms(self, now: Optional[datetime] = None, max_age: Optional[timedelta] = None) -> int:
        now = now or self._clock()
        max_age = self.max_age if max_age is None else max_age
        with self._lock:
            stale = [
                room_id for room_id, room in self._rooms.items()
                if not room.players and now - room.created_at > max_age
            ]
            for room_id in stale:
                del self._rooms[room_id]
        if stale:
            logger.info(f"[room-sweep] removed={len(stale)}")
        return len(stale)

    def stats(self) -> StoreStats:
        with self._lock:
            return StoreStats(
                room_count=len(self._rooms),
                player_count=len(self._members),
                active_game_count=sum(1 for r in self._rooms.values() if r.status == RoomStatus.IN_PROGRESS),
            )

    def get_room(self, room_id: str) -> Optional[Room]:
        with self._lock:
            room = self._rooms.get(room_id)
            return copy.deepcopy(room) if room else None

    def get_membership(self, connection_id: str) -> Optional[Membership]:
        with self._lock:
            return self._members.get(connection_id)
