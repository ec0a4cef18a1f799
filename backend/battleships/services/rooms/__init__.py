"""Room services: in-memory room/session store and its maintenance sweep.

Nothing in this package performs I/O; Socket.IO handlers and HTTP routes
call into the store and decide what to emit from the results.
"""

from .errors import Result, RoomError
from .models import GamePhase, GameState, Membership, Player, Room, RoomStatus
from .store import Departure, ReadyUpdate, RoomCreated, RoomJoined, SessionStore, StoreStats

__all__ = [
    'Departure',
    'GamePhase',
    'GameState',
    'Membership',
    'Player',
    'ReadyUpdate',
    'Result',
    'Room',
    'RoomCreated',
    'RoomError',
    'RoomJoined',
    'RoomStatus',
    'SessionStore',
    'StoreStats',
]
