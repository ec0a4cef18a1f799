from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class RoomError(str, Enum):
    ROOM_NOT_FOUND = 'room_not_found'
    ROOM_FULL = 'room_full'
    GAME_IN_PROGRESS = 'game_in_progress'
    NAME_TAKEN = 'name_taken'
    NOT_ENOUGH_PLAYERS = 'not_enough_players'
    NOT_HOST = 'not_host'
    ALREADY_IN_ROOM = 'already_in_room'
    INTERNAL_ERROR = 'internal_error'

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    RoomError.ROOM_NOT_FOUND: 'Room not found. Please check the room ID.',
    RoomError.ROOM_FULL: 'Room is full. Maximum 2 players allowed.',
    RoomError.GAME_IN_PROGRESS: 'Game already in progress.',
    RoomError.NAME_TAKEN: 'A player with that name is already in the room.',
    RoomError.NOT_ENOUGH_PLAYERS: 'Need 2 players to start game.',
    RoomError.NOT_HOST: 'Only the host can start the game.',
    RoomError.ALREADY_IN_ROOM: 'You are already in this room.',
    RoomError.INTERNAL_ERROR: 'Something went wrong. Please try again.',
}


@dataclass(frozen=True)
class Result:
    """Outcome of a store operation: a value on success, otherwise one error."""
    value: Any = None
    error: Optional[RoomError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any) -> 'Result':
        return cls(value=value)

    @classmethod
    def failure(cls, error: RoomError) -> 'Result':
        return cls(error=error)
