from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RoomStatus(str, Enum):
    WAITING = 'waiting'
    READY_TO_START = 'ready_to_start'
    IN_PROGRESS = 'in_progress'


class GamePhase(str, Enum):
    SHIP_PLACEMENT = 'ship_placement'


@dataclass
class Player:
    id: str
    name: str
    connection_id: str
    ready: bool = False
    is_host: bool = False

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'socketId': self.connection_id,
            'ready': self.ready,
            'isHost': self.is_host,
        }


@dataclass
class GameState:
    current_turn_player_id: str
    phase: GamePhase = GamePhase.SHIP_PLACEMENT
    started_at: datetime = field(default_factory=utcnow)

    def to_dict(self):
        return {
            'currentTurn': self.current_turn_player_id,
            'phase': self.phase.value,
            'startedAt': self.started_at.isoformat(),
        }


@dataclass
class Room:
    id: str
    players: List[Player] = field(default_factory=list)
    status: RoomStatus = RoomStatus.WAITING
    created_at: datetime = field(default_factory=utcnow)
    game_state: Optional[GameState] = None

    @property
    def host(self) -> Optional[Player]:
        return next((p for p in self.players if p.is_host), None)

    def find_player(self, connection_id: str) -> Optional[Player]:
        return next((p for p in self.players if p.connection_id == connection_id), None)

    def has_name(self, name: str) -> bool:
        return any(p.name == name for p in self.players)

    def to_dict(self):
        return {
            'id': self.id,
            'players': [p.to_dict() for p in self.players],
            'status': self.status.value,
            'createdAt': self.created_at.isoformat(),
            'gameState': self.game_state.to_dict() if self.game_state else None,
        }


@dataclass(frozen=True)
class Membership:
    """Reverse lookup entry: which room and player a connection represents."""
    room_id: str
    player_name: str
