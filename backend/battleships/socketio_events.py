import logging
from typing import Any, Dict, Optional

from flask import request
from flask_socketio import emit, join_room, leave_room

from battleships import get_store, socketio
from battleships.services.rooms import Departure, RoomError

logger = logging.getLogger(__name__)

ROOM_READY_MESSAGE = 'Room is full! Game can start.'
GAME_STARTED_MESSAGE = 'Game started! Place your ships.'


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _payload(data) -> Dict[str, Any]:
    return data if isinstance(data, dict) else {}


def _error_payload(error: RoomError) -> Dict[str, str]:
    return {'code': error.value, 'message': error.message}


def _room_id(data: Dict[str, Any]) -> Optional[str]:
    room_id = data.get('roomId')
    if not isinstance(room_id, str) or not room_id.strip():
        return None
    return room_id.strip().upper()


def _player_name(data: Dict[str, Any]) -> Optional[str]:
    name = data.get('playerName')
    if not isinstance(name, str) or not name.strip():
        return None
    # Kept exactly as sent; names are compared verbatim within a room
    return name


def _announce_departure(departure: Optional[Departure]) -> None:
    """Tell whoever is left in the room that a player is gone."""
    if departure is None or departure.room is None:
        return
    socketio.emit('player-left', {
        'playerName': departure.player_name,
        'playersCount': departure.remaining_count,
        'room': departure.room.to_dict(),
    }, to=departure.room_id)


def _leave_previous(departure: Optional[Departure]) -> None:
    if departure is None:
        return
    leave_room(departure.room_id)
    _announce_departure(departure)


def handle_connect():
    logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    sid = _get_sid()
    logger.info(f"[disconnect] sid={sid} reason={reason}")
    # The connection is gone: notify the room, never the caller
    _announce_departure(get_store().remove_member(sid))


def handle_create_room(data):
    data = _payload(data)
    player_name = _player_name(data)
    if not player_name:
        emit('room-creation-error', {'code': 'invalid_request', 'message': 'playerName is required'})
        return

    result = get_store().create_room(_get_sid(), player_name, data.get('playerId'))
    if not result.ok:
        emit('room-creation-error', _error_payload(result.error))
        return

    created = result.value
    _leave_previous(created.departed)
    join_room(created.room_id)
    emit('room-created', {'roomId': created.room_id, 'room': created.room.to_dict()})


def handle_join_room(data):
    data = _payload(data)
    room_id = _room_id(data)
    player_name = _player_name(data)
    if not room_id or not player_name:
        emit('join-room-error', {'code': 'invalid_request', 'message': 'roomId and playerName are required'})
        return

    result = get_store().join_room(_get_sid(), room_id, player_name, data.get('playerId'))
    if not result.ok:
        emit('join-room-error', _error_payload(result.error))
        return

    joined = result.value
    room = joined.room.to_dict()
    _leave_previous(joined.departed)
    join_room(room_id)
    emit('room-joined', {'roomId': room_id, 'room': room, 'message': joined.message})
    emit('player-joined', {
        'playerName': player_name,
        'playersCount': len(joined.room.players),
        'room': room,
    }, to=room_id, include_self=False)
    if joined.room_full:
        emit('room-ready', {'room': room, 'message': ROOM_READY_MESSAGE}, to=room_id)


def handle_start_game(data):
    room_id = _room_id(_payload(data))
    if not room_id:
        emit('error', {'code': 'invalid_request', 'message': 'roomId is required'})
        return

    result = get_store().start_game(_get_sid(), room_id)
    if not result.ok:
        emit('error', _error_payload(result.error))
        return

    emit('game-started', {'room': result.value.to_dict(), 'message': GAME_STARTED_MESSAGE}, to=room_id)


def handle_player_ready(data):
    ready = _payload(data).get('ready')
    if not isinstance(ready, bool):
        emit('error', {'code': 'invalid_request', 'message': 'ready must be true or false'})
        return
    update = get_store().set_ready(_get_sid(), ready)
    if update is None:
        return
    emit('player-status-updated', {
        'playerName': update.player_name,
        'ready': update.ready,
        'room': update.room.to_dict(),
    }, to=update.room_id)


def handle_leave_room(data=None):
    departure = get_store().remove_member(_get_sid())
    if departure is None:
        return
    leave_room(departure.room_id)
    emit('left-room')
    _announce_departure(departure)


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on the default namespace."""
    socketio.on_event('connect', handle_connect)
    socketio.on_event('disconnect', handle_disconnect)
    socketio.on_event('create-room', handle_create_room)
    socketio.on_event('join-room', handle_join_room)
    socketio.on_event('start-game', handle_start_game)
    socketio.on_event('player-ready', handle_player_ready)
    socketio.on_event('leave-room', handle_leave_room)
