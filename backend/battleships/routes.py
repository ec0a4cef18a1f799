import time

from flask import Blueprint, jsonify

from battleships import get_store

main = Blueprint('main', __name__)

_started_at = time.monotonic()


@main.route('/')
def index():
    return "Battleships Server is running! Room-based multiplayer ready."


@main.route('/api/status')
def status():
    stats = get_store().stats()
    return jsonify({
        'status': 'online',
        'rooms': stats.room_count,
        'players': stats.player_count,
        'activeGames': stats.active_game_count,
        'uptime': time.monotonic() - _started_at,
    })


@main.route('/api/rooms')
def rooms():
    stats = get_store().stats()
    return jsonify({
        'totalRooms': stats.room_count,
        'activeGames': stats.active_game_count,
        'waitingRooms': stats.waiting_room_count,
    })
