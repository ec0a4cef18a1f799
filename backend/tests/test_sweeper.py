from datetime import datetime, timedelta, timezone

from battleships.services.rooms import SessionStore
from battleships.services.rooms import sweeper


def test_sweeper_disabled_in_tests(flask_app, store):
    assert sweeper.start_sweeper(flask_app, store) is False


def test_sweeper_starts_once_per_store(flask_app, monkeypatch):
    started = []
    monkeypatch.setattr(sweeper.socketio, 'start_background_task', lambda fn, *args: started.append(args))
    monkeypatch.setitem(flask_app.config, 'ENABLE_SWEEPER_IN_TESTS', True)
    store = SessionStore()

    assert sweeper.start_sweeper(flask_app, store) is True
    assert sweeper.start_sweeper(flask_app, store) is False
    assert started == [(store, flask_app.config['ROOM_SWEEP_INTERVAL_SEC'])]


def test_run_sweep_removes_stale_rooms():
    created_at = datetime(2026, 1, 1, tzinfo=timezone.utc)
    now = created_at
    store = SessionStore(clock=lambda: now, max_age=timedelta(minutes=10))
    room_id = store.create_room('sid', 'Alice').value.room_id
    store._rooms[room_id].players.clear()
    store._members.clear()

    now = created_at + timedelta(minutes=11)
    assert sweeper.run_sweep(store) == 1
    assert store.stats().room_count == 0


def test_run_sweep_survives_failure(monkeypatch):
    store = SessionStore()

    def boom(*args, **kwargs):
        raise RuntimeError('sweep failed')

    monkeypatch.setattr(store, 'sweep_stale_rooms', boom)
    assert sweeper.run_sweep(store) == 0
