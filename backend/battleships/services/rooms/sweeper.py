import logging
import weakref

from battleships import socketio
from .store import SessionStore

logger = logging.getLogger(__name__)

_running: "weakref.WeakSet[SessionStore]" = weakref.WeakSet()


def start_sweeper(app, store: SessionStore) -> bool:
    """Start the periodic stale-room sweep for ``store`` as a background task.

    - No-ops in TESTING mode
    - Ensures a single sweeper per store
    Returns True when a task was started.
    """
    if app.config.get('TESTING') and not app.config.get('ENABLE_SWEEPER_IN_TESTS'):
        return False
    if store in _running:
        return False
    _running.add(store)

    interval = int(app.config.get('ROOM_SWEEP_INTERVAL_SEC', 300))
    logger.info(f"[sweep-start] interval={interval}s max_age={store.max_age}")
    socketio.start_background_task(_worker, store, interval)
    return True


def _worker(store: SessionStore, interval: int) -> None:
    while True:
        socketio.sleep(interval)
        run_sweep(store)


def run_sweep(store: SessionStore) -> int:
    """Run one sweep pass; a failing pass is logged and the loop keeps going."""
    try:
        return store.sweep_stale_rooms()
    except Exception:
        logger.exception("[sweep-error] sweep pass failed")
        return 0
