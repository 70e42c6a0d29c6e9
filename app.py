from __future__ import annotations

import logging
import os
import random
import threading
import uuid
from collections import OrderedDict
from typing import Any, Callable, Dict, List, Optional, Tuple

from flask import Flask, jsonify, request

from game import GameConfig, GameManager, RecordingActuator, SqliteStorage, position_from_payload, to_direction

logger = logging.getLogger(__name__)

CONFIG = GameConfig.from_env()

app = Flask(__name__)

# Sessions live in this process; their saved games live in SQLite so a client
# can resume by id after a server restart or an eviction. The registry keeps at
# most CONFIG.session_limit sessions, least recently used first out. The lock
# keeps intents for the registry strictly one at a time.
_SESSIONS: OrderedDict[str, GameManager] = OrderedDict()
_SESSIONS_LOCK = threading.Lock()


def _new_manager(session_id: str, seed: Optional[int] = None) -> GameManager:
    storage = SqliteStorage(CONFIG.db_path, namespace=session_id)
    return GameManager.from_config(CONFIG, actuator=RecordingActuator(), storage=storage, rng=random.Random(seed))


def _register(session_id: str, manager: GameManager) -> None:
    _SESSIONS[session_id] = manager
    _SESSIONS.move_to_end(session_id)
    while len(_SESSIONS) > CONFIG.session_limit:
        evicted, _ = _SESSIONS.popitem(last=False)
        logger.info("Session %s evicted from memory", evicted)


def state_to_json(manager: GameManager) -> Dict[str, Any]:
    meta = manager.metadata()
    return {
        "grid": manager.grid.snapshot(),
        "score": meta["score"],
        "over": meta["over"],
        "won": meta["won"],
        "keepPlaying": manager.kept_playing,
        "bestScore": meta["bestScore"],
        "terminated": meta["terminated"],
        "setupMode": manager.setup_mode,
        "canUndo": manager.can_undo,
        "canResetSetup": manager.can_reset_setup,
    }


def _response(session_id: str, manager: GameManager, changed: Any) -> Any:
    actuator = manager.actuator
    events: List[str] = []
    if isinstance(actuator, RecordingActuator):
        events = list(actuator.events)
        actuator.events.clear()
    return jsonify({
        "ok": True,
        "sessionId": session_id,
        "state": state_to_json(manager),
        "changed": bool(changed),
        "events": [e for e in events if e != "actuate"],
    })


def _lookup(body: Dict[str, Any]) -> Tuple[Optional[str], Optional[GameManager]]:
    session_id = body.get("sessionId")
    if not isinstance(session_id, str) or not session_id:
        return None, None
    manager = _SESSIONS.get(session_id)
    if manager is not None:
        _SESSIONS.move_to_end(session_id)
    return session_id, manager


def _run_intent(action: Callable[[GameManager, Dict[str, Any]], Any]) -> Any:
    body = request.get_json(force=True, silent=True) or {}
    with _SESSIONS_LOCK:
        session_id, manager = _lookup(body)
        if manager is None or session_id is None:
            return jsonify({"ok": False, "error": "unknown session"}), 404
        try:
            changed = action(manager, body)
        except ValueError as e:
            return jsonify({"ok": False, "error": str(e)}), 400
        return _response(session_id, manager, changed)


# ---------- Session API ----------

@app.post("/api/new")
def api_new() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    seed = body.get("seed", None)
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        return jsonify({"ok": False, "error": "seed must be an integer"}), 400
    session_id = body.get("sessionId")
    if session_id is not None and (not isinstance(session_id, str) or not session_id):
        return jsonify({"ok": False, "error": "sessionId must be a non-empty string"}), 400
    with _SESSIONS_LOCK:
        if session_id and session_id in _SESSIONS:
            manager = _SESSIONS[session_id]
            _SESSIONS.move_to_end(session_id)
        else:
            # A known id resumes its saved game from storage; otherwise start fresh
            session_id = session_id or uuid.uuid4().hex
            manager = _new_manager(session_id, seed)
            _register(session_id, manager)
            logger.info("Session %s started", session_id)
        return _response(session_id, manager, True)


@app.post("/api/state")
def api_state() -> Any:
    return _run_intent(lambda m, body: False)


@app.post("/api/move")
def api_move() -> Any:
    return _run_intent(lambda m, body: m.move(to_direction(body.get("direction"))))


@app.post("/api/undo")
def api_undo() -> Any:
    return _run_intent(lambda m, body: m.undo())


def _restart(m: GameManager, body: Dict[str, Any]) -> bool:
    m.restart()
    return True


@app.post("/api/restart")
def api_restart() -> Any:
    return _run_intent(_restart)


@app.post("/api/keep_playing")
def api_keep_playing() -> Any:
    return _run_intent(lambda m, body: m.keep_playing())


# ---------- Setup (board authoring) API ----------

@app.post("/api/setup/enter")
def api_setup_enter() -> Any:
    return _run_intent(lambda m, body: m.enter_setup())


@app.post("/api/setup/exit")
def api_setup_exit() -> Any:
    return _run_intent(lambda m, body: m.exit_setup())


@app.post("/api/setup/reset")
def api_setup_reset() -> Any:
    return _run_intent(lambda m, body: m.reset_to_setup())


@app.post("/api/setup/clear")
def api_setup_clear() -> Any:
    return _run_intent(lambda m, body: m.clear_board())


@app.post("/api/setup/cycle")
def api_setup_cycle() -> Any:
    return _run_intent(lambda m, body: m.cycle_tile(position_from_payload(body)))


# Entrypoint for "python app.py"
if __name__ == "__main__":
    debug = CONFIG.debug or os.getenv("FLASK_DEBUG", "0").lower() in ("1", "true", "yes", "on")
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO)
    port = int(os.getenv("PORT", "5000"))
    app.run(host="0.0.0.0", port=port, debug=debug)
