from __future__ import annotations

import threading
import uuid
from typing import Dict, Optional

from ...engine.game import GameState


class InMemorySessionStore:
    """Lock-protected in-memory map of ``game_id`` to ``GameState``.

    Each game is single-writer: the lock also serializes requests that
    touch the same game, so one move is in flight at a time.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._games: Dict[str, GameState] = {}

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def create(self, game: Optional[GameState] = None) -> str:
        """Create a new game session and return its `game_id`."""
        gid = str(uuid.uuid4())
        if game is None:
            game = GameState.new()
        with self._lock:
            self._games[gid] = game
        return gid

    def get(self, game_id: str) -> Optional[GameState]:
        with self._lock:
            return self._games.get(game_id)

    def set(self, game_id: str, game: GameState) -> None:
        with self._lock:
            if game_id not in self._games:
                raise KeyError(game_id)
            self._games[game_id] = game

    def delete(self, game_id: str) -> bool:
        with self._lock:
            return self._games.pop(game_id, None) is not None
