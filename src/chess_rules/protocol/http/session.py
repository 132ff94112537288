from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional

from ...engine.game import Game


@dataclass
class GameSession:
    """One game plus the lock that serializes every request against it."""

    game: Game
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class InMemorySessionStore:
    """Thread-safe in-memory game session store.

    The store lock guards the mapping only; callers take ``session.lock``
    around any read or mutation of the game itself.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._sessions: Dict[str, GameSession] = {}

    def create(self, game: Optional[Game] = None) -> str:
        """Create a new game session and return its ``game_id``."""
        gid = str(uuid.uuid4())
        session = GameSession(game if game is not None else Game.new())
        with self._lock:
            self._sessions[gid] = session
        return gid

    def get(self, game_id: str) -> Optional[GameSession]:
        with self._lock:
            return self._sessions.get(game_id)

    def delete(self, game_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(game_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
