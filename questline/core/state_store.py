"""Persistence collaborator interface for game state snapshots.

The engine never performs I/O itself; the scheduler and host application
load and save snapshots through a ``StateStore``.
"""

import copy
from typing import Protocol

from questline.domain.state import GameState


class StateStore(Protocol):
    """Load/save contract for per-user game state."""

    async def list_user_ids(self) -> list[str]:
        """Return every user with stored state."""
        ...

    async def load(self, user_id: str) -> GameState:
        """Load a user's latest snapshot.

        Raises:
            KeyError: If the user has no stored state
        """
        ...

    async def save(self, user_id: str, state: GameState) -> None:
        """Replace a user's stored snapshot."""
        ...


class InMemoryStateStore:
    """Dictionary-backed store, used by default and in tests."""

    def __init__(self) -> None:
        self._states: dict[str, GameState] = {}

    async def list_user_ids(self) -> list[str]:
        return list(self._states)

    async def load(self, user_id: str) -> GameState:
        if user_id not in self._states:
            msg = f"No state stored for user {user_id}"
            raise KeyError(msg)
        return copy.deepcopy(self._states[user_id])

    async def save(self, user_id: str, state: GameState) -> None:
        self._states[user_id] = copy.deepcopy(state)
