"""Transient per-entity XP popups for UI feedback. Never persisted."""

import time
from collections.abc import Callable

from questline.core.config import settings


class XPFeedback:
    """Holds popup values that expire a fixed time after they were pushed."""

    def __init__(self, ttl_seconds: float | None = None, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = settings.xp_popup_ttl_seconds if ttl_seconds is None else ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[int, float]] = {}

    def push(self, popups: dict[str, int]) -> None:
        """Show popups; pushing an existing key replaces it and restarts its expiry."""
        expires_at = self._clock() + self._ttl
        for key, amount in popups.items():
            self._entries[key] = (amount, expires_at)

    def active(self) -> dict[str, int]:
        """Current popups, dropping expired ones."""
        now = self._clock()
        self._entries = {key: entry for key, entry in self._entries.items() if entry[1] > now}
        return {key: amount for key, (amount, _expires) in self._entries.items()}

    def clear(self) -> None:
        self._entries.clear()
