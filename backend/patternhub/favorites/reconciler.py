"""
Favorites Reconciler

Keeps each session's favorite set consistent with a FavoritesProvider.

At most one mutation per (session, pattern id) is in flight: a second
toggle of the same id waits for the first and only then reads the state
it flips, so rapid double toggles always net out. Toggles of different ids
run concurrently. A failed mutation rolls the local view back to the last
confirmed state and raises FavoriteToggleError.
"""

import asyncio
from typing import Dict, FrozenSet, Tuple

from patternhub.catalog.records import PatternId
from patternhub.errors import FavoriteError, FavoriteToggleError, FavoriteTransportError, FavoriteValidationError
from patternhub.favorites.provider import FavoritesProvider


def _key(pattern_id: PatternId) -> str:
    return str(pattern_id)


class FavoritesReconciler:
    def __init__(self, provider: FavoritesProvider, optimistic: bool = True):
        self.provider = provider
        self.optimistic = optimistic

        # session -> {key: pattern id} as last confirmed by the provider
        self._confirmed: Dict[str, Dict[str, PatternId]] = {}
        # session -> {key: (pattern id, target state)} for in-flight toggles
        self._pending: Dict[str, Dict[str, Tuple[PatternId, bool]]] = {}

        self._locks: Dict[Tuple[str, str], asyncio.Lock] = {}
        self._waiters: Dict[Tuple[str, str], int] = {}

    async def load(self, session_id: str) -> FrozenSet[PatternId]:
        """Replace the confirmed set of a session with the provider's view"""
        if not session_id:
            raise FavoriteValidationError("userId is required")

        try:
            favorites = await self.provider.get_favorites(session_id)
        except FavoriteError:
            raise
        except Exception as e:
            raise FavoriteTransportError(f"Could not load favorites: {e}") from e

        fresh = {_key(f.pattern_id): f.pattern_id for f in favorites}
        previous = self._confirmed.get(session_id, {})
        # In-flight toggles settle their own keys once the provider answers
        for key in self._pending.get(session_id, {}):
            if key in previous:
                fresh[key] = previous[key]
            else:
                fresh.pop(key, None)

        self._confirmed[session_id] = fresh
        print(f"[FAVORITES] Loaded {len(favorites)} favorites for session {session_id}")
        return self.favorite_ids(session_id)

    def is_favorite(self, session_id: str, pattern_id: PatternId) -> bool:
        key = _key(pattern_id)
        if self.optimistic:
            pending = self._pending.get(session_id, {})
            if key in pending:
                return pending[key][1]
        return key in self._confirmed.get(session_id, {})

    def favorite_ids(self, session_id: str) -> FrozenSet[PatternId]:
        view = dict(self._confirmed.get(session_id, {}))
        if self.optimistic:
            for key, (pattern_id, target) in self._pending.get(session_id, {}).items():
                if target:
                    view[key] = pattern_id
                else:
                    view.pop(key, None)
        return frozenset(view.values())

    def pending(self, session_id: str) -> FrozenSet[PatternId]:
        return frozenset(pattern_id for pattern_id, _ in self._pending.get(session_id, {}).values())

    def forget(self, session_id: str) -> None:
        """Drop cached state of a session that has nothing in flight"""
        if not self._pending.get(session_id):
            self._confirmed.pop(session_id, None)
            self._pending.pop(session_id, None)

    async def toggle_favorite(self, session_id: str, pattern_id: PatternId) -> bool:
        """
        Flip the favorite state of a pattern and return the new state.

        Queued behind any in-flight toggle of the same pattern for the same
        session. A session that was never loaded is loaded first.
        """
        if not session_id:
            raise FavoriteValidationError("userId is required")
        if pattern_id is None or pattern_id == "":
            raise FavoriteValidationError("patternId is required")

        lock_key = (session_id, _key(pattern_id))
        lock = self._locks.setdefault(lock_key, asyncio.Lock())
        self._waiters[lock_key] = self._waiters.get(lock_key, 0) + 1
        try:
            async with lock:
                if session_id not in self._confirmed:
                    # Unseen sessions start from the provider's state
                    await self.load(session_id)
                return await self._apply_toggle(session_id, pattern_id)
        finally:
            self._waiters[lock_key] -= 1
            if self._waiters[lock_key] == 0:
                del self._waiters[lock_key]
                self._locks.pop(lock_key, None)

    async def _apply_toggle(self, session_id: str, pattern_id: PatternId) -> bool:
        key = _key(pattern_id)
        confirmed = self._confirmed.setdefault(session_id, {})
        target = key not in confirmed

        pending = self._pending.setdefault(session_id, {})
        pending[key] = (pattern_id, target)
        try:
            if target:
                await self.provider.add_favorite(pattern_id, session_id)
            else:
                await self.provider.remove_favorite(pattern_id, session_id)
        except Exception as e:
            # Rollback is dropping the optimistic entry; confirmed state never changed
            print(f"[FAVORITES] Toggle of {pattern_id} for session {session_id} failed: {e}")
            raise FavoriteToggleError(pattern_id, e) from e
        finally:
            pending.pop(key, None)
            if not pending and self._pending.get(session_id) is pending:
                del self._pending[session_id]

        # load() may have replaced the session dict while the request was in flight
        confirmed = self._confirmed.setdefault(session_id, {})
        if target:
            confirmed[key] = pattern_id
        else:
            confirmed.pop(key, None)
        return target
