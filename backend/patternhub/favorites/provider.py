"""
Favorites persistence providers

A provider is the external collaborator the reconciler talks to. Both
implementations expose the same async interface; blocking work (SQLAlchemy,
requests) runs in a worker thread.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

import requests

from patternhub.api.serializers import favorite_to_record
from patternhub.catalog.records import Favorite, PatternId
from patternhub.config import PATTERNHUB_API_URL
from patternhub.errors import (
    FavoriteTransportError,
    FavoriteValidationError,
    TransportError,
    ValidationError,
)


def _require(pattern_id: Optional[PatternId], session_id: Optional[str], need_pattern: bool = True) -> None:
    if not session_id:
        raise FavoriteValidationError("userId is required")
    if need_pattern and (pattern_id is None or pattern_id == ""):
        raise FavoriteValidationError("patternId and userId are required")


class FavoritesProvider(ABC):
    @abstractmethod
    async def get_favorites(self, session_id: str) -> List[Favorite]:
        """All favorites stored for a session"""

    @abstractmethod
    async def add_favorite(self, pattern_id: PatternId, session_id: str) -> Favorite:
        """Store a favorite and return it"""

    @abstractmethod
    async def remove_favorite(self, pattern_id: PatternId, session_id: str) -> None:
        """Delete a favorite; deleting a missing favorite succeeds"""


class DatabaseFavoritesProvider(FavoritesProvider):
    """Provider backed directly by the relational store"""

    def __init__(self, session_factory: Optional[Callable] = None):
        if session_factory is None:
            from patternhub.db.session import SessionLocal
            session_factory = SessionLocal
        self.session_factory = session_factory

    def _run(self, operation):
        from patternhub.db.storage import DatabaseStorage

        session = self.session_factory()
        try:
            return operation(DatabaseStorage(session))
        except ValidationError as e:
            raise FavoriteValidationError(str(e)) from e
        except TransportError as e:
            raise FavoriteTransportError(str(e)) from e
        finally:
            session.close()

    async def get_favorites(self, session_id: str) -> List[Favorite]:
        _require(None, session_id, need_pattern=False)

        def operation(storage):
            return [favorite_to_record(row) for row in storage.get_favorites(session_id)]

        return await asyncio.to_thread(self._run, operation)

    async def add_favorite(self, pattern_id: PatternId, session_id: str) -> Favorite:
        _require(pattern_id, session_id)

        def operation(storage):
            return favorite_to_record(storage.add_favorite(int(pattern_id), session_id))

        return await asyncio.to_thread(self._run, operation)

    async def remove_favorite(self, pattern_id: PatternId, session_id: str) -> None:
        _require(pattern_id, session_id)

        def operation(storage):
            storage.remove_favorite(int(pattern_id), session_id)

        await asyncio.to_thread(self._run, operation)


class HttpFavoritesProvider(FavoritesProvider):
    """Provider that talks to the PatternHub REST API"""

    def __init__(
        self,
        base_url: str = PATTERNHUB_API_URL,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs):
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise FavoriteTransportError(f"{method} {url} failed: {e}") from e

        if response.status_code == 400:
            raise FavoriteValidationError(_message(response))
        return response

    def _ok(self, response):
        try:
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            raise FavoriteTransportError(f"Unexpected favorites response: {e}") from e

    async def get_favorites(self, session_id: str) -> List[Favorite]:
        _require(None, session_id, need_pattern=False)

        def call():
            response = self._request("GET", "/api/favorites", params={"userId": session_id})
            return [Favorite.from_dict(item) for item in self._ok(response)]

        return await asyncio.to_thread(call)

    async def add_favorite(self, pattern_id: PatternId, session_id: str) -> Favorite:
        _require(pattern_id, session_id)

        def call():
            response = self._request(
                "POST",
                "/api/favorites",
                json={"patternId": pattern_id, "userId": session_id},
            )
            return Favorite.from_dict(self._ok(response))

        return await asyncio.to_thread(call)

    async def remove_favorite(self, pattern_id: PatternId, session_id: str) -> None:
        _require(pattern_id, session_id)

        def call():
            response = self._request(
                "DELETE",
                f"/api/favorites/{pattern_id}",
                json={"userId": session_id},
            )
            if response.status_code == 404:
                return
            self._ok(response)

        await asyncio.to_thread(call)


def _message(response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or "Invalid favorites request"
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)
