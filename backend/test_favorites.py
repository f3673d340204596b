"""
Favorites reconciler and provider tests
Run with: pytest backend/test_favorites.py
"""

import asyncio

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from patternhub.catalog.records import Favorite
from patternhub.catalog.seed_data import PATTERN_CATALOG
from patternhub.db.models import Base
from patternhub.db.storage import DatabaseStorage
from patternhub.errors import (
    FavoriteToggleError,
    FavoriteTransportError,
    FavoriteValidationError,
)
from patternhub.favorites import (
    DatabaseFavoritesProvider,
    FavoritesProvider,
    FavoritesReconciler,
    HttpFavoritesProvider,
)


class FakeProvider(FavoritesProvider):
    """In-memory provider; set `gate` to hold mutations in flight"""

    def __init__(self, server=None):
        self.server = server or {}
        self.calls = []
        self.gate = None
        self.fail_with = None

    async def get_favorites(self, session_id):
        return [
            Favorite(id=i, pattern_id=pid, session_id=session_id)
            for i, pid in enumerate(sorted(self.server.get(session_id, set())))
        ]

    async def _mutate(self, action, pattern_id, session_id):
        self.calls.append((action, pattern_id))
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            raise self.fail_with
        favorites = self.server.setdefault(session_id, set())
        if action == "add":
            favorites.add(pattern_id)
        else:
            favorites.discard(pattern_id)

    async def add_favorite(self, pattern_id, session_id):
        await self._mutate("add", pattern_id, session_id)
        return Favorite(id=len(self.calls), pattern_id=pattern_id, session_id=session_id)

    async def remove_favorite(self, pattern_id, session_id):
        await self._mutate("remove", pattern_id, session_id)


async def settle():
    for _ in range(5):
        await asyncio.sleep(0)


# ============================================================
# RECONCILER
# ============================================================

@pytest.mark.asyncio
async def test_load_populates_confirmed_set():
    reconciler = FavoritesReconciler(FakeProvider({"s1": {1, 3}}))

    assert await reconciler.load("s1") == frozenset({1, 3})
    assert reconciler.is_favorite("s1", 1)
    assert reconciler.is_favorite("s1", "3")
    assert not reconciler.is_favorite("s1", 2)
    assert not reconciler.is_favorite("other", 1)


@pytest.mark.asyncio
async def test_toggle_adds_then_removes():
    provider = FakeProvider()
    reconciler = FavoritesReconciler(provider)

    assert await reconciler.toggle_favorite("s1", 2) is True
    assert provider.server["s1"] == {2}
    assert await reconciler.toggle_favorite("s1", 2) is False
    assert provider.server["s1"] == set()
    assert provider.calls == [("add", 2), ("remove", 2)]


@pytest.mark.asyncio
async def test_double_toggle_in_flight_nets_out_to_not_favorited():
    provider = FakeProvider()
    provider.gate = asyncio.Event()
    reconciler = FavoritesReconciler(provider)

    first = asyncio.create_task(reconciler.toggle_favorite("s1", 2))
    await settle()
    assert reconciler.is_favorite("s1", 2)  # optimistic

    second = asyncio.create_task(reconciler.toggle_favorite("s1", 2))
    await settle()
    # The second toggle is queued, not dispatched
    assert provider.calls == [("add", 2)]

    provider.gate.set()
    assert await first is True
    assert await second is False

    assert provider.calls == [("add", 2), ("remove", 2)]
    assert provider.server["s1"] == set()
    assert not reconciler.is_favorite("s1", 2)
    assert reconciler.pending("s1") == frozenset()
    assert reconciler._locks == {}


@pytest.mark.asyncio
async def test_toggles_of_different_ids_run_concurrently():
    provider = FakeProvider()
    provider.gate = asyncio.Event()
    reconciler = FavoritesReconciler(provider)

    tasks = [asyncio.create_task(reconciler.toggle_favorite("s1", pid)) for pid in (1, 2)]
    await settle()
    assert sorted(provider.calls) == [("add", 1), ("add", 2)]
    assert reconciler.pending("s1") == frozenset({1, 2})

    provider.gate.set()
    assert await asyncio.gather(*tasks) == [True, True]
    assert reconciler.favorite_ids("s1") == frozenset({1, 2})


@pytest.mark.asyncio
async def test_sessions_are_independent():
    provider = FakeProvider()
    reconciler = FavoritesReconciler(provider)

    await reconciler.toggle_favorite("alice", 5)

    assert reconciler.is_favorite("alice", 5)
    assert not reconciler.is_favorite("bob", 5)
    assert provider.server == {"alice": {5}}


@pytest.mark.asyncio
async def test_failed_toggle_rolls_back_and_raises_recoverable_error():
    provider = FakeProvider({"s1": {1}})
    reconciler = FavoritesReconciler(provider)
    await reconciler.load("s1")

    provider.fail_with = FavoriteTransportError("network down")
    with pytest.raises(FavoriteToggleError) as excinfo:
        await reconciler.toggle_favorite("s1", 2)

    assert isinstance(excinfo.value.cause, FavoriteTransportError)
    assert excinfo.value.pattern_id == 2
    assert reconciler.favorite_ids("s1") == frozenset({1})
    assert reconciler.pending("s1") == frozenset()

    # The reconciler keeps working after a failure
    provider.fail_with = None
    assert await reconciler.toggle_favorite("s1", 2) is True
    assert reconciler.favorite_ids("s1") == frozenset({1, 2})


@pytest.mark.asyncio
async def test_failed_removal_restores_favorite():
    provider = FakeProvider({"s1": {4}})
    reconciler = FavoritesReconciler(provider)
    await reconciler.load("s1")
    provider.gate = asyncio.Event()
    provider.fail_with = RuntimeError("boom")

    task = asyncio.create_task(reconciler.toggle_favorite("s1", 4))
    await settle()
    assert not reconciler.is_favorite("s1", 4)  # optimistic removal

    provider.gate.set()
    with pytest.raises(FavoriteToggleError):
        await task
    assert reconciler.is_favorite("s1", 4)


@pytest.mark.asyncio
async def test_non_optimistic_view_reports_confirmed_state():
    provider = FakeProvider()
    provider.gate = asyncio.Event()
    reconciler = FavoritesReconciler(provider, optimistic=False)

    task = asyncio.create_task(reconciler.toggle_favorite("s1", 7))
    await settle()
    assert not reconciler.is_favorite("s1", 7)
    assert reconciler.pending("s1") == frozenset({7})

    provider.gate.set()
    await task
    assert reconciler.is_favorite("s1", 7)


@pytest.mark.asyncio
async def test_toggle_requires_identifiers():
    reconciler = FavoritesReconciler(FakeProvider())

    with pytest.raises(FavoriteValidationError):
        await reconciler.toggle_favorite("", 1)
    with pytest.raises(FavoriteValidationError):
        await reconciler.toggle_favorite("s1", None)


@pytest.mark.asyncio
async def test_load_wraps_unexpected_provider_errors():
    provider = FakeProvider()

    async def broken(session_id):
        raise ConnectionError("refused")

    provider.get_favorites = broken
    reconciler = FavoritesReconciler(provider)

    with pytest.raises(FavoriteTransportError):
        await reconciler.load("s1")


@pytest.mark.asyncio
async def test_load_during_in_flight_toggle_keeps_its_result():
    provider = FakeProvider()
    provider.gate = asyncio.Event()
    reconciler = FavoritesReconciler(provider)

    task = asyncio.create_task(reconciler.toggle_favorite("s1", 2))
    await settle()

    # The server has not applied the add yet, so the reload does not include it
    assert await reconciler.load("s1") == frozenset({2})
    assert reconciler.pending("s1") == frozenset({2})

    provider.gate.set()
    assert await task is True
    assert provider.server["s1"] == {2}
    assert reconciler.is_favorite("s1", 2)
    assert reconciler.favorite_ids("s1") == frozenset({2})


@pytest.mark.asyncio
async def test_load_during_in_flight_removal_keeps_previous_state_until_settled():
    provider = FakeProvider({"s1": {3}})
    reconciler = FavoritesReconciler(provider)
    await reconciler.load("s1")
    provider.gate = asyncio.Event()
    provider.fail_with = FavoriteTransportError("network down")

    task = asyncio.create_task(reconciler.toggle_favorite("s1", 3))
    await settle()
    await reconciler.load("s1")

    provider.gate.set()
    with pytest.raises(FavoriteToggleError):
        await task
    assert reconciler.is_favorite("s1", 3)


@pytest.mark.asyncio
async def test_first_toggle_of_unloaded_session_reads_provider_state():
    provider = FakeProvider({"s1": {2}})
    reconciler = FavoritesReconciler(provider)

    assert await reconciler.toggle_favorite("s1", 2) is False

    assert provider.calls == [("remove", 2)]
    assert provider.server["s1"] == set()
    assert not reconciler.is_favorite("s1", 2)


@pytest.mark.asyncio
async def test_forget_drops_session_state():
    reconciler = FavoritesReconciler(FakeProvider({"s1": {1}}))
    await reconciler.load("s1")

    reconciler.forget("s1")
    assert reconciler.favorite_ids("s1") == frozenset()


# ============================================================
# DATABASE PROVIDER
# ============================================================

@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    session = factory()
    storage = DatabaseStorage(session)
    for pattern in PATTERN_CATALOG[:3]:
        storage.create_pattern(pattern)
    session.close()

    yield factory
    engine.dispose()


@pytest.mark.asyncio
async def test_database_provider_round_trip(session_factory):
    provider = DatabaseFavoritesProvider(session_factory)

    favorite = await provider.add_favorite(1, "s1")
    assert favorite.pattern_id == 1
    assert favorite.session_id == "s1"

    again = await provider.add_favorite(1, "s1")
    assert again.id == favorite.id

    assert [f.pattern_id for f in await provider.get_favorites("s1")] == [1]

    await provider.remove_favorite(1, "s1")
    await provider.remove_favorite(1, "s1")  # missing favorite is a no-op
    assert await provider.get_favorites("s1") == []


@pytest.mark.asyncio
async def test_database_provider_validates_identifiers(session_factory):
    provider = DatabaseFavoritesProvider(session_factory)

    with pytest.raises(FavoriteValidationError):
        await provider.add_favorite(1, "")
    with pytest.raises(FavoriteValidationError):
        await provider.get_favorites("")


@pytest.mark.asyncio
async def test_reconciler_against_database(session_factory):
    provider = DatabaseFavoritesProvider(session_factory)
    reconciler = FavoritesReconciler(provider)

    results = await asyncio.gather(
        reconciler.toggle_favorite("s1", 2),
        reconciler.toggle_favorite("s1", 2),
    )
    assert results == [True, False]

    assert await reconciler.toggle_favorite("s1", 3) is True
    assert [f.pattern_id for f in await provider.get_favorites("s1")] == [3]
    assert reconciler.favorite_ids("s1") == frozenset({3})


# ============================================================
# HTTP PROVIDER
# ============================================================

class FakeResponse:
    def __init__(self, status_code, body=None):
        self.status_code = status_code
        self._body = body
        self.text = "" if body is None else str(body)

    def json(self):
        if self._body is None:
            raise ValueError("no body")
        return self._body

    def raise_for_status(self):
        import requests

        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []

    def request(self, method, url, timeout=None, **kwargs):
        self.requests.append((method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.mark.asyncio
async def test_http_provider_calls_rest_api():
    session = FakeSession([
        FakeResponse(200, {"id": 10, "patternId": 2, "userId": "s1", "createdAt": "2024-01-01T00:00:00"}),
        FakeResponse(200, [{"id": 10, "patternId": 2, "userId": "s1", "createdAt": None}]),
        FakeResponse(200, {"success": True}),
    ])
    provider = HttpFavoritesProvider("http://api.test/", session=session)

    favorite = await provider.add_favorite(2, "s1")
    favorites = await provider.get_favorites("s1")
    await provider.remove_favorite(2, "s1")

    assert favorite.pattern_id == 2
    assert [f.pattern_id for f in favorites] == [2]
    assert session.requests == [
        ("POST", "http://api.test/api/favorites", {"json": {"patternId": 2, "userId": "s1"}}),
        ("GET", "http://api.test/api/favorites", {"params": {"userId": "s1"}}),
        ("DELETE", "http://api.test/api/favorites/2", {"json": {"userId": "s1"}}),
    ]


@pytest.mark.asyncio
async def test_http_provider_maps_failures():
    import requests

    session = FakeSession([
        FakeResponse(400, {"message": "patternId and userId are required"}),
        FakeResponse(500, {"message": "Failed"}),
        requests.ConnectionError("refused"),
        FakeResponse(404, {"message": "Not found"}),
    ])
    provider = HttpFavoritesProvider("http://api.test", session=session)

    with pytest.raises(FavoriteValidationError, match="required"):
        await provider.add_favorite(2, "s1")
    with pytest.raises(FavoriteTransportError):
        await provider.add_favorite(2, "s1")
    with pytest.raises(FavoriteTransportError):
        await provider.get_favorites("s1")

    # Removing a favorite the server does not know is a no-op success
    await provider.remove_favorite(2, "s1")
