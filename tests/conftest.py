"""Shared test fixtures."""

import json
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from config.settings import Settings
from src.main import app
from src.pari_broadcast.hub import Connection, ConnectionHub
from src.pari_exchange.service import ExchangeService
from src.pari_exchange.store import ExchangeStore

INVITE = "ALPHA2026"


class FakeClock:
    """Manually advanced clock, injected wherever the code asks for "now"."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class RecordingSink:
    """Stands in for ``websocket.send_text``; keeps every frame decoded."""

    def __init__(self) -> None:
        self.frames: list[dict[str, Any]] = []

    async def __call__(self, frame: str) -> None:
        self.frames.append(json.loads(frame))

    def types(self) -> list[str]:
        return [f["type"] for f in self.frames]

    def of_type(self, message_type: str) -> list[dict[str, Any]]:
        return [f for f in self.frames if f["type"] == message_type]

    def clear(self) -> None:
        self.frames.clear()


Connect = Callable[[], Awaitable[tuple[Connection, RecordingSink]]]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        INVITE_CODES="ALPHA2026,BETA2026",
        STARTING_BALANCE=1000,
        DEBUG=True,
    )


@pytest.fixture
def hub() -> ConnectionHub:
    return ConnectionHub(queue_size=64)


@pytest.fixture
def store(test_settings: Settings, clock: FakeClock) -> ExchangeStore:
    return ExchangeStore.from_settings(test_settings, clock=clock)


@pytest.fixture
def service(
    store: ExchangeStore,
    hub: ConnectionHub,
    test_settings: Settings,
    clock: FakeClock,
) -> ExchangeService:
    return ExchangeService(store, hub, test_settings, clock=clock)


@pytest.fixture
def connect(hub: ConnectionHub) -> Connect:
    """Open a hub connection backed by a RecordingSink. Call from async tests only."""

    async def _connect() -> tuple[Connection, RecordingSink]:
        sink = RecordingSink()
        return hub.register(sink), sink

    return _connect


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
