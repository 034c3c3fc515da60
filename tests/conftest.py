"""Pytest fixtures for shared garden tests."""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_FORMAT", "text")

import random
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.shared.infrastructure.database.connection import Base
from app.modules.shared_garden.application.engine import SharedGardenEngine
from app.modules.shared_garden.domain.models.garden import GardenState, Wallet
from app.modules.shared_garden.domain.models.rules import GardenRules
from app.modules.shared_garden.domain.services.pairing import resolve_couple_key
from app.modules.shared_garden.infrastructure.database import models  # noqa: F401
from app.modules.shared_garden.infrastructure.database.garden_store_impl import GardenStoreImpl
from app.modules.shared_garden.infrastructure.external.change_feed import LocalChangeFeed
from app.modules.shared_garden.infrastructure.memory.garden_store_memory import InMemoryGardenStore

ALICE = "alice"
BOB = "bob"

# A Monday morning, well inside the UTC day
START = datetime(2026, 3, 2, 8, 0, tzinfo=timezone.utc)


async def earn_water(engine):
    """Both partners collect today's water drop so they can water."""
    await engine.earn_water_drop(ALICE, BOB)
    await engine.earn_water_drop(BOB, ALICE)


class FakeClock:
    """Callable clock the tests move forward by hand."""

    def __init__(self, start: datetime = START):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rules():
    return GardenRules()


@pytest.fixture
def couple():
    return resolve_couple_key(ALICE, BOB)


@pytest.fixture
def garden(couple, rules):
    """A freshly created garden document at START."""
    return GardenState.create(couple.value, couple.user1_id, couple.user2_id, START, rules.day_key(START))


@pytest.fixture
def wallets():
    """Both partners with a full can of water drops."""
    return {ALICE: Wallet(user_id=ALICE, water=3), BOB: Wallet(user_id=BOB, water=3)}


@pytest.fixture
def change_feed():
    return LocalChangeFeed()


@pytest.fixture
def memory_store(change_feed, rules, clock):
    return InMemoryGardenStore(change_feed=change_feed, rules=rules, clock=clock)


@pytest.fixture
def engine(memory_store, rules, clock):
    return SharedGardenEngine(memory_store, rules=rules, clock=clock, rng=random.Random(7))


@pytest.fixture
async def sqlite_engine(tmp_path):
    """File-backed SQLite so separate connections see each other's commits."""
    db_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'garden.db'}")
    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db_engine
    await db_engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine):
    return async_sessionmaker(sqlite_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
def sql_store(session_factory, change_feed, rules, clock):
    return GardenStoreImpl(session_factory, change_feed, rules=rules, clock=clock, max_retries=3, retry_delay=0)
