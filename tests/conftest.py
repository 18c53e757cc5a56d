# Pytest configuration and fixtures
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_JSON", "false")

import pytest
import pytest_asyncio

from src.database.connection import build_engine, build_session_factory, get_db, init_db
from tests.fixtures import OWNER, MessageFactory, ThreadFactory


@pytest.fixture
def db_path(tmp_path):
    """SQLite file shared by the async engine and any sync seeding."""
    return tmp_path / "artifacts.db"


@pytest_asyncio.fixture
async def engine(db_path):
    engine = build_engine(f"sqlite+aiosqlite:///{db_path}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine):
    async with get_db(build_session_factory(engine)) as session:
        yield session


@pytest_asyncio.fixture
async def thread(session):
    """A thread owned by OWNER."""
    thread = ThreadFactory.create(created_by=OWNER)
    session.add(thread)
    await session.commit()
    return thread


@pytest_asyncio.fixture
async def message(session, thread):
    message = MessageFactory.create(thread)
    session.add(message)
    await session.commit()
    return message
