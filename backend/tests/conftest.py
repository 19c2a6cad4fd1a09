"""
Shared pytest fixtures for backend tests.
Each test gets its own sqlite file; the generation service is faked.
"""
import pytest
import sys
import os
from datetime import datetime

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import Settings
from database import TaskStore

# Saturday morning; "today" is 2026-10-18 00:00 and "tomorrow" 2026-10-19 00:00
FIXED_NOW = datetime(2026, 10, 18, 9, 30)
TODAY = datetime(2026, 10, 18)
TOMORROW = datetime(2026, 10, 19)


class FakeGenerator:
    """Records prompts and answers with canned text (or raises)."""

    def __init__(self, response: str = "{}", error: Exception | None = None):
        self.response = response
        self.error = error
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def test_db(tmp_path):
    """Path of an isolated database file for one test."""
    return str(tmp_path / "test.db")


@pytest.fixture
def store(test_db):
    task_store = TaskStore(test_db)
    task_store.init_db()
    return task_store


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def app_client(test_db, store, generator):
    """
    Test client for the FastAPI app, wired to the test store and fake generator.
    The extractor clock is pinned to FIXED_NOW.
    """
    from fastapi.testclient import TestClient
    from main import create_app

    app = create_app(Settings(database_path=test_db), store=store, generator=generator)
    app.state.extractor.now = lambda: FIXED_NOW

    with TestClient(app) as client:
        yield client
