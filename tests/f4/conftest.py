"""Fixtures for F4 tests - Web API and CLI."""

from datetime import date
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from companion.config.app_config import clear_config_cache
from companion.core.curriculum import SAMPLE_NOTES, InMemoryCurriculumRepository
from companion.core.progress_store import MemoryProgressStorage
from companion.core.streak_tracker import StreakTracker
from companion.llm.client import LLMClient
from companion.prompts.registry import clear_cache
from companion.web.api import create_app
from companion.web.dependencies import (
    get_curriculum_repository,
    get_llm_client,
    get_streak_tracker,
)

TODAY = date(2026, 3, 15)


@pytest.fixture(autouse=True)
def _isolated_project(tmp_path, monkeypatch):
    """Run every F4 test from an empty project root under tmp_path."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("COMPANION_DATA_DIR", str(tmp_path / "data"))
    clear_config_cache()
    clear_cache()
    yield
    clear_config_cache()
    clear_cache()


@pytest.fixture
def mock_llm_client():
    return MagicMock(spec=LLMClient)


@pytest.fixture
def progress_data() -> dict[str, str]:
    """Backing dict shared by every tracker the app builds during a test."""
    return {}


@pytest.fixture
def app(mock_llm_client, progress_data):
    app = create_app()
    app.dependency_overrides[get_curriculum_repository] = lambda: InMemoryCurriculumRepository(SAMPLE_NOTES)
    app.dependency_overrides[get_llm_client] = lambda: mock_llm_client
    app.dependency_overrides[get_streak_tracker] = lambda: StreakTracker(
        MemoryProgressStorage(data=progress_data), today=lambda: TODAY
    )
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
