"""Shared FastAPI dependencies.

Tests replace these through ``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache

import structlog

from companion.config.app_config import load_app_config
from companion.core.curriculum import InMemoryCurriculumRepository, load_curriculum
from companion.core.progress_store import (
    MemoryProgressStorage,
    ProgressStorage,
    ProgressStorageError,
    storage_from_config,
)
from companion.core.streak_tracker import StreakTracker
from companion.llm.client import LLMClient

logger = structlog.get_logger(__name__)


@lru_cache(maxsize=1)
def get_curriculum_repository() -> InMemoryCurriculumRepository:
    """Process-wide read-only catalog, loaded once."""
    config = load_app_config()
    return load_curriculum(config.curriculum_path())


def get_llm_client() -> LLMClient:
    """LLM client built from the app config."""
    return LLMClient()


def get_progress_storage() -> ProgressStorage:
    """Configured progress storage, or an in-memory one if it cannot be opened."""
    try:
        return storage_from_config(load_app_config())
    except ProgressStorageError as e:
        logger.error("progress_storage_unavailable", error=str(e), using="memory")
        return MemoryProgressStorage()


def get_streak_tracker() -> StreakTracker:
    """Tracker over the configured progress storage, read fresh per request."""
    return StreakTracker(get_progress_storage())
