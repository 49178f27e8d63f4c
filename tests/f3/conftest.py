"""Fixtures for F3 tests - LLM client, prompts and learning flows."""

from unittest.mock import MagicMock

import pytest

from companion.config.app_config import clear_config_cache
from companion.core.curriculum import SAMPLE_NOTES, InMemoryCurriculumRepository
from companion.llm.client import LLMClient
from companion.prompts.registry import clear_cache


@pytest.fixture
def mock_llm_client():
    """LLM client double; set simple_json / simple_chat per test."""
    return MagicMock(spec=LLMClient)


@pytest.fixture
def sample_repository():
    return InMemoryCurriculumRepository(SAMPLE_NOTES)


@pytest.fixture(autouse=True)
def _fresh_caches():
    """Config and prompt caches never leak between tests."""
    clear_config_cache()
    clear_cache()
    yield
    clear_config_cache()
    clear_cache()


@pytest.fixture
def fake_completion():
    """Build an object shaped like an OpenAI chat completion."""

    def _make(content: str | None, model: str = "test-model", usage: bool = True):
        message = MagicMock()
        message.content = content
        choice = MagicMock()
        choice.message = message
        response = MagicMock()
        response.choices = [choice]
        response.model = model
        if usage:
            response.usage.prompt_tokens = 10
            response.usage.completion_tokens = 5
            response.usage.total_tokens = 15
        else:
            response.usage = None
        return response

    return _make
