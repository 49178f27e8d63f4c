"""Tests for the Markdown prompt registry (F3)."""

import pytest

from companion.prompts import registry
from companion.prompts.registry import get_prompt, list_prompts


class TestGetPrompt:
    """Tests for get_prompt."""

    def test_known_prompts_load(self):
        for key in list_prompts():
            assert get_prompt(key).strip()

    def test_substitution(self):
        prompt = get_prompt("qa/answer", notes="[X-1] Hello", class_level=6, subject="Math")

        assert "[X-1] Hello" in prompt
        assert "class 6" in prompt
        assert "{notes}" not in prompt

    def test_json_braces_survive_substitution(self):
        prompt = get_prompt("qa/answer", notes="n", class_level=6, subject="Math")
        assert '{"answer": "...", "citations": ["C6-MATH-07-01"]}' in prompt

    def test_unpassed_placeholders_left_intact(self):
        assert "{refusals}" in get_prompt("scope/filter_subject")

    def test_missing_prompt(self):
        with pytest.raises(FileNotFoundError, match="nope/missing"):
            get_prompt("nope/missing")

    def test_cache_can_be_bypassed(self, tmp_path, monkeypatch):
        (tmp_path / "demo").mkdir()
        template = tmp_path / "demo" / "hello.md"
        template.write_text("Hello {name}", encoding="utf-8")
        monkeypatch.setattr(registry, "PROMPTS_DIR", tmp_path)

        assert get_prompt("demo/hello", name="Asha") == "Hello Asha"

        template.write_text("Hi {name}", encoding="utf-8")
        assert get_prompt("demo/hello", name="Asha") == "Hello Asha"
        assert get_prompt("demo/hello", use_cache=False, name="Asha") == "Hi Asha"


class TestListPrompts:
    """Tests for list_prompts."""

    def test_lists_all_templates(self):
        assert list_prompts() == [
            "math/explain",
            "qa/answer",
            "qa/classify",
            "scope/filter_subject",
            "scope/out_of_scope",
            "summary/summarize",
            "translate/moderation",
            "translate/translate",
        ]

    def test_missing_directory(self, tmp_path, monkeypatch):
        monkeypatch.setattr(registry, "PROMPTS_DIR", tmp_path / "absent")
        assert list_prompts() == []
