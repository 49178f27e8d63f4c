"""Tests for math, translation, summary and scope flows (F3)."""

import pytest

from companion.core.math_explainer import MathExplanationError, explain_math_problem
from companion.core.question_summary import EMPTY_SUMMARY, SummaryError, summarize_questions
from companion.core.scope_filter import (
    REFUSAL_RESPONSES,
    ScopeCheckError,
    filter_prompt_by_subject,
    handle_out_of_scope,
)
from companion.core.translator import (
    REFUSAL_PRONUNCIATION,
    REFUSAL_TEXT,
    TranslationError,
    is_inappropriate,
    translate_text,
)
from companion.llm.client import LLMError, LLMResponseError

QUIZ = [
    {"question": "Compare 1/2 and 2/3", "answer": "2/3 is greater"},
    {"question": "Compare 3/4 and 5/8", "answer": "3/4 is greater"},
    {"question": "Compare 2/5 and 1/3", "answer": "2/5 is greater"},
]


class TestExplainMathProblem:
    """Tests for explain_math_problem."""

    def test_explanation_and_quiz(self, mock_llm_client):
        mock_llm_client.simple_json.return_value = {
            "explanation": "1. Find a common denominator.\n\n2. Compare numerators.",
            "practiceQuiz": QUIZ,
        }

        result = explain_math_problem("How do I compare 3/5 and 4/7?", client=mock_llm_client)

        assert result.explanation.startswith("1. Find")
        assert [q.answer for q in result.practice_quiz] == [
            "2/3 is greater",
            "3/4 is greater",
            "2/5 is greater",
        ]
        assert result.to_dict()["practice_quiz"][0] == QUIZ[0]

    def test_malformed_quiz_entries_dropped(self, mock_llm_client):
        mock_llm_client.simple_json.return_value = {
            "explanation": "1. Done.",
            "practiceQuiz": [*QUIZ, {"question": "extra", "answer": "x"}, "bad", {"question": "no answer"}],
        }

        result = explain_math_problem("2+2?", client=mock_llm_client)

        assert len(result.practice_quiz) == 3

    def test_missing_quiz_is_empty(self, mock_llm_client):
        mock_llm_client.simple_json.return_value = {"explanation": "1. Add."}
        assert explain_math_problem("2+2?", client=mock_llm_client).practice_quiz == []

    def test_missing_explanation_raises(self, mock_llm_client):
        mock_llm_client.simple_json.return_value = {"practiceQuiz": QUIZ}

        with pytest.raises(MathExplanationError):
            explain_math_problem("2+2?", client=mock_llm_client)

    def test_llm_failure(self, mock_llm_client):
        mock_llm_client.simple_json.side_effect = LLMResponseError("bad json")

        with pytest.raises(MathExplanationError, match="Failed to get explanation"):
            explain_math_problem("2+2?", client=mock_llm_client)

    def test_empty_question(self, mock_llm_client):
        with pytest.raises(MathExplanationError, match="empty"):
            explain_math_problem("  ", client=mock_llm_client)


class TestTranslation:
    """Tests for moderation and translate_text."""

    def test_moderation_verdict(self, mock_llm_client):
        mock_llm_client.simple_chat.return_value = "True"
        assert is_inappropriate("something rude", client=mock_llm_client)

        mock_llm_client.simple_chat.return_value = "false"
        assert not is_inappropriate("Good morning", client=mock_llm_client)

    def test_translation(self, mock_llm_client):
        mock_llm_client.simple_chat.return_value = "false"
        mock_llm_client.simple_json.return_value = {
            "sourceText": "Good morning",
            "translatedText": "ಶುಭೋದಯ",
            "pronunciation": "shubhodaya",
        }

        result = translate_text("How do I say 'Good morning' in Kannada?", client=mock_llm_client)

        assert result.source_text == "Good morning"
        assert result.translated_text == "ಶುಭೋದಯ"
        assert result.pronunciation == "shubhodaya"
        assert not result.refused

    def test_inappropriate_input_refused(self, mock_llm_client):
        mock_llm_client.simple_chat.return_value = "true"

        result = translate_text("rude words", client=mock_llm_client)

        assert result.refused
        assert result.translated_text == REFUSAL_TEXT
        assert result.pronunciation == REFUSAL_PRONUNCIATION
        mock_llm_client.simple_json.assert_not_called()

    def test_source_defaults_to_query(self, mock_llm_client):
        mock_llm_client.simple_chat.return_value = "false"
        mock_llm_client.simple_json.return_value = {"translatedText": "ನಮಸ್ಕಾರ", "pronunciation": "namaskaara"}

        assert translate_text("Hello", client=mock_llm_client).source_text == "Hello"

    def test_missing_translation_raises(self, mock_llm_client):
        mock_llm_client.simple_chat.return_value = "false"
        mock_llm_client.simple_json.return_value = {"pronunciation": "x"}

        with pytest.raises(TranslationError):
            translate_text("Hello", client=mock_llm_client)

    def test_moderation_failure(self, mock_llm_client):
        mock_llm_client.simple_chat.side_effect = LLMError("down")

        with pytest.raises(TranslationError, match="Moderation"):
            translate_text("Hello", client=mock_llm_client)


class TestSummarizeQuestions:
    """Tests for summarize_questions."""

    def test_summary(self, mock_llm_client):
        mock_llm_client.simple_chat.return_value = "Today your child studied fractions."

        summary = summarize_questions(["What is a fraction?", "  ", "What is 1/2?"], client=mock_llm_client)

        assert summary == "Today your child studied fractions."
        user_message = mock_llm_client.simple_chat.call_args.kwargs["user_message"]
        assert "- What is a fraction?\n- What is 1/2?" in user_message

    def test_no_questions_skips_llm(self, mock_llm_client):
        assert summarize_questions([], client=mock_llm_client) == EMPTY_SUMMARY
        assert summarize_questions(["", " "], client=mock_llm_client) == EMPTY_SUMMARY
        mock_llm_client.simple_chat.assert_not_called()

    def test_empty_reply_raises(self, mock_llm_client):
        mock_llm_client.simple_chat.return_value = "<think>...</think>"

        with pytest.raises(SummaryError):
            summarize_questions(["Why is the sky blue?"], client=mock_llm_client)


class TestFilterPromptBySubject:
    """Tests for filter_prompt_by_subject."""

    def test_relevant(self, mock_llm_client):
        mock_llm_client.simple_json.return_value = {"isRelevant": True, "response": "", "suggestedTopics": []}

        decision = filter_prompt_by_subject("What is photosynthesis?", client=mock_llm_client)

        assert decision.is_relevant
        assert decision.response == ""

    def test_not_relevant_with_history(self, mock_llm_client):
        mock_llm_client.simple_json.return_value = {
            "isRelevant": "false",
            "response": REFUSAL_RESPONSES[1],
            "suggestedTopics": ["Fractions", " "],
        }

        decision = filter_prompt_by_subject("Best cartoon?", history=["Fractions"], client=mock_llm_client)

        assert not decision.is_relevant
        assert decision.response == REFUSAL_RESPONSES[1]
        assert decision.suggested_topics == ["Fractions"]
        assert "Student's study history: Fractions" in mock_llm_client.simple_json.call_args.kwargs["system_prompt"]

    def test_missing_response_uses_first_refusal(self, mock_llm_client):
        mock_llm_client.simple_json.return_value = {"isRelevant": False}

        decision = filter_prompt_by_subject("?", client=mock_llm_client)

        assert decision.response == REFUSAL_RESPONSES[0]

    def test_missing_verdict_raises(self, mock_llm_client):
        mock_llm_client.simple_json.return_value = {"response": "?"}

        with pytest.raises(ScopeCheckError):
            filter_prompt_by_subject("?", client=mock_llm_client)


class TestHandleOutOfScope:
    """Tests for handle_out_of_scope."""

    def test_in_scope(self, mock_llm_client):
        mock_llm_client.simple_json.return_value = {"isOutOfScope": False}
        assert handle_out_of_scope("What are fractions?", client=mock_llm_client).is_relevant

    def test_out_of_scope(self, mock_llm_client):
        mock_llm_client.simple_json.return_value = {
            "isOutOfScope": True,
            "response": "Let's talk about plants instead!",
            "suggestedTopics": ["Photosynthesis", "Fractions"],
        }

        decision = handle_out_of_scope("Explain quantum physics", client=mock_llm_client)

        assert not decision.is_relevant
        assert decision.suggested_topics == ["Photosynthesis", "Fractions"]
        assert decision.to_dict()["response"] == "Let's talk about plants instead!"

    def test_llm_failure(self, mock_llm_client):
        mock_llm_client.simple_json.side_effect = LLMError("x")

        with pytest.raises(ScopeCheckError, match="Scope check failed"):
            handle_out_of_scope("?", client=mock_llm_client)
