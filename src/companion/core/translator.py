"""English to Kannada translation.

Each request is first screened by a moderation prompt. Inappropriate input
gets a fixed refusal without any translation call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from companion.llm.client import LLMClient, LLMError
from companion.prompts.registry import get_prompt
from companion.utils.text_utils import normalize_whitespace, strip_think

logger = structlog.get_logger(__name__)

REFUSAL_TEXT = "I am unable to process this request."
REFUSAL_PRONUNCIATION = "Error"


@dataclass
class Translation:
    """Translated phrase with pronunciation guide."""

    source_text: str
    translated_text: str
    pronunciation: str

    @property
    def refused(self) -> bool:
        return self.translated_text == REFUSAL_TEXT

    def to_dict(self) -> dict[str, Any]:
        return {
            "source_text": self.source_text,
            "translated_text": self.translated_text,
            "pronunciation": self.pronunciation,
            "refused": self.refused,
        }


class TranslationError(Exception):
    """Error translating text."""

    pass


def is_inappropriate(text: str, client: LLMClient | None = None) -> bool:
    """Ask the LLM whether text is inappropriate, hateful or profane.

    Raises:
        TranslationError: If the moderation call fails
    """
    if client is None:
        client = LLMClient()

    try:
        verdict = client.simple_chat(
            system_prompt=get_prompt("translate/moderation"),
            user_message=f'Text: "{text}"',
            temperature=0.0,
        )
    except LLMError as e:
        raise TranslationError(f"Moderation check failed: {e}") from e

    return "true" in strip_think(verdict).lower()


def translate_text(query: str, client: LLMClient | None = None) -> Translation:
    """Translate the phrase a student asks about into Kannada.

    Args:
        query: Natural language request, e.g. "How do I say 'Good morning' in Kannada?"
        client: Pre-configured LLM client (for testing)

    Returns:
        Translation (a refusal if the input is inappropriate)

    Raises:
        TranslationError: If the query is empty or the LLM fails
    """
    query = normalize_whitespace(query)
    if not query:
        raise TranslationError("Query is empty")

    if client is None:
        client = LLMClient()

    if is_inappropriate(query, client=client):
        logger.warning("translation.refused")
        return Translation(
            source_text=query,
            translated_text=REFUSAL_TEXT,
            pronunciation=REFUSAL_PRONUNCIATION,
        )

    try:
        data = client.simple_json(
            system_prompt=get_prompt("translate/translate"),
            user_message=query,
        )
    except LLMError as e:
        raise TranslationError(f"Failed to translate text: {e}") from e

    translated = str(data.get("translatedText", "")).strip()
    if not translated:
        raise TranslationError("Failed to translate text.")

    translation = Translation(
        source_text=str(data.get("sourceText") or query).strip(),
        translated_text=translated,
        pronunciation=str(data.get("pronunciation", "")).strip(),
    )
    logger.info("translation.done", source=translation.source_text)
    return translation
