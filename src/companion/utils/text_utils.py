"""Text processing utilities.

Cleanup helpers for raw LLM output.
"""

import re

# Reasoning blocks some models emit before the actual answer
THINK_PATTERNS = [
    re.compile(r"<think>.*?</think>", re.DOTALL | re.IGNORECASE),
    re.compile(r"<thinking>.*?</thinking>", re.DOTALL | re.IGNORECASE),
    re.compile(r"<analysis>.*?</analysis>", re.DOTALL | re.IGNORECASE),
    re.compile(r"<reasoning>.*?</reasoning>", re.DOTALL | re.IGNORECASE),
]

CODE_FENCE_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


def strip_think(text: str) -> str:
    """Remove thinking/reasoning blocks from LLM output.

    Removes <think>, <thinking>, <analysis> and <reasoning> blocks and a
    leading "Thinking..." line.

    Args:
        text: Raw LLM output text

    Returns:
        Cleaned text without thinking artifacts
    """
    result = text
    for pattern in THINK_PATTERNS:
        result = pattern.sub("", result)

    lines = result.strip().split("\n")
    if lines and lines[0].strip().lower().startswith("thinking"):
        lines = lines[1:]

    return "\n".join(lines).strip()


def json_candidates(text: str) -> list[str]:
    """Substrings of ``text`` that may hold a JSON object, best first.

    Order: whole text, first fenced code block, outermost ``{...}`` span.
    """
    cleaned = strip_think(text)
    candidates = [cleaned]

    fence = CODE_FENCE_PATTERN.search(cleaned)
    if fence:
        candidates.append(fence.group(1).strip())

    start = cleaned.find("{")
    end = cleaned.rfind("}") + 1
    if start >= 0 and end > start:
        candidates.append(cleaned[start:end])

    return candidates


def normalize_whitespace(text: str) -> str:
    """Collapse runs of whitespace into single spaces."""
    return re.sub(r"\s+", " ", text).strip()
