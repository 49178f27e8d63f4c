"""LLM client for hosted and local chat-completion providers.

All providers are reached through the OpenAI-compatible chat completions API:
- gemini: Google Gemini via its OpenAI-compatible endpoint
- openai: OpenAI API
- lmstudio: Local LM Studio server
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any, Literal

import structlog
from openai import OpenAI

from companion.config.app_config import load_app_config
from companion.utils.text_utils import json_candidates

logger = structlog.get_logger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

JSON_REPAIR_PROMPT = """Fix the following text and return ONLY valid JSON:
<<<
{invalid_output}
>>>

Reply with the corrected JSON only, no explanations and no markdown."""

# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class LLMConfig:
    """Configuration for LLM client."""

    provider: str = "gemini"
    base_url: str | None = "https://generativelanguage.googleapis.com/v1beta/openai/"
    model: str = "gemini-2.0-flash"
    temperature: float = 0.4
    max_tokens: int = 2048
    timeout: int = 60
    api_key: str | None = None
    supports_json_object: bool = False

    @classmethod
    def from_app_config(cls, provider: str | None = None) -> LLMConfig:
        """Build configuration from the application config.

        Args:
            provider: Provider name; defaults to the configured default provider
        """
        app_config = load_app_config()
        name = provider or app_config.companion.default_provider
        pconfig = app_config.providers.get(name)

        if pconfig is None:
            logger.warning("provider_not_configured", provider=name)
            return cls(provider=name, temperature=app_config.companion.temperature)

        return cls(
            provider=name,
            base_url=pconfig.base_url,
            model=pconfig.default_model,
            temperature=app_config.companion.temperature,
            api_key=pconfig.get_api_key(),
            supports_json_object=pconfig.supports_json_object,
        )


@dataclass
class Message:
    """A chat message."""

    role: Literal["system", "user", "assistant"]
    content: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for API call."""
        return {"role": self.role, "content": self.content}


@dataclass
class LLMResponse:
    """Response from LLM."""

    content: str
    model: str
    provider: str
    usage: dict[str, int] = field(default_factory=dict)
    latency_ms: int = 0

    @property
    def total_tokens(self) -> int:
        return self.usage.get("total_tokens", 0)


class LLMError(Exception):
    """Error during LLM interaction."""

    pass


class LLMConnectionError(LLMError):
    """Error connecting to LLM server."""

    pass


class LLMResponseError(LLMError):
    """Error in LLM response."""

    pass


# =============================================================================
# LLM CLIENT
# =============================================================================


class LLMClient:
    """Chat-completion client shared by all learning flows."""

    def __init__(
        self,
        config: LLMConfig | None = None,
        model: str | None = None,
    ):
        """Initialize LLM client.

        Args:
            config: LLM configuration (built from app config if not provided)
            model: Override model from config
        """
        if config is None:
            config = LLMConfig.from_app_config()

        self.config = config
        if model is not None:
            self.config.model = model

        self._client = OpenAI(
            base_url=self.config.base_url,
            api_key=self.config.api_key or "not-needed",
            timeout=self.config.timeout,
        )

        logger.info(
            "llm_client_initialized",
            provider=self.config.provider,
            model=self.config.model,
        )

    def chat(
        self,
        messages: list[Message],
        temperature: float | None = None,
        max_tokens: int | None = None,
        json_mode: bool = False,
    ) -> LLMResponse:
        """Send chat completion request.

        Args:
            messages: Conversation messages
            temperature: Override default temperature
            max_tokens: Override default max tokens
            json_mode: Ask for a JSON object (only if the provider supports it)

        Returns:
            LLMResponse with content and metadata

        Raises:
            LLMConnectionError: If cannot connect to server
            LLMResponseError: If response is empty
            LLMError: For any other API failure
        """
        request_kwargs: dict[str, Any] = {
            "model": self.config.model,
            "messages": [m.to_dict() for m in messages],
            "temperature": self.config.temperature if temperature is None else temperature,
            "max_tokens": max_tokens or self.config.max_tokens,
        }
        if json_mode and self.config.supports_json_object:
            request_kwargs["response_format"] = {"type": "json_object"}

        start_time = time.time()

        try:
            response = self._client.chat.completions.create(**request_kwargs)
        except Exception as e:
            error_msg = str(e)
            if "Connection" in error_msg or "connect" in error_msg.lower():
                raise LLMConnectionError(
                    f"Could not connect to {self.config.provider} at {self.config.base_url}: {e}"
                ) from e
            raise LLMError(f"LLM call failed: {e}") from e

        latency_ms = int((time.time() - start_time) * 1000)

        if not response.choices:
            raise LLMResponseError("Empty response from LLM")

        content = response.choices[0].message.content or ""

        usage = {}
        if response.usage:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }

        logger.debug(
            "llm_response",
            provider=self.config.provider,
            model=response.model,
            tokens=usage.get("total_tokens", 0),
            latency_ms=latency_ms,
        )

        return LLMResponse(
            content=content,
            model=response.model,
            provider=self.config.provider,
            usage=usage,
            latency_ms=latency_ms,
        )

    @staticmethod
    def _try_parse_json(content: str) -> dict[str, Any] | None:
        """Parse the first JSON object found in content, or None."""
        for candidate in json_candidates(content):
            try:
                parsed = json.loads(candidate)
            except json.JSONDecodeError:
                continue
            if isinstance(parsed, dict):
                return parsed
        return None

    def chat_json(
        self,
        messages: list[Message],
        temperature: float | None = None,
        max_tokens: int | None = None,
        max_retries: int = 1,
    ) -> dict[str, Any]:
        """Send chat request expecting a JSON object back.

        On a parse failure the model is asked to repair its own output,
        up to ``max_retries`` times.

        Raises:
            LLMResponseError: If no valid JSON is obtained
        """
        response = self.chat(messages, temperature, max_tokens, json_mode=True)
        parsed = self._try_parse_json(response.content)
        if parsed is not None:
            return parsed

        last_content = response.content
        for attempt in range(max_retries):
            logger.warning(
                "json_parse_failed_retrying",
                attempt=attempt + 1,
                content=last_content[:100],
                provider=self.config.provider,
            )
            repair = Message(
                role="user",
                content=JSON_REPAIR_PROMPT.format(invalid_output=last_content[:1000]),
            )
            retry_response = self.chat(
                messages + [repair], temperature, max_tokens, json_mode=True
            )
            parsed = self._try_parse_json(retry_response.content)
            if parsed is not None:
                logger.info("json_parse_recovered_after_retry")
                return parsed
            last_content = retry_response.content

        raise LLMResponseError(f"Could not obtain valid JSON: {response.content[:200]}...")

    def simple_chat(
        self,
        system_prompt: str,
        user_message: str,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Single-turn chat returning the response text."""
        messages = [
            Message(role="system", content=system_prompt),
            Message(role="user", content=user_message),
        ]
        return self.chat(messages, temperature, max_tokens).content

    def simple_json(
        self,
        system_prompt: str,
        user_message: str,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> dict[str, Any]:
        """Single-turn chat returning parsed JSON."""
        messages = [
            Message(role="system", content=system_prompt),
            Message(role="user", content=user_message),
        ]
        return self.chat_json(messages, temperature, max_tokens)

    def is_available(self) -> bool:
        """Check if the provider answers a model listing request."""
        try:
            self._client.models.list()
            return True
        except Exception as e:
            logger.debug("llm_unavailable", provider=self.config.provider, error=str(e))
            return False
