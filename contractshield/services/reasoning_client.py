"""
Reasoning client - OpenAI-compatible chat completions.

Sends the rendered analysis prompt to the configured provider (Groq or
OpenAI, both through the ``openai`` SDK) and returns the raw reply text.
Every call is independent: no conversation state, no cache, no automatic
retries. Failures surface as ``ReasoningServiceFailed``.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from openai import APIError, APIStatusError, AsyncOpenAI, BadRequestError, OpenAIError

from contractshield.config import Settings, settings as default_settings
from contractshield.errors import ReasoningServiceFailed
from contractshield.prompts.contract_analysis import build_messages

logger = logging.getLogger(__name__)

PROVIDERS = ("groq", "openai")


class ReasoningClient:
    """Stateless wrapper around an OpenAI-compatible chat completion endpoint."""

    def __init__(self, settings: Optional[Settings] = None, client: Optional[AsyncOpenAI] = None):
        self.settings = settings or default_settings
        self.provider = (self.settings.reasoning_provider or "groq").lower()
        if self.provider not in PROVIDERS:
            logger.warning(f"Unknown reasoning provider '{self.provider}', using groq")
            self.provider = "groq"
        self._client = client

    @property
    def api_key(self) -> str:
        if self.provider == "openai":
            return self.settings.openai_api_key
        return self.settings.groq_api_key

    @property
    def model(self) -> str:
        if self.provider == "openai":
            return self.settings.openai_model
        return self.settings.groq_model

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.is_configured:
                raise ReasoningServiceFailed(f"no API key configured for provider '{self.provider}'")
            kwargs: Dict[str, Any] = {
                "api_key": self.api_key,
                "timeout": self.settings.reasoning_timeout_seconds,
                "max_retries": 0,
            }
            if self.provider == "groq":
                kwargs["base_url"] = self.settings.groq_base_url
            self._client = AsyncOpenAI(**kwargs)
            logger.info(f"Initialized reasoning client, provider: {self.provider}, model: {self.model}")
        return self._client

    async def _create(self, messages: List[Dict[str, str]], json_mode: bool) -> str:
        params: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.settings.reasoning_temperature,
            "max_tokens": self.settings.reasoning_max_tokens,
        }
        if json_mode:
            params["response_format"] = {"type": "json_object"}

        resp = await self._get_client().chat.completions.create(**params)
        raw_content = (resp.choices[0].message.content or "") if resp.choices else ""
        finish_reason = resp.choices[0].finish_reason if resp.choices else "unknown"
        logger.info(
            f"Reasoning response - provider: {self.provider}, json_mode: {json_mode}, "
            f"finish_reason: {finish_reason}, content_length: {len(raw_content)}"
        )
        return raw_content

    async def complete(self, prompt: str) -> str:
        """
        Send a prompt and return the raw reply text.

        JSON mode is requested first. If the provider rejects response_format
        itself, one plain call is made instead; any other failure, including
        other bad requests, is raised immediately.

        Raises:
            ReasoningServiceFailed: transport, auth, timeout, provider error or empty reply
        """
        messages = build_messages(prompt)
        try:
            try:
                raw_content = await self._create(messages, json_mode=True)
            except BadRequestError as e:
                if not _rejects_json_mode(e):
                    raise
                logger.warning(f"JSON mode rejected by provider: {e}, retrying in plain mode")
                raw_content = await self._create(messages, json_mode=False)
        except ReasoningServiceFailed:
            raise
        except APIStatusError as e:
            logger.error(f"Reasoning service returned an error, status: {e.status_code}, error: {e}")
            raise ReasoningServiceFailed(f"provider error (status {e.status_code})") from e
        except (APIError, OpenAIError) as e:
            logger.error(f"Reasoning service call failed: {e}")
            raise ReasoningServiceFailed(type(e).__name__) from e

        text = raw_content.strip()
        if not text:
            raise ReasoningServiceFailed("empty reply")
        return text


_JSON_MODE_MARKERS = ("response_format", "json_object", "json mode")


def _rejects_json_mode(error: BadRequestError) -> bool:
    """True when a 400 names the JSON response format rather than the prompt or other parameters."""
    detail = f"{error} {error.body or ''}".lower()
    return any(marker in detail for marker in _JSON_MODE_MARKERS)
