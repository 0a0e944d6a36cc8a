"""Text-generation collaborator backed by the OpenAI chat completions API."""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict

import openai

from .errors import GenerationServiceError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"


class ResponseMode(str, Enum):
    FREE_TEXT = "freeText"
    JSON_OBJECT = "jsonObject"


class OpenAITextGenerator:
    """Sends a single-message prompt and returns the first choice's content.

    ``client`` is an ``openai.OpenAI`` instance (or anything exposing
    ``chat.completions.create``). No retries are attempted here; a failing call
    surfaces as :class:`GenerationServiceError`.
    """

    def __init__(self, client: Any, model: str = DEFAULT_MODEL) -> None:
        self._client = client
        self.model = model

    def generate(self, prompt: str, mode: ResponseMode = ResponseMode.FREE_TEXT) -> str:
        request: Dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
        }
        if mode == ResponseMode.JSON_OBJECT:
            request["response_format"] = {"type": "json_object"}

        try:
            response = self._client.chat.completions.create(**request)
        except openai.OpenAIError as exc:
            raise GenerationServiceError(f"{type(exc).__name__}: {exc}") from exc

        choices = getattr(response, "choices", None) or []
        if not choices:
            raise GenerationServiceError(f"{self.model} returned no choices")
        content = choices[0].message.content
        if content is None or not content.strip():
            raise GenerationServiceError(f"{self.model} returned an empty response")

        logger.debug("generated %d characters (%s)", len(content), mode.value)
        return content
