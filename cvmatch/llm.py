"""Generative-text model handle (Groq through the OpenAI-compatible API)."""
from __future__ import annotations

from typing import Protocol

from cvmatch.config import DEFAULT_LLM_MODEL, get_env
from cvmatch.log import get_logger

log = get_logger(__name__)

GROQ_BASE_URL = "https://api.groq.com/openai/v1"


class TextModel(Protocol):
    def generate(self, prompt: str) -> str: ...


class GroqTextModel:
    """One prompt in, the first completion's text out."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_LLM_MODEL,
        *,
        max_tokens: int = 4000,
        temperature: float = 0.2,
        client=None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client = client

    @classmethod
    def from_env(cls) -> GroqTextModel:
        return cls(
            api_key=get_env("GROQ_API_KEY"),
            model=get_env("GROQ_LLM_MODEL", DEFAULT_LLM_MODEL) or DEFAULT_LLM_MODEL,
        )

    def _get_client(self):
        if self._client is None:
            if not self.api_key:
                raise RuntimeError("GROQ_API_KEY is not set")
            from openai import OpenAI

            self._client = OpenAI(api_key=self.api_key, base_url=GROQ_BASE_URL)
        return self._client

    def generate(self, prompt: str) -> str:
        resp = self._get_client().chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        text = (resp.choices[0].message.content or "").strip()
        log.debug("Model %s returned %d chars", self.model, len(text))
        return text
