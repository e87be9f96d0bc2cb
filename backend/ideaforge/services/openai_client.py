"""OpenAI chat-completions client — injectable, single-shot, no retries.

The model-backed blueprint generator receives a `TextCompletionClient`
at construction. `OpenAIChatClient` is the production implementation:
  - wraps one shared httpx.AsyncClient owned by the application lifespan,
  - sends a single user message, returns the raw completion text,
  - raises OpenAIClientError on any transport, HTTP or empty-content failure.

Parsing the returned text is the caller's job; `sanitize_json()` helps.
"""

from __future__ import annotations

import logging
import re
import time
from typing import Any, Dict, Optional, Protocol

import httpx

from ..config import Settings

logger = logging.getLogger(__name__)


class OpenAIClientError(Exception):
    """Raised when the completion endpoint cannot return usable text."""


class TextCompletionClient(Protocol):
    """Anything that turns one prompt string into one completion string."""

    async def complete(self, prompt: str) -> str: ...


# ---------------------------------------------------------------------------
# JSON sanitizer: extracts a JSON object from LLM output
# ---------------------------------------------------------------------------
def sanitize_json(raw: str) -> str:
    """Extract a JSON object from raw LLM output.

    Handles:
      - Markdown fences (```json ... ```)
      - Leading/trailing whitespace and BOM
      - Prose before/after JSON
      - Trailing commas before } or ]

    Raises ValueError if no JSON object is found.
    """
    text = raw.strip().lstrip("\ufeff")

    if text.startswith("```"):
        parts = text.split("```")
        text = parts[1] if len(parts) >= 3 else text[3:]

    text = text.strip()
    if text.lower().startswith("json"):
        text = text[4:].strip()

    start = text.find("{")
    if start == -1:
        raise ValueError("no '{' found in model output")
    end = text.rfind("}")
    if end < start:
        raise ValueError("no closing '}' found in model output")
    text = text[start : end + 1]

    return re.sub(r",\s*([}\]])", r"\1", text)


class OpenAIChatClient:
    """Chat-completions client bound to one httpx.AsyncClient."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        api_key: str,
        model: str = "gpt-4.1",
        api_url: str = "https://api.openai.com/v1/chat/completions",
        temperature: float = 0.7,
        max_tokens: int = 4000,
        timeout: float = 40.0,
        json_mode: bool = True,
    ) -> None:
        if not api_key:
            raise EnvironmentError("OPENAI_API_KEY environment variable not set")
        self._http = http
        self._api_key = api_key
        self.model = model
        self._api_url = api_url
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout
        self._json_mode = json_mode

    @classmethod
    def from_settings(cls, http: httpx.AsyncClient, settings: Settings) -> "OpenAIChatClient":
        return cls(
            http,
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            api_url=settings.openai_api_url,
            temperature=settings.openai_temperature,
            max_tokens=settings.openai_max_tokens,
            timeout=settings.openai_timeout,
        )

    def build_payload(self, prompt: str) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
        }
        if self._json_mode:
            payload["response_format"] = {"type": "json_object"}
        return payload

    async def complete(self, prompt: str) -> str:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        payload = self.build_payload(prompt)

        print(f"🧠 [OPENAI] Calling {self.model} (prompt={len(prompt)} chars)")
        t0 = time.time()
        try:
            response = await self._http.post(
                self._api_url,
                headers=headers,
                json=payload,
                timeout=self._timeout,
            )
        except httpx.TimeoutException as exc:
            print(f"❌ [OPENAI] Timeout ({time.time() - t0:.1f}s)")
            raise OpenAIClientError("completion request timed out") from exc
        except httpx.HTTPError as exc:
            print(f"❌ [OPENAI] Transport error: {exc}")
            raise OpenAIClientError(f"completion request failed: {exc}") from exc

        print(f"📦 [OPENAI] HTTP {response.status_code} ({time.time() - t0:.1f}s)")
        if response.status_code != 200:
            logger.warning("OpenAI error response: %s", response.text[:400])
            raise OpenAIClientError(f"completion endpoint returned HTTP {response.status_code}")

        try:
            data = response.json()
            content: Optional[str] = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise OpenAIClientError("completion response has no message content") from exc

        usage = data.get("usage")
        if usage:
            print(
                f"🧠 [OPENAI] Tokens used: prompt={usage.get('prompt_tokens', '?')}, "
                f"completion={usage.get('completion_tokens', '?')}"
            )

        text = (content or "").strip()
        if not text:
            raise OpenAIClientError("completion response was empty")
        print(f"🧠 [OPENAI] Raw output length: {len(text)} chars")
        return text
