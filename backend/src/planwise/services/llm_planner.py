"""LLM service: send a plan prompt to the generation provider and return the plan text.

Two providers share one contract, `generate(prompt) -> str`:
- Gemini `generateContent` over REST (httpx)
- OpenAI chat completions (openai SDK)

Failures are reported as `PlanGenerationError` subclasses so callers can tell
a blocked request from a failed one and from an empty answer. API keys are
always passed in; nothing here reads the environment.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

logger = logging.getLogger(__name__)

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"

GENERATION_CONFIG: dict[str, Any] = {
    "temperature": 0.7,
    "topK": 1,
    "topP": 1,
    "maxOutputTokens": 2048,
}

SAFETY_SETTINGS: list[dict[str, str]] = [
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_ONLY_HIGH"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_MEDIUM_AND_ABOVE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_LOW_AND_ABOVE"},
]


class PlanGenerationError(Exception):
    """Base for generation failures. `kind` is one of blocked/failed/empty."""

    kind = "failed"


class PlanRequestBlocked(PlanGenerationError):
    kind = "blocked"


class PlanRequestFailed(PlanGenerationError):
    kind = "failed"


class PlanNotGenerated(PlanGenerationError):
    kind = "empty"


class PlanGenerator(Protocol):
    def generate(self, prompt: str) -> str: ...


def _error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text or "Unknown error"
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
    return "Unknown error"


class GeminiPlanGenerator:
    """Gemini REST client. Pass `transport` to swap the HTTP layer (tests)."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-pro",
        *,
        timeout: float = 60.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not (api_key or "").strip():
            raise ValueError("GEMINI_API_KEY is not set; cannot generate a plan")
        self.api_key = api_key.strip()
        self.model = model
        self.timeout = timeout
        self._transport = transport

    def _request_body(self, prompt: str) -> dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": GENERATION_CONFIG,
            "safetySettings": SAFETY_SETTINGS,
        }

    def generate(self, prompt: str) -> str:
        url = f"{GEMINI_API_BASE}/models/{self.model}:generateContent"
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                resp = client.post(
                    url,
                    params={"key": self.api_key},
                    json=self._request_body(prompt),
                    headers={"Content-Type": "application/json"},
                )
        except httpx.HTTPError as e:
            logger.warning("Gemini request error: %s", e)
            raise PlanRequestFailed(f"API request failed: {e}") from e

        if resp.status_code >= 400:
            message = _error_message(resp)
            logger.warning("Gemini API error %s: %s", resp.status_code, message)
            raise PlanRequestFailed(f"API request failed with status {resp.status_code}: {message}")

        try:
            data = resp.json()
        except ValueError as e:
            raise PlanRequestFailed("API returned a non-JSON response") from e
        return self._extract_text(data)

    @staticmethod
    def _extract_text(data: Any) -> str:
        if not isinstance(data, dict):
            raise PlanRequestFailed(f"API returned an unexpected response shape: {type(data).__name__}")
        feedback = data.get("promptFeedback")
        block_reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
        if block_reason:
            raise PlanRequestBlocked(f"Request was blocked: {block_reason}")
        candidates = data.get("candidates") or []
        if not isinstance(candidates, list):
            raise PlanRequestFailed("API returned an unexpected response shape: candidates is not a list")
        if not candidates:
            raise PlanNotGenerated("No plan was generated. The response may have been blocked for safety reasons.")
        first = candidates[0]
        if not isinstance(first, dict):
            raise PlanRequestFailed("API returned an unexpected response shape: candidate is not an object")
        content = first.get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            parts = []
        text = "".join(str(p.get("text") or "") for p in parts if isinstance(p, dict))
        if not text:
            raise PlanNotGenerated("No plan was generated. The model returned no text.")
        return text


class OpenAIPlanGenerator:
    """OpenAI chat completions client. Pass `client` to reuse or fake the SDK client."""

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", *, client: Any | None = None) -> None:
        if client is None:
            if not (api_key or "").strip():
                raise ValueError("OPENAI_API_KEY is not set; cannot generate a plan")
            from openai import OpenAI
            client = OpenAI(api_key=api_key.strip())
        self.model = model
        self._client = client

    def generate(self, prompt: str) -> str:
        import openai

        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=GENERATION_CONFIG["temperature"],
                max_tokens=GENERATION_CONFIG["maxOutputTokens"],
            )
        except openai.BadRequestError as e:
            if "content_filter" in str(e) or "content_policy" in str(e):
                raise PlanRequestBlocked(f"Request was blocked: {e}") from e
            raise PlanRequestFailed(f"API request failed: {e}") from e
        except openai.OpenAIError as e:
            logger.warning("OpenAI request error: %s", e)
            raise PlanRequestFailed(f"API request failed: {e}") from e

        if not response.choices:
            raise PlanNotGenerated("No plan was generated.")
        choice = response.choices[0]
        if getattr(choice, "finish_reason", None) == "content_filter":
            raise PlanRequestBlocked("Request was blocked: content_filter")
        content = (choice.message.content or "").strip()
        if not content:
            raise PlanNotGenerated("No plan was generated. The model returned no text.")
        return content


def create_generator(
    provider: str,
    *,
    gemini_api_key: str = "",
    gemini_model: str = "gemini-pro",
    openai_api_key: str = "",
    openai_model: str = "gpt-4o-mini",
) -> PlanGenerator:
    """Build the generator for `provider` ("gemini" or "openai")."""
    provider = (provider or "gemini").strip().lower()
    if provider == "gemini":
        return GeminiPlanGenerator(gemini_api_key, gemini_model)
    if provider == "openai":
        return OpenAIPlanGenerator(openai_api_key, openai_model)
    raise ValueError(f"Unknown LLM provider: {provider!r}")
