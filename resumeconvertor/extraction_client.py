"""
OpenAI chat-completion client for structured resume extraction.

Sends the extracted resume text together with a fixed system instruction
and returns the model's raw answer. The answer is expected to be JSON, but
that is not enforced here; fence stripping and parsing happen downstream.

The call is made with the async SDK so a batch can overlap network latency
across files. By default it is a single attempt; RetryConfig enables
backoff with full jitter for 429/5xx/transient network errors, honoring
Retry-After when present.
"""

from __future__ import annotations

import asyncio
import os
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from openai import APIError, AsyncOpenAI

from .errors import ConfigurationError, MissingContentError, ModelCallError
from .logging_utils import LOG

DEFAULT_MODEL = "gpt-4o"


@dataclass(frozen=True)
class RetryConfig:
    # Total attempts includes the first call.
    max_attempts: int = 1
    # Base for exponential backoff when Retry-After is missing.
    base_delay_s: float = 0.75
    # Cap sleep to avoid unbounded waits.
    max_delay_s: float = 20.0
    # If True, disables jitter (useful for deterministic tests).
    deterministic: bool = False


class ResumeExtractionClient:
    """
    Chat-completion client that turns resume text into the model's JSON answer.
    """

    def __init__(
        self,
        system_prompt: str,
        model: str = DEFAULT_MODEL,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: Optional[float] = None,
        retry_config: Optional[RetryConfig] = None,
        # Testability: allow injecting the SDK client and sleep
        _client: Optional[Any] = None,
        _sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.system_prompt = system_prompt
        self.model = model
        self._api_key = api_key
        self._base_url = base_url
        self._timeout_s = timeout_s
        self._client = _client
        self._retry = retry_config or RetryConfig()
        self._sleep = _sleep

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            api_key = self._api_key or os.environ.get("OPENAI_API_KEY")
            if not api_key:
                raise ConfigurationError(
                    "OPENAI_API_KEY must be set to call the extraction model"
                )
            kwargs: dict[str, Any] = {"api_key": api_key, "max_retries": 0}
            if self._base_url:
                kwargs["base_url"] = self._base_url
            if self._timeout_s is not None:
                kwargs["timeout"] = self._timeout_s
            self._client = AsyncOpenAI(**kwargs)
        return self._client

    def build_messages(self, resume_text: str) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": resume_text},
        ]

    async def complete(self, resume_text: str) -> str:
        """
        Submit the resume text and return the first completion's content.

        Raises:
            ModelCallError: Network, HTTP or SDK failure
            MissingContentError: The response carries no completion content
        """
        messages = self.build_messages(resume_text)
        response = await self._call_with_retry(
            lambda: self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=0.0,
            )
        )
        return self._first_content(response)

    def _first_content(self, response: Any) -> str:
        choices = getattr(response, "choices", None)
        if not choices:
            raise MissingContentError("No completion content: response has no choices")
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None) if message is not None else None
        if content is None:
            raise MissingContentError("No completion content: first choice has no message content")
        return str(content)

    # --------------------------
    # Retry / Backoff utilities
    # --------------------------

    def _get_status_code(self, exc: Exception) -> Optional[int]:
        """
        Best-effort extraction of HTTP status from OpenAI SDK exceptions.
        """
        for attr in ("status_code", "status", "http_status"):
            val = getattr(exc, attr, None)
            if isinstance(val, int):
                return val

        resp = getattr(exc, "response", None)
        if resp is not None:
            sc = getattr(resp, "status_code", None)
            if isinstance(sc, int):
                return sc

        return None

    def _get_retry_after_s(self, exc: Exception) -> Optional[float]:
        """
        Best-effort extraction of Retry-After header, if present.
        """
        headers = getattr(exc, "headers", None)
        resp = getattr(exc, "response", None)
        if headers is None and resp is not None:
            headers = getattr(resp, "headers", None)
        if not headers or not hasattr(headers, "get"):
            return None

        ra = headers.get("retry-after") or headers.get("Retry-After")
        if ra is None:
            return None
        try:
            return float(ra)
        except (TypeError, ValueError):
            return None

    def _is_transient(self, exc: Exception) -> bool:
        """
        Decide if the error is worth retrying: 429, 5xx, and common
        transport errors (timeouts, resets).
        """
        status = self._get_status_code(exc)
        if status == 429:
            return True
        if status is not None and 500 <= status <= 599:
            return True

        msg = str(exc).lower()
        transient_markers = (
            "timeout",
            "timed out",
            "temporarily unavailable",
            "connection reset",
            "connection aborted",
            "connection error",
            "remote disconnected",
            "bad gateway",
            "service unavailable",
            "gateway timeout",
        )
        return any(m in msg for m in transient_markers)

    def _backoff_delay(self, attempt_idx: int, exc: Exception) -> float:
        """
        Retry-After when present, else exponential backoff with full jitter.
        attempt_idx is 0-based (0 => after first failure).
        """
        retry_after = self._get_retry_after_s(exc)
        if retry_after is not None and retry_after > 0:
            return min(self._retry.max_delay_s, retry_after)

        capped = min(self._retry.max_delay_s, self._retry.base_delay_s * (2 ** attempt_idx))
        if self._retry.deterministic:
            return capped
        # avoid extremely small sleeps that can hammer the API
        return max(0.25, random.random() * capped)

    async def _call_with_retry(self, fn: Callable[[], Awaitable[Any]]) -> Any:
        attempts = max(1, self._retry.max_attempts)
        for attempt in range(attempts):
            try:
                return await fn()
            except ConfigurationError:
                raise
            except (APIError, OSError, asyncio.TimeoutError) as e:
                status = self._get_status_code(e)
                detail = (f" (HTTP {status})" if status else "") + f": {e}"
                if attempt >= attempts - 1 or not self._is_transient(e):
                    suffix = f" after {attempts} attempts" if attempts > 1 else ""
                    raise ModelCallError(f"Chat completion failed{suffix}{detail}") from e
                delay = self._backoff_delay(attempt, e)
                LOG.warning(
                    "Chat completion attempt %d/%d failed%s; retrying in %.1fs",
                    attempt + 1, attempts, detail, delay,
                )
                await self._sleep(delay)

        # Should never reach here
        raise ModelCallError("Chat completion failed unexpectedly")
