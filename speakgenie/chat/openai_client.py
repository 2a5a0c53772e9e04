"""OpenAI chat-completions HTTP client for tutor replies.

Responsibilities:
- Send chat-completions requests to OpenAI's REST API with `requests`.
- Retry transient failures (timeouts, transport errors, HTTP 429/5xx) with
  bounded exponential backoff, paced by a `RateLimiter`.
- Raise classified, secret-free `OpenAIProviderError` exceptions.
"""

from __future__ import annotations

import json
import re
import socket
import time
from typing import Any

import requests

from .rate_limiter import RateLimiter


class OpenAIProviderError(RuntimeError):
    """Raised when an OpenAI request fails or returns malformed output."""

    def __init__(
        self,
        message: str,
        *,
        failure_kind: str = "unknown",
        status_code: int | None = None,
        provider_code: str | None = None,
    ) -> None:
        """Initialize provider error metadata for diagnostics and retry decisions."""

        super().__init__(message)
        self.failure_kind = failure_kind
        self.status_code = status_code
        self.provider_code = provider_code

    @property
    def retryable(self) -> bool:
        """Return whether a later identical request could succeed."""

        if self.failure_kind in {"timeout", "transport"}:
            return True
        if self.failure_kind == "http_error" and self.status_code is not None:
            return self.status_code == 429 or self.status_code >= 500
        return False


_MAX_PROVIDER_MESSAGE_CHARS = 180


def _short_message(text: str) -> str:
    compact = " ".join(text.split())
    if len(compact) <= _MAX_PROVIDER_MESSAGE_CHARS:
        return compact
    return f"{compact[: _MAX_PROVIDER_MESSAGE_CHARS - 1]}..."


def _redact_sensitive_tokens(text: str) -> str:
    """Redact API-key-like tokens from provider error content."""

    redacted = re.sub(r"\bsk-[A-Za-z0-9_-]{8,}\b", "[redacted-key]", text)
    return re.sub(r"(?i)bearer\s+[A-Za-z0-9._-]{12,}", "Bearer [redacted-token]", redacted)


def _classify_http_failure(status_code: int, message: str, provider_code: str | None) -> str:
    """Classify OpenAI HTTP errors into deterministic diagnostic kinds."""

    message_lower = message.lower()
    code = provider_code.lower() if provider_code is not None else ""
    if status_code == 401 or "api key" in message_lower:
        return "invalid_api_key"
    if code == "insufficient_quota" or (status_code == 429 and "quota" in message_lower):
        return "insufficient_quota"
    if code == "model_not_found" or (
        "model" in message_lower
        and any(phrase in message_lower for phrase in ("not found", "does not exist", "invalid"))
    ):
        return "invalid_model"
    if status_code in {408, 504} or "timed out" in message_lower:
        return "timeout"
    return "http_error"


def _http_error_to_provider_error(exc: requests.HTTPError) -> OpenAIProviderError:
    response = exc.response
    status_code = response.status_code if response is not None else 0
    body = ""
    if response is not None:
        body = bytes(response.content or b"").decode("utf-8", errors="replace").strip()

    provider_code: str | None = None
    message = body
    try:
        payload = json.loads(body) if body else None
    except json.JSONDecodeError:
        payload = None
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        error_payload = payload["error"]
        if isinstance(error_payload.get("code"), str) and error_payload["code"].strip():
            provider_code = error_payload["code"].strip()
        if isinstance(error_payload.get("message"), str) and error_payload["message"].strip():
            message = error_payload["message"].strip()
    message = _short_message(_redact_sensitive_tokens(message))

    failure_kind = _classify_http_failure(status_code, message, provider_code)
    headline = {
        "invalid_api_key": "OpenAI authentication failed",
        "insufficient_quota": "OpenAI quota is insufficient for this request",
        "invalid_model": "OpenAI rejected the selected model",
        "timeout": "OpenAI request timed out",
    }.get(failure_kind, "OpenAI request failed")
    if message:
        detail = f"{headline} (HTTP {status_code}): {message}"
    else:
        detail = f"{headline} (HTTP {status_code})."
    return OpenAIProviderError(
        detail,
        failure_kind=failure_kind,
        status_code=status_code,
        provider_code=provider_code,
    )


class OpenAIChatClient:
    """Minimal requests-based OpenAI chat-completions client."""

    def __init__(
        self,
        *,
        api_key: str | None,
        base_url: str = "https://api.openai.com/v1",
        timeout_seconds: float = 30.0,
        max_retries: int = 2,
        retry_backoff_base_seconds: float = 0.5,
        retry_backoff_max_seconds: float = 4.0,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        """Initialize HTTP, retry, and pacing settings."""

        self.api_key = api_key.strip() if isinstance(api_key, str) else ""
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.max_retries = max(0, max_retries)
        self.retry_backoff_base_seconds = retry_backoff_base_seconds
        self.retry_backoff_max_seconds = retry_backoff_max_seconds
        self.rate_limiter = rate_limiter if rate_limiter is not None else RateLimiter()
        self.retry_attempt_count = 0

    def chat_completion_text(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.9,
        max_tokens: int | None = None,
    ) -> str:
        """Return the first assistant text of a chat-completions request."""

        if not self.api_key:
            raise OpenAIProviderError(
                "Missing OpenAI API key. Set `OPENAI_API_KEY`, use `--api-key`, or "
                "store one with `speakgenie credentials --set-api-key`.",
                failure_kind="invalid_api_key",
            )

        payload: dict[str, Any] = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temperature,
        }
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens

        raw_payload = self._post_with_retries(
            "/chat/completions", payload, limiter_key=f"openai:chat:{model}"
        )
        return self._extract_message_text(raw_payload.decode("utf-8"))

    def _post_with_retries(
        self, endpoint_path: str, payload: dict[str, Any], *, limiter_key: str
    ) -> bytes:
        attempt = 0
        while True:
            self.rate_limiter.acquire(limiter_key)
            try:
                return self._post_json(endpoint_path, payload)
            except OpenAIProviderError as exc:
                if not exc.retryable or attempt >= self.max_retries:
                    raise
                delay = min(
                    self.retry_backoff_max_seconds,
                    self.retry_backoff_base_seconds * (2**attempt),
                )
                attempt += 1
                self.retry_attempt_count += 1
                time.sleep(delay)

    def _post_json(self, endpoint_path: str, payload: dict[str, Any]) -> bytes:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            response = requests.post(
                f"{self.base_url}{endpoint_path}",
                headers=headers,
                json=payload,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise _http_error_to_provider_error(exc) from exc
        except requests.RequestException as exc:
            if isinstance(exc, requests.Timeout):
                raise OpenAIProviderError(
                    "OpenAI request timed out.", failure_kind="timeout"
                ) from exc
            raise OpenAIProviderError(
                f"OpenAI request transport error: {_short_message(str(exc))}",
                failure_kind="transport",
            ) from exc
        except (TimeoutError, socket.timeout) as exc:
            raise OpenAIProviderError("OpenAI request timed out.", failure_kind="timeout") from exc
        return bytes(response.content)

    @staticmethod
    def _extract_message_text(raw_payload: str) -> str:
        """Extract the first assistant message text from a chat-completions payload."""

        try:
            payload = json.loads(raw_payload)
        except json.JSONDecodeError as exc:
            raise OpenAIProviderError("OpenAI returned invalid JSON payload.") from exc

        choices = payload.get("choices") if isinstance(payload, dict) else None
        if not isinstance(choices, list) or not choices:
            raise OpenAIProviderError("OpenAI response missing non-empty `choices` list.")
        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        if not isinstance(message, dict):
            raise OpenAIProviderError("OpenAI response missing `choices[0].message` object.")

        content = message.get("content")
        if isinstance(content, list):
            content = "".join(
                item["text"]
                for item in content
                if isinstance(item, dict)
                and item.get("type") == "text"
                and isinstance(item.get("text"), str)
            )
        text = content.strip() if isinstance(content, str) else ""
        if not text:
            raise OpenAIProviderError("OpenAI response message content is empty.")
        return text
