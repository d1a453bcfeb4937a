from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import requests

from .config import Config
from .errors import (
    AuthenticationError,
    DecodeError,
    HttpStatusError,
    NetworkError,
    RateLimitError,
)
from .llm import LLMClient, Messages, Prompt


logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"
BOOL_SYSTEM_PROMPT = "answer with a json-serialized boolean and no markup"
BOOL_MAX_TOKENS = 5


class Client(LLMClient):
    """Anthropic Messages API client.

    One :meth:`send_message` call is one HTTP request: no retries, no streaming.
    """

    def __init__(self, config: Config, session: Optional[requests.Session] = None):
        config.validate()
        self.config = config
        self._session = session if session is not None else requests.Session()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    @property
    def url(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/messages"

    def _headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self.config.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }

    def build_payload(self, message: Prompt, lead: Optional[str] = None, system: Optional[str] = None) -> Dict[str, Any]:
        if isinstance(message, Messages):
            messages = message.copy()
        else:
            messages = Messages().push_user(message)
        if lead is not None:
            messages.push_assistant(lead)

        payload: Dict[str, Any] = {
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
            "messages": messages.to_list(),
        }
        if system is not None:
            payload["system"] = system
        return payload

    def send_message(self, message: Prompt, lead: Optional[str] = None, system: Optional[str] = None) -> str:
        """Send ``message`` and return the assistant's reply text.

        ``message`` is either plain text, sent as the only user turn, or a
        prebuilt :class:`Messages` conversation. ``lead`` is appended as an
        assistant turn for the model to continue from; ``system`` becomes
        the system prompt.

        Raises NetworkError, HttpStatusError or DecodeError.
        """
        return self._post(self.build_payload(message, lead=lead, system=system))

    def _post(self, payload: Dict[str, Any]) -> str:
        logger.debug("POST %s (model=%s, max_tokens=%s)", self.url, payload["model"], payload["max_tokens"])
        try:
            response = self._session.post(
                self.url,
                headers=self._headers(),
                json=payload,
                timeout=self.config.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Request to {self.url} failed: {e}") from e

        logger.debug("Response status %s", response.status_code)
        if not 200 <= response.status_code < 300:
            raise _status_error(response)
        try:
            data = response.json()
        except requests.exceptions.JSONDecodeError as e:
            raise DecodeError(f"Response is not valid JSON: {e}") from e
        return _extract_text(data)

    def ask_bool(self, question: str) -> bool:
        """Ask a yes/no question and decode the reply as a JSON boolean."""
        payload = self.build_payload(question, system=BOOL_SYSTEM_PROMPT)
        payload["max_tokens"] = min(payload["max_tokens"], BOOL_MAX_TOKENS)
        reply = self._post(payload)
        try:
            value = json.loads(reply.strip())
        except ValueError as e:
            raise DecodeError(f"Expected a JSON boolean, got: {reply!r}") from e
        if not isinstance(value, bool):
            raise DecodeError(f"Expected a JSON boolean, got: {reply!r}")
        return value


def _error_message(response: requests.Response) -> Optional[str]:
    try:
        data = response.json()
    except requests.exceptions.JSONDecodeError:
        return response.text.strip() or None
    if isinstance(data, dict):
        # {"type": "error", "error": {"type": ..., "message": ...}}
        error = data.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        if isinstance(data.get("message"), str):
            return data["message"]
    return response.text.strip() or None


def _status_error(response: requests.Response) -> HttpStatusError:
    status = response.status_code
    message = _error_message(response)
    if status == 401:
        return AuthenticationError(status, message)
    if status == 429:
        return RateLimitError(status, message)
    return HttpStatusError(status, message)


def _extract_text(data: Any) -> str:
    if not isinstance(data, dict):
        raise DecodeError("Response is not a JSON object")

    content = data.get("content")
    if not isinstance(content, list):
        raise DecodeError("No content in response")
    for block in content:
        if isinstance(block, dict) and isinstance(block.get("text"), str):
            return block["text"]
    raise DecodeError("No text block in response content")
