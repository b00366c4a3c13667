"""
Ollama REST API client.
Wraps POST /api/chat for the schema analysis call, with retry logic.
"""
import logging
import time
from typing import Optional
import httpx

from config import settings

logger = logging.getLogger(__name__)


class OllamaClient:
    """Thin client for the Ollama local LLM server."""

    provider = "ollama"

    def __init__(self, host: Optional[str] = None, model: Optional[str] = None, timeout: Optional[int] = None):
        self.host = (host or settings.OLLAMA_HOST).rstrip("/")
        self.model = model or settings.OLLAMA_MODEL
        self.timeout = timeout or settings.OLLAMA_TIMEOUT_SECONDS

    def is_healthy(self) -> tuple[bool, Optional[str]]:
        """Returns (True, model_name) if Ollama is reachable, (False, error) otherwise."""
        try:
            resp = httpx.get(f"{self.host}/api/version", timeout=5)
            resp.raise_for_status()
            return True, self.model
        except httpx.HTTPError as e:
            return False, str(e)

    def chat(self, messages: list[dict], json_mode: bool = False, max_retries: int = 3) -> str:
        """
        Call Ollama /api/chat with a list of {role, content} messages.
        Returns the assistant's reply as a string. With json_mode the model
        is constrained to emit a JSON document.
        """
        payload = {
            "model": self.model,
            "messages": messages,
            "stream": False,
            "options": {"num_ctx": 8192, "temperature": 0.2},
        }
        if json_mode:
            payload["format"] = "json"

        last_err: Optional[Exception] = None
        for attempt in range(1, max_retries + 1):
            try:
                logger.debug("Ollama chat attempt %d", attempt)
                resp = httpx.post(
                    f"{self.host}/api/chat",
                    json=payload,
                    timeout=self.timeout,
                )
                resp.raise_for_status()
                text = resp.json()["message"]["content"].strip()
                logger.debug("Ollama response length: %d chars", len(text))
                return text
            except (httpx.HTTPError, KeyError, ValueError) as e:
                last_err = e
                logger.warning("Ollama chat attempt %d/%d failed: %s", attempt, max_retries, e)
                if attempt < max_retries:
                    time.sleep(2 ** attempt)  # exponential back-off: 2s, 4s
        raise RuntimeError(f"Ollama chat failed after {max_retries} attempts: {last_err}")
