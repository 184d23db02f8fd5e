"""
LLM client — OpenAI-compatible chat completions (DeepSeek by default).

Every call is bounded: a per-request timeout plus a small retry loop on
timeouts and connection errors. When retries are exhausted the caller gets
LLMUnavailableError and is expected to fall back to a template reply.

Privacy-First Design:
- User messages are stripped of e-mails, phone and card numbers before sending
- Only public catalog facts are ever placed in prompts
"""

import re
import time
import requests
from typing import Dict, List, Optional, Any
from chat_logger import get_logger
from app_config import (
    LLM_PROVIDER,
    LLM_MODEL,
    LLM_API_KEY,
    LLM_API_BASE_URL,
    LLM_TEMPERATURE,
    LLM_MAX_TOKENS,
    LLM_TIMEOUT_SECONDS,
    LLM_MAX_RETRIES,
    LLM_RETRY_BACKOFF_SECONDS,
)

logger = get_logger("omnia_chat")

PROVIDER_URLS = {
    "deepseek": "https://api.deepseek.com/v1/chat/completions",
    "openai":   "https://api.openai.com/v1/chat/completions",
}


class OmniaError(Exception):
    """Base error for the chat engine."""


class LLMError(OmniaError):
    """The completion service answered with an error or an unusable payload."""


class LLMUnavailableError(LLMError):
    """The completion service timed out or was unreachable after all retries."""


# ══════════════════════════════════════════════════════════════
# PRIVACY & SANITIZATION
# ══════════════════════════════════════════════════════════════

def _sanitize_for_llm(text: str) -> str:
    """
    Remove PII from user messages before sending to LLM.

    Strips:
    - Email addresses
    - Credit card numbers
    - Phone numbers
    """
    if not text:
        return text

    text = re.sub(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b', '[EMAIL]', text)

    # Cards before phones, the phone pattern would eat card digits
    text = re.sub(r'\b\d{4}[-\s]?\d{4}[-\s]?\d{4}[-\s]?\d{4}\b', '[CARD]', text)

    # French numbers (06 12 34 56 78 / +33 6 12 34 56 78)
    text = re.sub(r'(?:\+33\s?|\b0)[1-9](?:[\s.-]?\d{2}){4}\b', '[PHONE]', text)
    # Generic international format
    text = re.sub(r'\+\d{1,3}[\s.-]?\(?\d{1,4}\)?(?:[\s.-]?\d{2,4}){2,4}\b', '[PHONE]', text)

    return text


# ══════════════════════════════════════════════════════════════
# CLIENT
# ══════════════════════════════════════════════════════════════

class LLMClient:
    """
    Abstraction over chat-completion providers — configurable via environment variables.

    Supported providers:
    - deepseek: DeepSeek API (default)
    - openai: OpenAI API
    - proxy: any OpenAI-compatible endpoint given by LLM_API_BASE_URL
    """

    def __init__(
        self,
        provider: str = None,
        model: str = None,
        api_key: str = None,
        api_url: str = None,
        temperature: float = None,
        max_tokens: int = None,
        timeout: float = None,
        max_retries: int = None,
        retry_backoff: float = None,
    ):
        self.provider = (provider or LLM_PROVIDER).lower()
        self.model = model or LLM_MODEL
        self.api_key = api_key if api_key is not None else LLM_API_KEY
        self.temperature = LLM_TEMPERATURE if temperature is None else temperature
        self.max_tokens = max_tokens or LLM_MAX_TOKENS
        self.timeout = timeout or LLM_TIMEOUT_SECONDS
        self.max_retries = LLM_MAX_RETRIES if max_retries is None else max_retries
        self.retry_backoff = LLM_RETRY_BACKOFF_SECONDS if retry_backoff is None else retry_backoff

        if self.provider in PROVIDER_URLS:
            self.api_url = api_url or LLM_API_BASE_URL or PROVIDER_URLS[self.provider]
        elif self.provider == "proxy":
            self.api_url = api_url or LLM_API_BASE_URL  # Must be provided for the proxy
            if not self.api_url:
                raise ValueError("LLM_API_BASE_URL is required for the proxy provider")
        else:
            raise ValueError(f"Unsupported LLM provider: {self.provider}")

    @property
    def is_configured(self) -> bool:
        # The proxy holds the provider key itself
        return bool(self.api_key) or self.provider == "proxy"

    def complete(self, messages: List[Dict[str, str]], max_tokens: Optional[int] = None) -> str:
        """
        Send a chat completion request and return the reply text.

        Args:
            messages: [{"role": ..., "content": ...}, ...]
            max_tokens: Reply budget, defaults to LLM_MAX_TOKENS

        Raises:
            LLMUnavailableError: timeouts / connection errors after all retries
            LLMError: HTTP error status or malformed payload
        """
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": max_tokens or self.max_tokens,
        }

        attempts = self.max_retries + 1
        for attempt in range(1, attempts + 1):
            start_time = time.time()
            try:
                response = requests.post(
                    self.api_url,
                    headers=self._headers(),
                    json=payload,
                    timeout=self.timeout,
                )
                response.raise_for_status()
                data = response.json()
            except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
                logger.warning(
                    f"LLM call timed out | provider={self.provider} | "
                    f"attempt={attempt}/{attempts} | error={type(e).__name__}"
                )
                if attempt < attempts:
                    time.sleep(self.retry_backoff)
                    continue
                raise LLMUnavailableError(
                    f"{self.provider} unavailable after {attempts} attempts"
                ) from e
            except (requests.exceptions.RequestException, ValueError) as e:
                logger.error(f"LLM API call failed | provider={self.provider} | error={str(e)}")
                raise LLMError(str(e)) from e

            return self._parse(data, start_time)

        raise LLMUnavailableError(f"{self.provider} unavailable")

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _parse(self, data: Dict[str, Any], start_time: float) -> str:
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise LLMError(f"Malformed completion payload: {e}") from e
        if not isinstance(content, str):
            raise LLMError("Completion payload has no text content")

        usage = data.get("usage") or {}
        logger.info(
            f"LLM call ok | provider={self.provider} | model={self.model} | "
            f"tokens={usage.get('total_tokens', 0)} | "
            f"latency={int((time.time() - start_time) * 1000)}ms"
        )
        return content.strip()
