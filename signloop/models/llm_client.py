"""OpenRouter chat-completion client used to run the contract analysis."""

import logging
from typing import Any, Dict, Optional

import httpx

from signloop.config import Config
from signloop.exceptions import ConfigurationError, EmptyResponseError, ProviderError

logger = logging.getLogger(__name__)


class OpenRouterClient:
    """Single-shot client for an OpenAI-compatible chat completions endpoint.

    One prompt goes out as a single user message and the first choice's
    message content comes back. There are no retries and no streaming.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "xiaomi/mimo-v2-flash:free",
        base_url: str = "https://openrouter.ai/api/v1",
        timeout: Optional[float] = None,
        app_url: str = "http://localhost:3000",
        app_name: str = "SignLoop",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize OpenRouter client.

        Args:
            api_key: OpenRouter API key
            model: Default model name
            base_url: API base URL, ``/chat/completions`` is appended
            timeout: Request timeout in seconds, None waits indefinitely
            app_url: Sent as ``HTTP-Referer`` for provider attribution
            app_name: Sent as ``X-Title`` for provider attribution
            transport: Optional httpx transport (used in tests)
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.app_url = app_url
        self.app_name = app_name
        self.transport = transport

    @classmethod
    def from_config(cls, config: Config, **kwargs) -> "OpenRouterClient":
        return cls(
            api_key=config.OPENROUTER_API_KEY,
            model=config.OPENROUTER_MODEL,
            base_url=config.OPENROUTER_BASE_URL,
            timeout=config.LLM_TIMEOUT_SECONDS,
            app_url=config.APP_URL,
            app_name=config.APP_NAME,
            **kwargs,
        )

    async def complete(self, prompt: str, model: Optional[str] = None) -> str:
        """Send one prompt and return the raw completion text.

        Args:
            prompt: Fully rendered prompt
            model: Model override, defaults to the client's model

        Returns:
            Content of the first choice's message

        Raises:
            ConfigurationError: If no API key is configured
            ProviderError: If the request fails or the response is not JSON
            EmptyResponseError: If the response carries no message content
        """
        if not self.api_key:
            raise ConfigurationError("OpenRouter API Key not configured")

        model = model or self.model
        url = f"{self.base_url}/chat/completions"
        payload = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.app_url,
            "X-Title": self.app_name,
        }

        logger.info("Requesting completion from %s (model=%s, %d prompt chars)", url, model, len(prompt))

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(url, headers=headers, json=payload)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Provider returned HTTP %d: %s",
                e.response.status_code, e.response.text[:500]
            )
            raise ProviderError(e, status=e.response.status_code) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Provider request failed: {e}")
            raise ProviderError(e) from e

        content = _first_choice_content(body)
        if not content:
            logger.error("Empty response from provider for model %s", model)
            raise EmptyResponseError()

        logger.info("Received completion (%d chars)", len(content))
        return content


def _first_choice_content(body: Any) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    choices = body.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return None
    message: Dict[str, Any] = choices[0].get("message") or {}
    content = message.get("content")
    return content if isinstance(content, str) else None
