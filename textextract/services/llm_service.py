import httpx

from textextract.config import Settings, settings as default_settings
from textextract.core.exceptions import ConfigurationError, ExternalServiceError
from textextract.core.logging import get_logger

logger = get_logger(__name__)


class LLMService:
    """Thin client for an OpenAI-compatible chat completions endpoint.

    The API key is passed in explicitly by the caller; nothing is read from
    global state at request time.
    """

    def __init__(
        self,
        api_key: str | None,
        config: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = (api_key or "").strip()
        self.config = config or default_settings
        self.base_url = self.config.openai_base_url.rstrip("/")
        self.timeout = self.config.llm_timeout_seconds
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def chat_completion(
        self,
        messages: list[dict],
        model: str,
        max_tokens: int,
        temperature: float = 0.0,
    ) -> str:
        if not self.configured:
            raise ConfigurationError("OpenAI API key is not configured")

        payload = {
            "model": model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post("/chat/completions", json=payload, headers=headers)
        except httpx.TimeoutException as e:
            logger.error(f"OpenAI request to {model} timed out after {self.timeout}s")
            raise ExternalServiceError(f"OpenAI API request timed out after {self.timeout:.0f}s") from e
        except httpx.HTTPError as e:
            logger.error(f"OpenAI request to {model} failed: {e}")
            raise ExternalServiceError(f"OpenAI API request failed: {e}") from e

        if response.is_error:
            detail = _error_detail(response)
            message = f"OpenAI API error: {response.reason_phrase}"
            if detail:
                message = f"{message} - {detail}"
            logger.error(f"{message} (status {response.status_code}, model {model})")
            raise ExternalServiceError(message, upstream_status=response.status_code)

        try:
            data = response.json()
            content = data["choices"][0]["message"].get("content") or ""
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ExternalServiceError("OpenAI API returned an unexpected response body") from e

        return content.strip()


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return ""
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return error.get("message") or ""
    return ""
