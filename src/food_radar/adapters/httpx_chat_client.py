"""HTTPX client for the chat-completions endpoint."""

import logging
from dataclasses import dataclass

import httpx

from food_radar.domain.errors import (
    EmptyResponseError,
    HTTPError,
    MalformedResponseError,
    TransportError,
)
from food_radar.services.analysis import ChatCompletionClient

_logger = logging.getLogger(__name__)


@dataclass
class HttpxChatCompletionClient(ChatCompletionClient):
    """Chat-completion client that POSTs JSON with a bearer token."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxChatCompletionClient":
        """Create a chat-completion client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def complete(
        self,
        *,
        model: str,
        prompt: str,
        image_data_url: str,
        max_tokens: int,
        timeout: float,
    ) -> str:
        """Send one multimodal completion request and return the message text."""
        url = f"{self.base_url.rstrip('/')}/chat/completions"
        payload = {
            "model": model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt},
                        {"type": "image_url", "image_url": {"url": image_data_url}},
                    ],
                }
            ],
            "max_tokens": max_tokens,
        }
        try:
            response = await self.http_client.post(
                url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                json=payload,
                timeout=timeout,
            )
        except httpx.TimeoutException as exc:
            raise TransportError(f"Chat completion timed out after {timeout}s") from exc
        except httpx.DecodingError as exc:
            raise MalformedResponseError(
                f"Chat completion body could not be decoded: {exc}"
            ) from exc
        except httpx.RequestError as exc:
            raise TransportError(f"Chat completion request failed: {exc}") from exc

        if not response.is_success:
            _logger.warning(
                "Chat completion HTTP %s: %s", response.status_code, response.text[:500]
            )
            raise HTTPError(response.status_code, response.text)
        if not response.content.strip():
            raise EmptyResponseError("Chat completion returned an empty body")
        try:
            body = response.json()
        except ValueError as exc:
            raise MalformedResponseError("Chat completion body is not JSON") from exc
        return extract_message_content(body)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def extract_message_content(body: object) -> str:
    """Return choices[0].message.content from a completion body."""
    try:
        content = body["choices"][0]["message"]["content"]  # type: ignore[index]
    except (KeyError, IndexError, TypeError) as exc:
        raise MalformedResponseError(
            "Chat completion body lacks choices[0].message.content"
        ) from exc
    if content is None or content == "":
        raise EmptyResponseError("Chat completion message content is empty")
    if not isinstance(content, str):
        raise MalformedResponseError("Chat completion message content is not text")
    return content
