"""OpenAI SDK client for chat completions."""

from dataclasses import dataclass

import openai
from openai import AsyncOpenAI

from food_radar.domain.errors import (
    EmptyResponseError,
    HTTPError,
    MalformedResponseError,
    TransportError,
)
from food_radar.services.analysis import ChatCompletionClient


@dataclass
class OpenAIChatCompletionClient(ChatCompletionClient):
    """Chat-completion client backed by the OpenAI SDK."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "OpenAIChatCompletionClient":
        """Create an OpenAI chat-completion client without SDK retries."""
        client = AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0)
        return cls(client=client)

    async def complete(
        self,
        *,
        model: str,
        prompt: str,
        image_data_url: str,
        max_tokens: int,
        timeout: float,
    ) -> str:
        """Call the chat completions API with one text and one image part."""
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt},
                            {"type": "image_url", "image_url": {"url": image_data_url}},
                        ],
                    }
                ],
                max_tokens=max_tokens,
                timeout=timeout,
            )
        except openai.APIConnectionError as exc:
            raise TransportError(f"Chat completion request failed: {exc}") from exc
        except openai.APIStatusError as exc:
            raise HTTPError(exc.status_code, exc.response.text) from exc
        except openai.APIResponseValidationError as exc:
            raise MalformedResponseError(str(exc)) from exc

        if not response.choices:
            raise MalformedResponseError("Chat completion returned no choices")
        content = response.choices[0].message.content
        if not content:
            raise EmptyResponseError("Chat completion message content is empty")
        return content

    async def close(self) -> None:
        """Close the underlying SDK client."""
        await self.client.close()
