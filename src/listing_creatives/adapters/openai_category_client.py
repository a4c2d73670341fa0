"""OpenAI Responses API client for photo classification."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from listing_creatives.services.categorizer import CategoryClient


@dataclass
class OpenAICategoryClient(CategoryClient):
    """Category client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAICategoryClient":
        """Create an OpenAI category client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def classify(
        self,
        *,
        model: str,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Call OpenAI Responses API with a strict JSON schema."""
        response = await self.client.responses.create(
            model=model,
            input=[
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": prompt},
                        {
                            "type": "input_image",
                            "image_url": image_data_url,
                            "detail": "low",
                        },
                    ],
                }
            ],
            text={
                "format": {
                    "type": "json_schema",
                    "name": "photo_category",
                    "strict": True,
                    "schema": schema,
                }
            },
            store=False,
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return json.loads(output_text)

    async def close(self) -> None:
        """Close the underlying OpenAI HTTP client."""
        await self.client.close()
