"""OpenAI Chat Completions client for meal plan generation."""

from dataclasses import dataclass

import httpx
from openai import AsyncOpenAI

from calorie_coach.services.remote_plans import MealPlanClient


@dataclass
class OpenAIMealPlanClient(MealPlanClient):
    """Meal plan client backed by OpenAI JSON-mode chat completions."""

    client: AsyncOpenAI
    http_client: httpx.AsyncClient | None = None

    @classmethod
    def create(cls, api_key: str, timeout_seconds: float) -> "OpenAIMealPlanClient":
        """Create an OpenAI client with a managed httpx session."""
        http_client = httpx.AsyncClient(timeout=timeout_seconds)
        return cls(
            client=AsyncOpenAI(api_key=api_key, http_client=http_client, max_retries=0),
            http_client=http_client,
        )

    async def complete(
        self,
        *,
        model: str,
        system_prompt: str,
        prompt: str,
        temperature: float,
    ) -> str:
        """Call the Chat Completions API in JSON mode and return the content."""
        completion = await self.client.chat.completions.create(
            model=model,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            temperature=temperature,
        )
        if not completion.choices:
            raise RuntimeError("OpenAI returned no choices")
        content = completion.choices[0].message.content
        if not content:
            raise RuntimeError("OpenAI returned an empty response")
        return content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self.http_client is not None:
            await self.http_client.aclose()
