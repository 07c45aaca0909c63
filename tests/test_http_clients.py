"""Tests for HTTP-based adapters."""

import asyncio
import json

import httpx
import pytest
from openai import AsyncOpenAI

from calorie_coach.adapters.openai_meal_client import OpenAIMealPlanClient


def _completion(content: str | None, choices: bool = True) -> dict[str, object]:
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "gpt-4o-mini",
        "choices": (
            [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": content},
                    "finish_reason": "stop",
                }
            ]
            if choices
            else []
        ),
    }


def _client(handler) -> OpenAIMealPlanClient:  # type: ignore[no-untyped-def]
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OpenAIMealPlanClient(
        client=AsyncOpenAI(api_key="test-key", http_client=http_client, max_retries=0),
        http_client=http_client,
    )


def _complete(client: OpenAIMealPlanClient) -> str:
    async def run() -> str:
        try:
            return await client.complete(
                model="gpt-4o-mini",
                system_prompt="Be strict about JSON.",
                prompt="Plan a day",
                temperature=0.6,
            )
        finally:
            await client.close()

    return asyncio.run(run())


def test_openai_meal_client_sends_json_mode_request() -> None:
    seen: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("/chat/completions")
        seen.append(json.loads(request.content.decode()))
        return httpx.Response(200, json=_completion('{"breakfast": []}'))

    result = _complete(_client(handler))

    assert result == '{"breakfast": []}'
    assert seen[0]["model"] == "gpt-4o-mini"
    assert seen[0]["response_format"] == {"type": "json_object"}
    assert seen[0]["temperature"] == 0.6
    assert seen[0]["messages"][1] == {"role": "user", "content": "Plan a day"}


def test_openai_meal_client_rejects_empty_content() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_completion(None))

    with pytest.raises(RuntimeError):
        _complete(_client(handler))


def test_openai_meal_client_rejects_missing_choices() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_completion("{}", choices=False))

    with pytest.raises(RuntimeError):
        _complete(_client(handler))


def test_openai_meal_client_create_and_close() -> None:
    client = OpenAIMealPlanClient.create(api_key="test-key", timeout_seconds=5.0)

    assert client.http_client is not None
    asyncio.run(client.close())
    assert client.http_client.is_closed
