"""Tests for the OpenAI analysis adapter."""

import asyncio

import pytest

from meal_lens.adapters.openai_analysis_client import OpenAIAnalysisClient
from tests.conftest import TEMPLATE_ANSWER


class _FakeResponses:
    def __init__(self, output_text: str) -> None:
        self.output_text = output_text
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return type("Resp", (), {"output_text": self.output_text})()


class _FakeOpenAI:
    def __init__(self, output_text: str = TEMPLATE_ANSWER) -> None:
        self.responses = _FakeResponses(output_text)
        self.closed = False

    async def close(self) -> None:
        self.closed = True


def test_openai_analysis_client_returns_text() -> None:
    fake = _FakeOpenAI()
    client = OpenAIAnalysisClient(client=fake)

    result = asyncio.run(
        client.describe(
            model="gpt-5.2",
            image_data_url="data:image/jpeg;base64,ZmFrZQ==",
            prompt="Analyze the food",
        )
    )

    assert result == TEMPLATE_ANSWER
    payload = fake.responses.last_payload
    assert payload is not None
    content = payload["input"][0]["content"]  # type: ignore[index]
    assert content[0] == {"type": "input_text", "text": "Analyze the food"}
    assert content[1]["image_url"] == "data:image/jpeg;base64,ZmFrZQ=="
    assert "temperature" not in payload
    assert "reasoning" not in payload


def test_openai_analysis_client_passes_optional_settings() -> None:
    fake = _FakeOpenAI()
    client = OpenAIAnalysisClient(client=fake)

    asyncio.run(
        client.describe(
            model="gpt-4.1-mini",
            image_data_url="data:image/png;base64,ZmFrZQ==",
            prompt="Analyze",
            reasoning_effort="low",
            temperature=0.0,
            store=True,
        )
    )

    payload = fake.responses.last_payload
    assert payload is not None
    assert payload["temperature"] == 0.0
    assert payload["reasoning"] == {"effort": "low"}
    assert payload["store"] is True


def test_openai_analysis_client_rejects_empty_answer() -> None:
    client = OpenAIAnalysisClient(client=_FakeOpenAI(output_text=""))

    with pytest.raises(RuntimeError):
        asyncio.run(
            client.describe(
                model="gpt-5.2",
                image_data_url="data:image/jpeg;base64,ZmFrZQ==",
                prompt="Analyze",
            )
        )


def test_openai_analysis_client_close() -> None:
    fake = _FakeOpenAI()

    asyncio.run(OpenAIAnalysisClient(client=fake).close())

    assert fake.closed
