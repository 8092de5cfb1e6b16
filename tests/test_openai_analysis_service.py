from __future__ import annotations

import base64
import json
from types import SimpleNamespace

import pytest

from menu_analyst.application.exceptions import AnalysisContractError, AnalysisUpstreamError
from menu_analyst.domain.entities.menu import StructuredMenu
from menu_analyst.infrastructure.analysis.openai_service import OpenAIAnalysisService
from menu_analyst.infrastructure.analysis.prompts import SYSTEM_INSTRUCTION


class StubCompletions:
    def __init__(self, content: str | None = None, error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.requests: list[dict] = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))])


def _service(completions: StubCompletions) -> OpenAIAnalysisService:
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenAIAnalysisService(client=client)


@pytest.mark.asyncio
async def test_structure_from_text_returns_serialized_dishes():
    completions = StubCompletions(
        json.dumps({"dishes": [{"name": " Margherita ", "price": "8€"}, {"name": "Tiramisu", "description": "house", "price": 5}]})
    )

    menu = await _service(completions).structure_from_text("Margherita, 8€\nTiramisu, 5")

    assert json.loads(menu.payload) == [
        {"name": "Margherita", "price": "8€"},
        {"name": "Tiramisu", "description": "house", "price": 5},
    ]
    request = completions.requests[0]
    assert request["response_format"] == {"type": "json_object"}
    assert "Tiramisu, 5" in request["messages"][1]["content"]


@pytest.mark.asyncio
async def test_structure_accepts_bare_array():
    completions = StubCompletions(json.dumps([{"name": "Capricciosa", "price": "9€"}]))

    menu = await _service(completions).structure_from_text("Capricciosa, 9€")

    assert json.loads(menu.payload) == [{"name": "Capricciosa", "price": "9€"}]


@pytest.mark.asyncio
async def test_structure_from_image_sends_data_url():
    completions = StubCompletions(json.dumps({"dishes": [{"name": "Soup", "price": "4"}]}))

    await _service(completions).structure_from_image(b"\x89PNG", "image/png")

    parts = completions.requests[0]["messages"][1]["content"]
    expected = "data:image/png;base64," + base64.b64encode(b"\x89PNG").decode("ascii")
    assert parts[0]["image_url"]["url"] == expected
    assert parts[1]["type"] == "text"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "content",
    [
        "not json",
        json.dumps({"dishes": [{"name": "No price"}]}),
        json.dumps({"dishes": []}),
        "",
    ],
)
async def test_structure_contract_violations(content):
    with pytest.raises(AnalysisContractError):
        await _service(StubCompletions(content)).structure_from_text("menu")


@pytest.mark.asyncio
async def test_provider_failure_is_upstream_error():
    completions = StubCompletions(error=ConnectionError("network down"))

    with pytest.raises(AnalysisUpstreamError):
        await _service(completions).analyze(StructuredMenu(payload="[]"), "prices")


@pytest.mark.asyncio
async def test_analyze_uses_persona_and_criteria():
    completions = StubCompletions("**Great menu**")
    menu = StructuredMenu(payload='[{"name": "Soup", "price": "4"}]')

    text = await _service(completions).analyze(menu, "gluten-free")

    assert text == "**Great menu**"
    messages = completions.requests[0]["messages"]
    assert messages[0]["content"] == SYSTEM_INSTRUCTION
    assert '"gluten-free"' in messages[1]["content"]
    assert menu.payload in messages[1]["content"]
    assert "response_format" not in completions.requests[0]


@pytest.mark.asyncio
async def test_compare_prompt_depends_on_keywords():
    completions = StubCompletions("comparison")
    service = _service(completions)
    mine = StructuredMenu(payload='[{"name": "A", "price": "1"}]')
    theirs = StructuredMenu(payload='[{"name": "B", "price": "2"}]')

    await service.compare(mine, theirs, "pasta prices")
    await service.compare(mine, theirs, None)

    focused = completions.requests[0]["messages"][1]["content"]
    general = completions.requests[1]["messages"][1]["content"]
    assert '"pasta prices"' in focused
    assert "general comparison" in general
    assert mine.payload in general and theirs.payload in general
