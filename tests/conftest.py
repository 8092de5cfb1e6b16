from __future__ import annotations

import asyncio
import json

import pytest

from menu_analyst.application.conversation.controller import ConversationController
from menu_analyst.application.exceptions import AnalysisUpstreamError
from menu_analyst.application.ports.analysis_service import AnalysisServicePort
from menu_analyst.domain.entities.menu import StructuredMenu
from menu_analyst.infrastructure.scheduling.asyncio_scheduler import ImmediateScheduler


class FakeAnalysisService(AnalysisServicePort):
    """Records every call; `fail` names methods that raise, `gate` holds calls until set."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.fail: set[str] = set()
        self.gate: asyncio.Event | None = None

    async def _enter(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if self.gate is not None:
            await self.gate.wait()
        if name in self.fail:
            raise AnalysisUpstreamError(f"{name} failed")

    async def structure_from_text(self, text: str) -> StructuredMenu:
        await self._enter("structure_from_text", text)
        return StructuredMenu(payload=json.dumps([{"name": text, "price": "1"}]))

    async def structure_from_image(self, image_bytes: bytes, mime_type: str) -> StructuredMenu:
        await self._enter("structure_from_image", image_bytes, mime_type)
        return StructuredMenu(payload=json.dumps([{"name": "from image", "price": "2"}]))

    async def analyze(self, menu: StructuredMenu, criteria: str) -> str:
        await self._enter("analyze", menu, criteria)
        return f"analysis of {criteria}"

    async def compare(self, menu_a: StructuredMenu, menu_b: StructuredMenu, keywords: str | None) -> str:
        await self._enter("compare", menu_a, menu_b, keywords)
        return f"comparison ({keywords})"


@pytest.fixture
def service() -> FakeAnalysisService:
    return FakeAnalysisService()


@pytest.fixture
def controller(service: FakeAnalysisService) -> ConversationController:
    return ConversationController(analysis_service=service, scheduler=ImmediateScheduler(), reset_delay_seconds=0)
