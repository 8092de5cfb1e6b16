from __future__ import annotations

import json

from menu_analyst.application.exceptions import AnalysisContractError
from menu_analyst.application.ports.analysis_service import AnalysisServicePort
from menu_analyst.domain.entities.menu import StructuredMenu


class MockAnalysisService(AnalysisServicePort):
    async def structure_from_text(self, text: str) -> StructuredMenu:
        dishes = []
        for line in text.splitlines():
            line = line.strip()
            if not line:
                continue
            name, sep, price = line.rpartition(",")
            if not sep:
                name, price = line, ""
            dishes.append({"name": name.strip(), "price": price.strip()})
        if not dishes:
            raise AnalysisContractError("Mock: no dishes found in menu text.")
        return StructuredMenu(payload=json.dumps(dishes, ensure_ascii=False))

    async def structure_from_image(self, image_bytes: bytes, mime_type: str) -> StructuredMenu:
        dishes = [{"name": f"Dish from {mime_type or 'image'}", "description": f"{len(image_bytes)} bytes", "price": "0"}]
        return StructuredMenu(payload=json.dumps(dishes, ensure_ascii=False))

    async def analyze(self, menu: StructuredMenu, criteria: str) -> str:
        count = len(json.loads(menu.payload))
        return (
            f"**Analysis: {criteria}**\n"
            f"- The menu lists {count} dish(es).\n"
            "- Mock analysis. Configure OPENAI_API_KEY for real results."
        )

    async def compare(self, menu_a: StructuredMenu, menu_b: StructuredMenu, keywords: str | None) -> str:
        focus = keywords or "general comparison"
        return (
            f"**Comparison: {focus}**\n"
            f"- Your menu: {len(json.loads(menu_a.payload))} dish(es).\n"
            f"- Competitor menu: {len(json.loads(menu_b.payload))} dish(es).\n"
            "- Mock comparison. Configure OPENAI_API_KEY for real results."
        )
