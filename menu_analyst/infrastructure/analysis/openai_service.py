from __future__ import annotations

import base64
import json
import logging
from typing import Any

from openai import AsyncOpenAI
from pydantic import ValidationError

from menu_analyst.application.exceptions import AnalysisContractError, AnalysisUpstreamError
from menu_analyst.application.ports.analysis_service import AnalysisServicePort
from menu_analyst.core.config import settings
from menu_analyst.domain.entities.menu import StructuredMenu
from menu_analyst.infrastructure.analysis.models import MenuExtractionResponse
from menu_analyst.infrastructure.analysis.prompts import (
    STRUCTURE_SYSTEM_INSTRUCTION,
    SYSTEM_INSTRUCTION,
    build_analyze_prompt,
    build_compare_prompt,
    build_structure_image_prompt,
    build_structure_text_prompt,
)


class OpenAIAnalysisService(AnalysisServicePort):
    """
    OpenAI-backed adapter implementing AnalysisServicePort.

    Contract guarantees:
    - structure_* returns a StructuredMenu holding a JSON array of
      {name, description?, price} records
    - analyze / compare return non-empty markdown text
    - Raises:
        AnalysisUpstreamError: networking/provider failures
        AnalysisContractError: invalid JSON, wrong shape or empty answer
    """

    def __init__(self, client: AsyncOpenAI | None = None) -> None:
        self.client = client if client is not None else AsyncOpenAI(api_key=settings.OPENAI_API_KEY)
        self._logger = logging.getLogger(__name__)

    async def structure_from_text(self, text: str) -> StructuredMenu:
        content = await self._call_text(
            model=settings.OPENAI_MODEL_STRUCTURE,
            system=STRUCTURE_SYSTEM_INSTRUCTION,
            user_content=build_structure_text_prompt(text),
            temperature=settings.OPENAI_TEMPERATURE_STRUCTURE,
            use_json_mode=True,
        )
        return _to_structured_menu(content, what="structure")

    async def structure_from_image(self, image_bytes: bytes, mime_type: str) -> StructuredMenu:
        encoded = base64.b64encode(image_bytes).decode("ascii")
        user_content: list[dict[str, Any]] = [
            {
                "type": "image_url",
                "image_url": {"url": f"data:{mime_type};base64,{encoded}"},
            },
            {"type": "text", "text": build_structure_image_prompt()},
        ]
        content = await self._call_text(
            model=settings.OPENAI_MODEL_STRUCTURE,
            system=STRUCTURE_SYSTEM_INSTRUCTION,
            user_content=user_content,
            temperature=settings.OPENAI_TEMPERATURE_STRUCTURE,
            use_json_mode=True,
        )
        return _to_structured_menu(content, what="image structure")

    async def analyze(self, menu: StructuredMenu, criteria: str) -> str:
        return await self._call_text(
            model=settings.OPENAI_MODEL_ANALYZE,
            system=SYSTEM_INSTRUCTION,
            user_content=build_analyze_prompt(menu.payload, criteria),
            temperature=settings.OPENAI_TEMPERATURE_ANALYZE,
        )

    async def compare(self, menu_a: StructuredMenu, menu_b: StructuredMenu, keywords: str | None) -> str:
        return await self._call_text(
            model=settings.OPENAI_MODEL_ANALYZE,
            system=SYSTEM_INSTRUCTION,
            user_content=build_compare_prompt(menu_a.payload, menu_b.payload, keywords),
            temperature=settings.OPENAI_TEMPERATURE_ANALYZE,
        )

    async def _call_text(
        self,
        model: str,
        system: str,
        user_content: str | list[dict[str, Any]],
        temperature: float,
        use_json_mode: bool = False,
    ) -> str:
        try:
            kwargs: dict[str, Any] = {
                "model": model,
                "messages": [
                    {"role": "system", "content": system},
                    {"role": "user", "content": user_content},
                ],
                "temperature": temperature,
                "max_tokens": settings.OPENAI_MAX_TOKENS,
            }
            if use_json_mode:
                kwargs["response_format"] = {"type": "json_object"}

            resp = await self.client.chat.completions.create(**kwargs)
        except Exception as e:
            raise AnalysisUpstreamError(f"OpenAI API error: {e}") from e

        content = (resp.choices[0].message.content or "").strip() if resp.choices else ""
        if not content:
            raise AnalysisContractError("Model returned empty response text.")

        self._logger.debug("Model call complete", extra={"service": model})
        return content


def _to_structured_menu(text: str, what: str) -> StructuredMenu:
    try:
        data = json.loads(text)
    except Exception:
        snippet = text[:200].replace("\n", " ")
        raise AnalysisContractError(f"{what.capitalize()}: invalid JSON. Snippet: {snippet!r}")

    # Some models answer with the bare array despite the requested wrapper.
    if isinstance(data, list):
        data = {"dishes": data}

    try:
        parsed = MenuExtractionResponse.model_validate(data)
    except ValidationError as e:
        raise AnalysisContractError(f"{what.capitalize()}: invalid menu shape: {e}")

    if not parsed.dishes:
        raise AnalysisContractError(f"{what.capitalize()}: no dishes found.")

    dishes = [d.model_dump(exclude_none=True) for d in parsed.dishes]
    return StructuredMenu(payload=json.dumps(dishes, ensure_ascii=False))
