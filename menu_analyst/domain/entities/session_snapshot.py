from __future__ import annotations

from dataclasses import dataclass

from menu_analyst.domain.entities.conversation_state import ConversationState
from menu_analyst.domain.entities.menu import StructuredMenu


@dataclass(frozen=True)
class SessionSnapshot:
    state: ConversationState
    user_menu: StructuredMenu | None = None
    competitor_menu: StructuredMenu | None = None
    busy: bool = False
