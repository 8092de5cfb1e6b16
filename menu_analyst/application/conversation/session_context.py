from __future__ import annotations

from dataclasses import dataclass, field

from menu_analyst.application.conversation.single_flight import SingleFlightGuard
from menu_analyst.domain.entities.conversation_state import ConversationState
from menu_analyst.domain.entities.menu import StructuredMenu
from menu_analyst.domain.entities.session_snapshot import SessionSnapshot


@dataclass
class SessionContext:
    """
    Transient per-conversation state, written only by ConversationController.

    `competitor_menu` lives from leaving AWAITING_COMPETITOR_MENU until leaving
    AWAITING_COMPARISON_KEYWORDS (or a reset).
    """

    state: ConversationState = ConversationState.INITIAL
    user_menu: StructuredMenu | None = None
    competitor_menu: StructuredMenu | None = None
    guard: SingleFlightGuard = field(default_factory=SingleFlightGuard)

    @property
    def busy(self) -> bool:
        return self.guard.busy

    def clear_menus(self) -> None:
        self.user_menu = None
        self.competitor_menu = None

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            state=self.state,
            user_menu=self.user_menu,
            competitor_menu=self.competitor_menu,
            busy=self.busy,
        )
