from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, TypeVar

from menu_analyst.application.conversation.message_log import MessageLog
from menu_analyst.application.conversation.session_context import SessionContext
from menu_analyst.application.exceptions import AnalysisServiceError, AnalysisTimeoutError
from menu_analyst.application.ports.analysis_service import AnalysisServicePort
from menu_analyst.application.ports.scheduler import SchedulerPort
from menu_analyst.domain.entities.conversation_state import ConversationState
from menu_analyst.domain.entities.menu import StructuredMenu
from menu_analyst.domain.entities.message import MessageRole
from menu_analyst.domain.entities.session_snapshot import SessionSnapshot

T = TypeVar("T")

ANALYZE_OPTION = "Analyze this menu."
COMPARE_OPTION = "Compare this menu to another."
WORKFLOW_OPTIONS = (ANALYZE_OPTION, COMPARE_OPTION)

# "ne" / "preskoči" kept for users typing the Croatian answers.
SKIP_KEYWORDS = frozenset({"no", "skip", "ne", "preskoči"})

GREETING = (
    "Hello! I'm GastroAnalyst, your AI assistant for menu optimization. "
    "Please enter your menu: you can paste the text or attach an image."
)
MENU_STRUCTURED = "Thank you. I've processed your menu and it is now structured. What would you like to do?"
MENU_STRUCTURED_FROM_IMAGE = (
    "Thank you. I've processed your menu from the image and it is now structured. What would you like to do?"
)
ASK_CRITERIA = (
    "How would you like to analyze your menu? Should we look at keywords, price range, "
    "dish type or a specific theme (e.g. 'gluten-free')?"
)
ASK_COMPETITOR_MENU = "Please enter the competitor's menu (text or image)."
ASK_KEYWORDS = (
    "The competitor's menu has been processed. Are there specific keywords you want the comparison "
    "to focus on (e.g. 'pasta prices', 'breakfast offer', 'premium ingredients')? "
    "If not, just say 'No' or 'Skip' for a general comparison."
)
ASK_KEYWORDS_FROM_IMAGE = (
    "The competitor's menu from the image has been processed. Are there specific keywords you want the "
    "comparison to focus on (e.g. 'pasta prices', 'breakfast offer', 'premium ingredients')? "
    "If not, just say 'No' or 'Skip' for a general comparison."
)
READY_FOR_NEW_MENU = "I'm ready for a new task. Enter a new menu to analyze."
GENERIC_ERROR = "Something went wrong. Please try again."
IMAGE_ERROR = "Something went wrong while processing the image. Please try again."


class ConversationController:
    """
    State machine driving the menu analysis conversation.

    Every handler checks the single-flight guard synchronously before its
    first await, so at most one analysis call is in flight. Service failures
    are turned into one assistant message; the state is not advanced.
    """

    def __init__(
        self,
        analysis_service: AnalysisServicePort,
        scheduler: SchedulerPort,
        message_log: MessageLog | None = None,
        reset_delay_seconds: float = 1.0,
        call_timeout_seconds: float | None = None,
    ) -> None:
        self._service = analysis_service
        self._scheduler = scheduler
        self._log = message_log if message_log is not None else MessageLog()
        self._context = SessionContext()
        self._reset_delay = reset_delay_seconds
        self._call_timeout = call_timeout_seconds
        self._started = False
        self._logger = logging.getLogger(__name__)

    @property
    def message_log(self) -> MessageLog:
        return self._log

    @property
    def state(self) -> ConversationState:
        return self._context.state

    @property
    def busy(self) -> bool:
        return self._context.busy

    def snapshot(self) -> SessionSnapshot:
        return self._context.snapshot()

    def start(self) -> None:
        if self._started:
            return
        self._started = True
        self._assistant(GREETING)

    async def submit_text(self, text: str) -> None:
        text = (text or "").strip()
        if not text or self._context.busy:
            self._logger.debug("Text ignored", extra={"reason": "empty_or_busy", "state": self.state.value})
            return
        if self._context.state is ConversationState.AWAITING_WORKFLOW_CHOICE:
            self._logger.debug("Text ignored", extra={"reason": "awaiting_option", "state": self.state.value})
            return

        guard = self._context.guard.try_acquire()
        if guard is None:
            return

        with guard:
            self._user(text)
            state = self._context.state
            try:
                if state is ConversationState.INITIAL:
                    menu = await self._call(self._service.structure_from_text(text))
                    self._accept_user_menu(menu, from_image=False)
                elif state is ConversationState.AWAITING_ANALYSIS_CRITERIA:
                    analysis = await self._call(self._service.analyze(self._require_user_menu(), text))
                    self._assistant(analysis)
                    self._reset()
                elif state is ConversationState.AWAITING_COMPETITOR_MENU:
                    menu = await self._call(self._service.structure_from_text(text))
                    self._accept_competitor_menu(menu, from_image=False)
                elif state is ConversationState.AWAITING_COMPARISON_KEYWORDS:
                    keywords = None if text.lower() in SKIP_KEYWORDS else text
                    competitor_menu = self._context.competitor_menu
                    if competitor_menu is None:
                        raise RuntimeError("competitor menu missing while awaiting comparison keywords")
                    comparison = await self._call(
                        self._service.compare(self._require_user_menu(), competitor_menu, keywords)
                    )
                    self._assistant(comparison)
                    self._context.competitor_menu = None
                    self._reset()
            except AnalysisServiceError as e:
                self._logger.warning(
                    "Analysis service call failed",
                    extra={"event": "text", "state": state.value, "error": str(e)},
                )
                self._assistant(GENERIC_ERROR)

    async def select_option(self, option: str) -> None:
        if not option:
            self._logger.debug("Option ignored", extra={"reason": "empty", "state": self.state.value})
            return
        if self._context.busy or self._context.state is not ConversationState.AWAITING_WORKFLOW_CHOICE:
            self._logger.debug("Option ignored", extra={"option": option, "state": self.state.value})
            return

        guard = self._context.guard.try_acquire()
        if guard is None:
            return

        with guard:
            self._user(option)
            if option == ANALYZE_OPTION:
                self._transition(ConversationState.AWAITING_ANALYSIS_CRITERIA, event="option")
                self._assistant(ASK_CRITERIA)
            elif option == COMPARE_OPTION:
                self._transition(ConversationState.AWAITING_COMPETITOR_MENU, event="option")
                self._assistant(ASK_COMPETITOR_MENU)
            else:
                self._logger.debug("Unknown option", extra={"option": option, "reason": "unrecognized"})

    async def submit_image(self, image_bytes: bytes | None, mime_type: str, filename: str | None = None) -> None:
        if self._context.busy or not image_bytes:
            self._logger.debug("Image ignored", extra={"reason": "empty_or_busy", "state": self.state.value})
            return

        guard = self._context.guard.try_acquire()
        if guard is None:
            return

        with guard:
            self._user(f"Image attached: {filename}" if filename else "Image attached.")
            state = self._context.state
            if state not in (ConversationState.INITIAL, ConversationState.AWAITING_COMPETITOR_MENU):
                # Accepted as a turn, but nothing to structure in this state.
                self._logger.info("Image not used in this state", extra={"state": state.value, "mime_type": mime_type})
                return
            try:
                menu = await self._call(self._service.structure_from_image(image_bytes, mime_type))
            except AnalysisServiceError as e:
                self._logger.warning(
                    "Image structuring failed",
                    extra={"event": "image", "state": state.value, "mime_type": mime_type, "error": str(e)},
                )
                self._assistant(IMAGE_ERROR)
                return

            if state is ConversationState.INITIAL:
                self._accept_user_menu(menu, from_image=True)
            else:
                self._accept_competitor_menu(menu, from_image=True)

    def _accept_user_menu(self, menu: StructuredMenu, from_image: bool) -> None:
        self._context.user_menu = menu
        self._assistant(MENU_STRUCTURED_FROM_IMAGE if from_image else MENU_STRUCTURED, WORKFLOW_OPTIONS)
        self._transition(ConversationState.AWAITING_WORKFLOW_CHOICE, event="image" if from_image else "text")

    def _accept_competitor_menu(self, menu: StructuredMenu, from_image: bool) -> None:
        self._context.competitor_menu = menu
        self._assistant(ASK_KEYWORDS_FROM_IMAGE if from_image else ASK_KEYWORDS)
        self._transition(ConversationState.AWAITING_COMPARISON_KEYWORDS, event="image" if from_image else "text")

    def _require_user_menu(self) -> StructuredMenu:
        menu = self._context.user_menu
        if menu is None:
            raise RuntimeError(f"user menu missing in state {self._context.state.value}")
        return menu

    def _reset(self) -> None:
        self._transition(ConversationState.INITIAL, event="reset")
        self._context.clear_menus()
        self._scheduler.call_later(self._reset_delay, lambda: self._assistant(READY_FOR_NEW_MENU))

    async def _call(self, call: Awaitable[T]) -> T:
        if self._call_timeout is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=self._call_timeout)
        except asyncio.TimeoutError as e:
            raise AnalysisTimeoutError(f"Analysis call exceeded {self._call_timeout}s") from e

    def _transition(self, new_state: ConversationState, event: str) -> None:
        self._logger.info(
            "State transition %s -> %s",
            self._context.state.value,
            new_state.value,
            extra={"event": event, "state": new_state.value},
        )
        self._context.state = new_state

    def _user(self, content: str) -> None:
        self._log.append(MessageRole.USER, content)

    def _assistant(self, content: str, options: tuple[str, ...] = ()) -> None:
        self._log.append(MessageRole.ASSISTANT, content, options)
