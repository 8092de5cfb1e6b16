from functools import lru_cache
import logging

from menu_analyst.application.conversation.controller import ConversationController
from menu_analyst.application.ports.analysis_service import AnalysisServicePort
from menu_analyst.core.config import settings
from menu_analyst.infrastructure.analysis.mock_service import MockAnalysisService
from menu_analyst.infrastructure.analysis.openai_service import OpenAIAnalysisService
from menu_analyst.infrastructure.scheduling.asyncio_scheduler import AsyncioScheduler


_controller: ConversationController | None = None


@lru_cache
def get_analysis_service() -> AnalysisServicePort:
    logger = logging.getLogger(__name__)
    if settings.OPENAI_API_KEY and settings.OPENAI_API_KEY.strip():
        logger.info("Using OpenAIAnalysisService")
        return OpenAIAnalysisService()
    logger.info("Using MockAnalysisService (OPENAI_API_KEY missing, ENV=%s)", settings.ENV)
    return MockAnalysisService()


def build_controller(analysis_service: AnalysisServicePort | None = None) -> ConversationController:
    controller = ConversationController(
        analysis_service=analysis_service or get_analysis_service(),
        scheduler=AsyncioScheduler(),
        reset_delay_seconds=settings.RESET_DELAY_SECONDS,
        call_timeout_seconds=settings.ANALYSIS_TIMEOUT_SECONDS,
    )
    controller.start()
    return controller


def get_controller() -> ConversationController:
    global _controller
    if _controller is None:
        _controller = build_controller()
    return _controller
