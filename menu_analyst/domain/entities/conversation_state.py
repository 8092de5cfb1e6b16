from enum import Enum


class ConversationState(str, Enum):
    INITIAL = "initial"
    AWAITING_WORKFLOW_CHOICE = "awaiting_workflow_choice"
    AWAITING_ANALYSIS_CRITERIA = "awaiting_analysis_criteria"
    AWAITING_COMPETITOR_MENU = "awaiting_competitor_menu"
    AWAITING_COMPARISON_KEYWORDS = "awaiting_comparison_keywords"
