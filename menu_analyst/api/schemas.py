from datetime import datetime

from pydantic import BaseModel, Field

from menu_analyst.application.conversation.controller import ConversationController
from menu_analyst.domain.entities.conversation_state import ConversationState
from menu_analyst.domain.entities.message import MessageRole


class TextRequestSchema(BaseModel):
    text: str


class OptionRequestSchema(BaseModel):
    option: str


class MessageSchema(BaseModel):
    role: MessageRole
    content: str
    options: list[str] = Field(default_factory=list)
    created_at: datetime


class ConversationResponseSchema(BaseModel):
    state: ConversationState
    busy: bool
    messages: list[MessageSchema]

    @classmethod
    def from_controller(cls, controller: ConversationController) -> "ConversationResponseSchema":
        snapshot = controller.snapshot()
        return cls(
            state=snapshot.state,
            busy=snapshot.busy,
            messages=[
                MessageSchema(role=m.role, content=m.content, options=list(m.options), created_at=m.created_at)
                for m in controller.message_log.messages()
            ],
        )
