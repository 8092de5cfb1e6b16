from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from menu_analyst.domain.entities.message import Message, MessageRole

MessageListener = Callable[[Message], None]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MessageLog:
    """Append-only record of the conversation, in the order messages were added."""

    def __init__(self, clock: Callable[[], datetime] = _utc_now) -> None:
        self._messages: list[Message] = []
        self._listeners: list[MessageListener] = []
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def append(self, role: MessageRole, content: str, options: tuple[str, ...] | list[str] = ()) -> Message:
        created_at = self._clock()
        # Timestamps never go backwards, even if the wall clock does.
        if self._messages and created_at < self._messages[-1].created_at:
            created_at = self._messages[-1].created_at

        message = Message(role=role, content=content, created_at=created_at, options=tuple(options))
        self._messages.append(message)

        for listener in list(self._listeners):
            try:
                listener(message)
            except Exception:
                self._logger.exception("Message listener failed", extra={"reason": "listener_error"})
        return message

    def subscribe(self, listener: MessageListener) -> Callable[[], None]:
        """Register `listener` for every appended message. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def last(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    def __len__(self) -> int:
        return len(self._messages)
