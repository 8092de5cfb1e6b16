from __future__ import annotations

import asyncio
from typing import Callable

from menu_analyst.application.ports.scheduler import SchedulerPort


class AsyncioScheduler(SchedulerPort):
    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> None:
        if delay_seconds <= 0:
            callback()
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop (e.g. sync harness): skip the pacing delay.
            callback()
            return
        loop.call_later(delay_seconds, callback)


class ImmediateScheduler(SchedulerPort):
    """Runs callbacks right away; keeps tests deterministic."""

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> None:
        callback()
