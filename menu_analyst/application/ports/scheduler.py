from abc import ABC, abstractmethod
from typing import Callable


class SchedulerPort(ABC):
    @abstractmethod
    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> None:
        raise NotImplementedError
