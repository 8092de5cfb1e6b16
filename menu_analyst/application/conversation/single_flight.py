from __future__ import annotations

from types import TracebackType


class SingleFlightGuard:
    """
    Non-reentrant busy flag held for the duration of one state transition.

    `try_acquire()` returns None when the guard is already held; otherwise it
    returns the guard itself, to be used as a context manager so the flag is
    released on every exit path.
    """

    def __init__(self) -> None:
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    def try_acquire(self) -> "SingleFlightGuard | None":
        if self._busy:
            return None
        self._busy = True
        return self

    def release(self) -> None:
        self._busy = False

    def __enter__(self) -> "SingleFlightGuard":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()
