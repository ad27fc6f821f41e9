"""Cancellation tokens and debounced scheduling on the asyncio loop."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


class CancellationToken:
    """Validity flag handed to a scheduled or in-flight operation.

    An operation must check ``cancelled`` after every await and before touching
    shared state.
    """

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class TokenSource:
    """Issues tokens where each new token invalidates the previous one."""

    def __init__(self) -> None:
        self._current: CancellationToken | None = None

    def issue(self) -> CancellationToken:
        self.cancel()
        self._current = CancellationToken()
        return self._current

    def is_current(self, token: CancellationToken) -> bool:
        return token is self._current and not token.cancelled

    def cancel(self) -> None:
        if self._current is not None:
            self._current.cancel()


class Debouncer:
    """Runs an action once the input has been quiet for ``delay`` seconds.

    Scheduling again before the delay elapses cancels the pending action. Once
    an action has started it is left to finish; it sees its token cancelled if
    it was superseded meanwhile.
    """

    def __init__(self, delay: float, name: str = "debounce"):
        self.delay = delay
        self.name = name
        self._tokens = TokenSource()
        self._task: asyncio.Task[None] | None = None
        self._sleeping = False

    @property
    def pending(self) -> bool:
        """True while an action is waiting for the quiet period to elapse."""
        return self._task is not None and not self._task.done() and self._sleeping

    def schedule(self, action: Callable[[CancellationToken], Awaitable[None]]) -> CancellationToken:
        """
        Schedule ``action`` after the quiet period, cancelling any pending one.

        Must be called from a running event loop.
        """
        self.cancel()
        token = self._tokens.issue()
        self._sleeping = True
        self._task = asyncio.get_running_loop().create_task(
            self._run(token, action), name=self.name
        )
        self._task.add_done_callback(self._log_failure)
        return token

    async def _run(self, token: CancellationToken, action: Callable[[CancellationToken], Awaitable[None]]) -> None:
        await asyncio.sleep(self.delay)
        if token.cancelled:
            return
        self._sleeping = False
        await action(token)

    def _log_failure(self, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("%s: action failed", self.name, exc_info=error)

    def cancel(self) -> None:
        """Invalidate the latest token and stop a timer that has not fired yet."""
        self._tokens.cancel()
        if self.pending:
            logger.debug("%s: cancelling pending action", self.name)
            self._task.cancel()
        self._sleeping = False

    async def wait(self) -> None:
        """Wait until the latest scheduled action (if any) has finished."""
        task = self._task
        if task is not None and not task.done():
            await asyncio.wait([task])

    async def aclose(self) -> None:
        """Cancel the latest action, including one that is already running."""
        self._tokens.cancel()
        task, self._task = self._task, None
        self._sleeping = False
        if task is not None and not task.done():
            task.cancel()
            await asyncio.wait([task])
