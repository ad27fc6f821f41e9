"""Shared plumbing for the browsing engines: error slot, loading flag, debounced search."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from .config import Settings
from .debounce import CancellationToken, Debouncer, TokenSource
from .errors import LamanError
from .observable import Observable

logger = logging.getLogger(__name__)


class BrowseEngine(Observable):
    """Base for engines that query the service in response to user input.

    Each engine keeps one ``error`` slot holding only the latest failure. A
    successful query or ``dismiss_error()`` clears it.
    """

    def __init__(self, settings: Settings | None = None, name: str = "search"):
        super().__init__()
        self.settings = settings or Settings()
        self.search_text = ""
        self.is_loading = False
        self.error: LamanError | None = None
        self._debouncer = Debouncer(self.settings.search_debounce, name=name)
        self._queries = TokenSource()

    @property
    def error_message(self) -> str | None:
        return str(self.error) if self.error is not None else None

    @property
    def search_query(self) -> str | None:
        """Trimmed search text, or None when blank."""
        return self.search_text.strip() or None

    def dismiss_error(self) -> None:
        if self.error is not None:
            self.error = None
            self._changed()

    def search_text_changed(self, text: str) -> None:
        """
        Record the text at once and run the search after the quiet period.

        Each call cancels the search scheduled by the previous one and drops
        the results of a query still in flight. Must be called from a running
        event loop.
        """
        self.search_text = text
        self._queries.cancel()
        self._changed()
        query = text.strip() or None
        self._debouncer.schedule(lambda token: self._run_debounced(token, query))

    async def _run_debounced(self, token: CancellationToken, query: str | None) -> None:
        if token.cancelled:
            return
        await self._search(query)

    async def _search(self, query: str | None) -> None:
        """Run the query for a settled search text. Implemented by subclasses."""
        raise NotImplementedError

    async def wait_for_search(self) -> None:
        """Wait for a scheduled search (if any) to run and finish."""
        await self._debouncer.wait()

    async def aclose(self) -> None:
        """Cancel scheduled searches and drop results of in-flight queries."""
        await self._debouncer.aclose()
        self._queries.cancel()
        if self.is_loading:
            self.is_loading = False
            self._changed()

    async def _run_query(self, fetch: Callable[[], Awaitable[list]], publish: Callable[[list], None]) -> None:
        """
        Fetch and publish a result list, latest query wins.

        Results of a query superseded by a newer one are dropped, and the
        loading flag is left to the newer query. On failure the previous list
        stays in place and the error is recorded.
        """
        token = self._queries.issue()
        self.is_loading = True
        self._changed()
        try:
            results = await fetch()
        except LamanError as e:
            if self._queries.is_current(token):
                self._record_error(e)
        else:
            if self._queries.is_current(token):
                publish(results)
                self.error = None
            else:
                logger.debug("%s: dropping stale results", self._debouncer.name)
        finally:
            if self._queries.is_current(token):
                self.is_loading = False
                self._changed()

    def _record_error(self, error: LamanError) -> None:
        logger.warning("%s failed: %s", self._debouncer.name, error)
        self.error = error
