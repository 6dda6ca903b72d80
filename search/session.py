"""
Search Session

What a UI talks to: it pushes raw keystrokes and tag selections and reads
back the committed query, the pending flag and the current results.

Results are recomputed from (dataset, committed query, selected tag)
whenever the committed query or the tag changes. Tag changes apply
immediately; query changes go through the debouncer. Without a running
event loop the debouncer commits on a timer thread, so on_results is then
called from that thread.

Usage:
    async def main():
        session = SearchSession(searcher, on_results=render)
        session.set_query("lib")
        session.set_query("libre")
        await asyncio.sleep(0.6)   # render() receives the "libre" results
"""

import logging
from typing import Any, Callable, Optional

from .debounce import DEFAULT_INTERVAL, QueryDebouncer
from .hybrid_search import HybridSearcher, Results

logger = logging.getLogger(__name__)


class SearchSession:
    """One visitor's search state over a shared HybridSearcher."""

    def __init__(
        self,
        searcher: HybridSearcher,
        interval: float = DEFAULT_INTERVAL,
        scheduler=None,
        on_results: Optional[Callable[[Results], Any]] = None
    ):
        self.searcher = searcher
        self.on_results = on_results
        self.selected_tag = ''
        self.debouncer = QueryDebouncer(
            interval=interval,
            scheduler=scheduler,
            on_commit=self._on_commit
        )
        self._results: Results = searcher.search('', '')

    @property
    def raw_query(self) -> str:
        return self.debouncer.raw_query

    @property
    def committed_query(self) -> str:
        return self.debouncer.committed_query

    @property
    def is_searching(self) -> bool:
        return self.debouncer.is_searching

    @property
    def results(self) -> Results:
        return self._results

    def set_query(self, raw_query: str):
        self.debouncer.update(raw_query)

    def set_tag(self, tag: Optional[str]):
        """Select a category; None or "" clears the filter."""
        tag = tag if isinstance(tag, str) else ''
        if tag and tag not in self.searcher.tags:
            logger.warning(f"Unknown tag '{tag}'", extra={'tag': tag})
        if tag == self.selected_tag:
            return
        self.selected_tag = tag
        self._recompute()

    def close(self):
        """Drop any pending commit."""
        self.debouncer.cancel()

    def _on_commit(self, query: str):
        self._recompute()

    def _recompute(self):
        self._results = self.searcher.search(self.committed_query, self.selected_tag)

        logger.debug(
            f"{len(self._results)} results",
            extra={'query': self.committed_query[:50], 'tag': self.selected_tag}
        )

        if self.on_results is not None:
            self.on_results(self._results)
