"""
Hybrid Search for the Galat gallery

Combines the semantic matcher and the keyword matcher over the
tag-filtered working set.

Merge policy:
- Semantic hits come first, in score order. They are the strict
  relevance signal.
- Keyword hits not already found follow, in dataset order, with a fixed
  minimal score. They are the safety net for proper nouns and rare terms.
- An entry id never appears twice.
- An empty query, or one with nothing left after normalization (only
  punctuation or symbols), means tag-only browsing: the filtered entries
  are returned untouched.

Usage:
    from search.hybrid_search import HybridSearcher

    searcher = HybridSearcher(dataset)
    for result in searcher.search("logiciel libre", tag="Outils"):
        print(f"{result.similarity_score:.2f} [{result.search_type.value}] {result.entry.titre}")
"""

import logging
import threading
from collections import OrderedDict
from typing import List, Optional, Sequence, Set, Tuple, Union

from core.errors import safe_operation
from core.logging_config import log_performance
from dataset.loader import Dataset
from dataset.models import Entry, SearchResult, SearchType
from .keyword import KeywordMatcher
from .normalizer import normalize_text
from .semantic import DEFAULT_MIN_RELEVANCE, ScoredEntry, SemanticMatcher
from .tag_filter import filter_by_tag

logger = logging.getLogger(__name__)

# Score given to keyword-only hits, below any semantic hit
KEYWORD_SCORE = 0.05

# What a merge returns: decorated results, or the bare entries when no
# search ran (empty query)
Results = Union[List[SearchResult], Sequence[Entry]]


class ResultMerger:
    """Runs both matchers and unions their hits."""

    def __init__(
        self,
        semantic: Optional[SemanticMatcher] = None,
        keyword: Optional[KeywordMatcher] = None,
        keyword_score: float = KEYWORD_SCORE
    ):
        self.semantic = semantic or SemanticMatcher()
        self.keyword = keyword or KeywordMatcher()
        self.keyword_score = keyword_score

    @safe_operation(default_value=())
    def _semantic_pass(self, query: str, entries: Sequence[Entry]) -> Sequence[ScoredEntry]:
        return self.semantic.match(query, entries)

    @safe_operation(default_value=())
    def _keyword_pass(self, query: str, entries: Sequence[Entry]) -> Sequence[Entry]:
        return self.keyword.match(query, entries)

    def merge(self, query: Optional[str], tagged_entries: Sequence[Entry]) -> Results:
        """
        Merge semantic and keyword hits for query.

        Args:
            query: Committed query
            tagged_entries: Working set, already tag-filtered

        Returns:
            tagged_entries unchanged when query is blank or only
            punctuation, otherwise the
            semantic block followed by the keyword-only block
        """
        if not normalize_text(query):
            return tagged_entries

        semantic_hits = self._semantic_pass(query, tagged_entries)
        keyword_hits = self._keyword_pass(query, tagged_entries)

        results: List[SearchResult] = []
        seen_ids: Set[str] = set()

        for hit in semantic_hits:
            if hit.entry.id in seen_ids:
                continue
            seen_ids.add(hit.entry.id)
            results.append(SearchResult(hit.entry, SearchType.SEMANTIC, hit.score))

        semantic_count = len(results)

        for entry in keyword_hits:
            if entry.id in seen_ids:
                continue
            seen_ids.add(entry.id)
            results.append(SearchResult(entry, SearchType.KEYWORD, self.keyword_score))

        logger.debug(
            f"Merged {len(results)} results for '{query[:50]}'",
            extra={
                'query': query[:50],
                'semantic_count': semantic_count,
                'keyword_count': len(results) - semantic_count,
                'working_set': len(tagged_entries),
            }
        )
        return results


@log_performance('galat.search')
def compute_results(
    dataset: Union[Dataset, Sequence[Entry]],
    committed_query: Optional[str],
    selected_tag: Optional[str],
    merger: Optional[ResultMerger] = None
) -> Results:
    """
    Pure search entry point: tag filter, then merge.

    Args:
        dataset: Dataset or plain sequence of entries
        committed_query: Debounced query (blank = browse)
        selected_tag: Category to restrict to (blank = all)
        merger: Merger to reuse (a fresh default one otherwise)

    Returns:
        Ordered results
    """
    entries = dataset.entries if isinstance(dataset, Dataset) else dataset
    tagged_entries = filter_by_tag(selected_tag, entries)
    return (merger or ResultMerger()).merge(committed_query, tagged_entries)


class HybridSearcher:
    """
    Search over one fixed dataset, with an optional memo of recent
    (query, tag) pairs.

    The dataset never changes for the searcher's lifetime, so the pair is
    a complete cache key.
    """

    def __init__(
        self,
        dataset: Dataset,
        min_relevance: float = DEFAULT_MIN_RELEVANCE,
        keyword_score: float = KEYWORD_SCORE,
        cache_size: int = 128
    ):
        """
        Initialize hybrid searcher.

        Args:
            dataset: Immutable dataset snapshot
            min_relevance: Semantic relevance threshold (0-1, not zero)
            keyword_score: Score given to keyword-only hits
            cache_size: Number of (query, tag) results kept; 0 disables
        """
        self.dataset = dataset
        self.merger = ResultMerger(
            semantic=SemanticMatcher(min_relevance=min_relevance),
            keyword=KeywordMatcher(),
            keyword_score=keyword_score
        )
        self.cache_size = cache_size
        self._cache: 'OrderedDict[Tuple[str, str], Tuple]' = OrderedDict()
        self._lock = threading.Lock()
        self.cache_hits = 0
        self.cache_misses = 0

    @classmethod
    def from_config(cls, dataset: Dataset, config) -> 'HybridSearcher':
        """Build a searcher from a core.config.SearchConfig."""
        return cls(
            dataset,
            min_relevance=config.min_relevance,
            keyword_score=config.keyword_score,
            cache_size=config.cache_size
        )

    @property
    def tags(self) -> Tuple[str, ...]:
        return self.dataset.tags

    def search(self, query: Optional[str] = '', tag: Optional[str] = '') -> Results:
        """
        Search the dataset.

        Args:
            query: Committed query (blank = browse)
            tag: Category filter (blank = all)

        Returns:
            Ordered results; a fresh list on every call
        """
        key = (query or '', tag or '')

        if self.cache_size:
            with self._lock:
                cached = self._cache.get(key)
                if cached is not None:
                    self._cache.move_to_end(key)
                    self.cache_hits += 1
                    return list(cached)
                self.cache_misses += 1

        results = compute_results(self.dataset, query, tag, merger=self.merger)

        if self.cache_size:
            with self._lock:
                self._cache[key] = tuple(results)
                self._cache.move_to_end(key)
                while len(self._cache) > self.cache_size:
                    self._cache.popitem(last=False)

        return list(results)

    def clear_cache(self):
        with self._lock:
            self._cache.clear()

    def get_stats(self) -> dict:
        """Cache statistics."""
        with self._lock:
            return {
                'entries': len(self.dataset),
                'cached_queries': len(self._cache),
                'cache_size': self.cache_size,
                'cache_hits': self.cache_hits,
                'cache_misses': self.cache_misses,
            }
