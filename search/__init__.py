"""
Hybrid Search for the Galat gallery

Provides:
- Text normalization shared by every matcher
- Keyword matching (normalized substring)
- Semantic matching (stemmed term overlap with a relevance threshold)
- Tag filtering
- Result merging with semantic-first ordering and dedup
- Debounced query commits for search-as-you-type

Usage:
    from search import HybridSearcher, SearchSession

    searcher = HybridSearcher(dataset)
    results = searcher.search("logiciel libre", tag="Outils")
"""

from .normalizer import normalize_text
from .keyword import KeywordMatcher
from .semantic import SemanticMatcher, ScoredEntry, tokenize
from .tag_filter import filter_by_tag
from .hybrid_search import HybridSearcher, ResultMerger, compute_results, KEYWORD_SCORE
from .debounce import AsyncioScheduler, DebounceState, QueryDebouncer, ThreadingScheduler, default_scheduler
from .session import SearchSession

__all__ = [
    'normalize_text',
    'KeywordMatcher',
    'SemanticMatcher',
    'ScoredEntry',
    'tokenize',
    'filter_by_tag',
    'HybridSearcher',
    'ResultMerger',
    'compute_results',
    'KEYWORD_SCORE',
    'AsyncioScheduler',
    'DebounceState',
    'QueryDebouncer',
    'ThreadingScheduler',
    'default_scheduler',
    'SearchSession',
]
