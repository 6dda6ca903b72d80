"""
Keyword Matcher

Literal substring search over the normalized text fields of each entry.
High recall safety net for proper nouns and rare terms the semantic pass
does not score.
"""

from typing import Dict, Iterable, List, Sequence

from dataset.models import Entry, KEYWORD_FIELDS
from .normalizer import normalize_text


class KeywordMatcher:
    """
    Stable substring filter.

    An entry matches when the normalized query occurs in the normalized
    form of any of its keyword fields. Results keep dataset order.
    """

    def __init__(self, fields: Sequence[str] = KEYWORD_FIELDS):
        self.fields = tuple(fields)
        self._field_cache: Dict[Entry, List[str]] = {}

    def _normalized_fields(self, entry: Entry) -> List[str]:
        cached = self._field_cache.get(entry)
        if cached is None:
            cached = [normalize_text(entry.field_text(name)) for name in self.fields]
            self._field_cache[entry] = cached
        return cached

    def matches(self, normalized_query: str, entry: Entry) -> bool:
        return any(normalized_query in text for text in self._normalized_fields(entry))

    def match(self, query: str, entries: Iterable[Entry]) -> List[Entry]:
        """
        Return the entries containing the query, in their original order.

        An empty normalized query matches everything; callers wanting
        "no search" must check for it first.
        """
        normalized_query = normalize_text(query)
        return [entry for entry in entries if self.matches(normalized_query, entry)]
