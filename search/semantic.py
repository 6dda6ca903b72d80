"""
Semantic Matcher

Scores entries by the meaningful terms they share with the query rather
than by literal substring containment.

Pipeline:
1. Normalize and split into terms
2. Drop short terms and French/English stop-words
3. Reduce each term to a light stem (one suffix stripped)
4. Compare stems: identical stems score 1.0, stems sharing a root
   ("libr" / "liber") score by how much of the longer stem the root covers
5. Entry score = share of query stems that match some entry stem, exactly
   or by shared root. Equal scores are ordered by the mean best affinity,
   so exact matches rank ahead of root-only ones.

The score only depends on the sets of stems, so it is deterministic and
independent of term order. Neither the query nor the entry gaining a
matching term can lower it.

Usage:
    from search.semantic import SemanticMatcher

    matcher = SemanticMatcher(min_relevance=0.3)
    for hit in matcher.match("logiciel libre", entries):
        print(f"{hit.score:.2f} {hit.entry.titre}")
"""

import logging
from functools import lru_cache
from typing import Dict, Iterable, List, NamedTuple, Sequence, Tuple

import numpy as np

from dataset.models import Entry, SEMANTIC_FIELDS
from .normalizer import normalize_text

logger = logging.getLogger(__name__)

MIN_TERM_LENGTH = 3
MIN_STEM_LENGTH = 3
ROOT_MIN_LENGTH = 3
ROOT_COVERAGE = 0.75
DEFAULT_MIN_RELEVANCE = 0.3

# Normalized (accent-free) forms; anything under MIN_TERM_LENGTH is
# already discarded so short articles are not listed.
STOP_WORDS = frozenset("""
    les des une aux ces ses mes tes nos vos leur leurs
    est sont etre ete etait avoir avait ont fait faire
    pour par sur sous dans avec sans chez entre vers contre depuis pendant
    qui que quoi dont quel quelle quels quelles lequel laquelle
    mais donc car comme ainsi alors aussi encore plus moins tres trop peu
    tout tous toute toutes autre autres meme memes cette cet ceux celle celles
    elle elles ils nous vous lui moi toi eux soi
    son pas non oui ne rien quand comment pourquoi
    the and for with from that this these those into onto over under
    are was were been being have has had not but all any can our their
    its his her who whom what which when where why how than then there
""".split())

# (suffix, replacement); tried longest first, one suffix stripped at most
SUFFIXES = tuple(sorted((
    ('issements', ''), ('issement', ''),
    ('atrices', ''), ('atrice', ''), ('ateurs', ''), ('ateur', ''),
    ('ations', ''), ('ation', ''),
    ('ements', ''), ('ement', ''), ('ments', ''), ('ment', ''),
    ('ismes', ''), ('isme', ''), ('istes', ''), ('iste', ''),
    ('iques', ''), ('ique', ''),
    ('ites', ''), ('ite', ''), ('tes', ''), ('te', ''),
    ('euses', ''), ('euse', ''), ('eurs', ''), ('eur', ''),
    ('aux', 'al'),
    ('ees', ''), ('ee', ''), ('es', ''),
    ('s', ''), ('e', ''), ('x', ''),
), key=lambda pair: len(pair[0]), reverse=True))


class ScoredEntry(NamedTuple):
    """
    A semantic hit: the entry, its relevance in [0, 1] and the mean best
    affinity of the query stems, which orders equal relevances.
    """
    entry: Entry
    score: float
    affinity: float = 1.0


def stem(term: str) -> str:
    """Strip the longest known suffix that leaves a usable stem."""
    for suffix, replacement in SUFFIXES:
        if term.endswith(suffix):
            candidate = term[:-len(suffix)] + replacement
            if len(candidate) >= MIN_STEM_LENGTH:
                return candidate
    return term


def tokenize(text) -> List[str]:
    """Stems of the meaningful terms of text, in order of appearance."""
    terms = []
    for term in normalize_text(text).split():
        if len(term) < MIN_TERM_LENGTH or term in STOP_WORDS:
            continue
        terms.append(stem(term))
    return terms


@lru_cache(maxsize=65536)
def term_affinity(query_stem: str, entry_stem: str) -> float:
    """
    Similarity of two stems in [0, 1].

    1.0 for identical stems. Otherwise, when the common prefix is at least
    ROOT_MIN_LENGTH long and covers ROOT_COVERAGE of the shorter stem, the
    share of the longer stem it covers. 0.0 if not.
    """
    if query_stem == entry_stem:
        return 1.0

    shorter, longer = sorted((query_stem, entry_stem), key=len)
    prefix = 0
    for a, b in zip(shorter, longer):
        if a != b:
            break
        prefix += 1

    if prefix < ROOT_MIN_LENGTH or prefix < ROOT_COVERAGE * len(shorter):
        return 0.0
    return prefix / len(longer)


class SemanticMatcher:
    """
    Relevance-scored matcher over the entries' combined text fields.

    Entries under min_relevance are left out entirely so unrelated entries
    never show up as "semantic" hits ahead of keyword matches.
    """

    def __init__(
        self,
        min_relevance: float = DEFAULT_MIN_RELEVANCE,
        fields: Sequence[str] = SEMANTIC_FIELDS
    ):
        if not 0.0 < min_relevance <= 1.0:
            raise ValueError(f"min_relevance must be in (0, 1], got {min_relevance}")
        self.min_relevance = min_relevance
        self.fields = tuple(fields)
        self._terms_cache: Dict[Entry, Tuple[str, ...]] = {}

    def query_terms(self, query: str) -> Tuple[str, ...]:
        """Distinct query stems, sorted so the score ignores term order."""
        return tuple(sorted(set(tokenize(query))))

    def entry_terms(self, entry: Entry) -> Tuple[str, ...]:
        cached = self._terms_cache.get(entry)
        if cached is None:
            text = ' '.join(entry.field_text(name) for name in self.fields)
            cached = tuple(sorted(set(tokenize(text))))
            self._terms_cache[entry] = cached
        return cached

    def rate(self, query_terms: Sequence[str], entry_terms: Sequence[str]) -> Tuple[float, float]:
        """
        Coverage and mean affinity of entry_terms for query_terms.

        Coverage is the share of query stems with a nonzero best affinity;
        the mean affinity only breaks ties between equal coverages.
        """
        if not query_terms or not entry_terms:
            return 0.0, 0.0

        affinities = np.array(
            [[term_affinity(q, t) for t in entry_terms] for q in query_terms],
            dtype=float
        )
        best = affinities.max(axis=1)
        return float(np.count_nonzero(best)) / len(best), float(best.mean())

    def score(self, query_terms: Sequence[str], entry_terms: Sequence[str]) -> float:
        """Share of query stems matched by the entry, exactly or by shared root."""
        return self.rate(query_terms, entry_terms)[0]

    def match(self, query: str, entries: Iterable[Entry]) -> List[ScoredEntry]:
        """
        Score entries against the query.

        Returns:
            Hits at or above min_relevance, highest score first, then
            highest affinity, remaining ties in dataset order. Empty when
            the query has no meaningful terms.
        """
        query_terms = self.query_terms(query)
        if not query_terms:
            return []

        hits = []
        for entry in entries:
            relevance, affinity = self.rate(query_terms, self.entry_terms(entry))
            if relevance >= self.min_relevance:
                hits.append(ScoredEntry(entry, round(relevance, 6), round(affinity, 6)))

        # sorted() is stable: full ties keep dataset order
        hits = sorted(hits, key=lambda hit: (hit.score, hit.affinity), reverse=True)

        logger.debug(
            f"Semantic pass: {len(hits)} hits",
            extra={'query_terms': list(query_terms), 'hit_count': len(hits)}
        )
        return hits

