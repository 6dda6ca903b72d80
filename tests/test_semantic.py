"""
Tests for the semantic matcher: tokenization, stemming, scoring and
thresholding.
"""

import pytest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from dataset.models import Entry
from search.semantic import (
    SemanticMatcher, ScoredEntry, stem, tokenize, term_affinity,
    DEFAULT_MIN_RELEVANCE, MIN_STEM_LENGTH
)


class TestTokenize:
    """Tests for tokenize and stem."""

    def test_drops_short_terms_and_stop_words(self):
        assert tokenize("la liberté et les données pour tous") == ["liber", "donn"]

    def test_stems_plural_and_feminine(self):
        assert stem("logiciels") == "logiciel"
        assert stem("libres") == stem("libre") == "libr"
        assert stem("numerique") == stem("numeriques") == "numer"

    def test_replacement_suffix(self):
        assert stem("journaux") == "journal"

    def test_stem_keeps_minimum_length(self):
        for term in ["art", "net", "site", "moment", "tes"]:
            assert len(stem(term)) >= MIN_STEM_LENGTH

    def test_unknown_suffix_untouched(self):
        assert stem("wiki") == "wiki"

    def test_non_string(self):
        assert tokenize(None) == []
        assert tokenize(12) == []


class TestTermAffinity:
    """Tests for term_affinity."""

    def test_identical(self):
        assert term_affinity("libr", "libr") == 1.0

    def test_shared_root(self):
        assert term_affinity("libr", "liber") == pytest.approx(0.6)

    def test_symmetric(self):
        assert term_affinity("libr", "liber") == term_affinity("liber", "libr")

    def test_prefix_too_short(self):
        assert term_affinity("lire", "livr") == 0.0

    def test_prefix_covers_too_little(self):
        # "com" is only half of "comput"
        assert term_affinity("comput", "commun") == 0.0

    def test_unrelated(self):
        assert term_affinity("art", "wiki") == 0.0

    def test_in_range(self):
        for a, b in [("wiki", "wikipedia"), ("decentral", "decentr"), ("abc", "abcdefgh")]:
            assert 0.0 <= term_affinity(a, b) <= 1.0


class TestSemanticMatcher:
    """Tests for SemanticMatcher."""

    @pytest.fixture
    def matcher(self):
        return SemanticMatcher()

    def test_shared_root_is_semantic_hit(self, matcher, scenario_dataset):
        hits = matcher.match("libre", scenario_dataset.entries)
        assert [h.entry.id for h in hits] == ["A", "B"]
        assert hits[0].score == hits[1].score == 1.0
        assert hits[0].affinity == 1.0
        assert hits[1].affinity == pytest.approx(0.6)

    def test_returns_scored_entries(self, matcher, sample_dataset):
        hits = matcher.match("surveillance", sample_dataset.entries)
        assert hits
        assert all(isinstance(h, ScoredEntry) for h in hits)
        assert all(0.0 < h.score <= 1.0 for h in hits)

    def test_sorted_by_score_descending(self, matcher, sample_dataset):
        hits = matcher.match("liberté surveillance internet", sample_dataset.entries)
        scores = [h.score for h in hits]
        assert scores == sorted(scores, reverse=True)

    def test_ties_keep_dataset_order(self, matcher):
        entries = [
            Entry(id="z", titre="Réseau libre"),
            Entry(id="a", titre="Logiciel libre"),
            Entry(id="m", texte="Culture libre"),
        ]
        hits = matcher.match("libre", entries)
        assert [h.entry.id for h in hits] == ["z", "a", "m"]

    def test_threshold_excludes_irrelevant(self, matcher, sample_dataset):
        hits = matcher.match("blockchain", sample_dataset.entries)
        assert hits == []

    def test_threshold_is_inclusive_and_tunable(self, scenario_dataset):
        # Both entries match one of the two query stems
        strict = SemanticMatcher(min_relevance=0.6)
        assert strict.match("libre blockchain", scenario_dataset.entries) == []

        loose = SemanticMatcher(min_relevance=0.5)
        hits = loose.match("libre blockchain", scenario_dataset.entries)
        assert [(h.entry.id, h.score) for h in hits] == [("A", 0.5), ("B", 0.5)]

    @pytest.mark.parametrize("value", [0.0, -0.1, 1.5])
    def test_rejects_bad_threshold(self, value):
        with pytest.raises(ValueError):
            SemanticMatcher(min_relevance=value)

    def test_default_threshold_not_zero(self):
        assert DEFAULT_MIN_RELEVANCE > 0

    def test_term_order_does_not_matter(self, matcher, sample_dataset):
        first = matcher.match("surveillance masse internet", sample_dataset.entries)
        second = matcher.match("internet masse surveillance", sample_dataset.entries)
        assert first == second

    def test_deterministic(self, matcher, sample_dataset):
        assert matcher.match("théâtre caméras", sample_dataset.entries) == \
            matcher.match("théâtre caméras", sample_dataset.entries)

    def test_adding_matching_entry_term_never_lowers_score(self, matcher):
        query_terms = matcher.query_terms("logiciel libre décentralisé")
        base = Entry(id="1", titre="Logiciel")
        richer = Entry(id="2", titre="Logiciel", texte="libre")
        richest = Entry(id="3", titre="Logiciel", texte="libre et décentralisé")

        scores = [matcher.score(query_terms, matcher.entry_terms(e)) for e in (base, richer, richest)]
        assert scores[0] <= scores[1] <= scores[2]
        assert scores[2] == 1.0

    def test_adding_matching_query_term_never_lowers_score(self, matcher):
        entry = Entry(id="1", titre="Wiki libre")
        queries = ["libre", "libre libertés", "libre libertés wiki"]

        scores = [matcher.match(q, [entry])[0].score for q in queries]
        assert scores == [1.0, 1.0, 1.0]

    def test_root_match_counts_as_coverage(self, matcher):
        entry = Entry(id="1", citation="la liberté numérique")
        hits = matcher.match("libre numérique", [entry])
        assert hits[0].score == 1.0
        assert hits[0].affinity == pytest.approx(0.8)

    def test_exact_match_ranks_ahead_of_root_match(self, matcher):
        entries = [
            Entry(id="root", texte="liberté"),
            Entry(id="exact", texte="libre"),
        ]
        hits = matcher.match("libre", entries)
        assert [h.entry.id for h in hits] == ["exact", "root"]

    def test_partial_query_coverage(self, matcher):
        entry = Entry(id="1", titre="Logiciel")
        hits = matcher.match("logiciel libre", [entry])
        assert hits[0].score == pytest.approx(0.5)

    def test_searches_caption(self, matcher, sample_dataset):
        hits = matcher.match("times square", sample_dataset.entries)
        assert [h.entry.id for h in hits] == ["camera"]

    @pytest.mark.parametrize("query", ["", "   ", "la le de", "!!", None])
    def test_no_meaningful_terms(self, matcher, sample_dataset, query):
        assert matcher.match(query, sample_dataset.entries) == []

    def test_empty_dataset(self, matcher):
        assert matcher.match("libre", []) == []

    def test_malformed_entry_does_not_crash(self, matcher, sample_dataset):
        hits = matcher.match("théorie", sample_dataset.entries)
        assert "malformed" in [h.entry.id for h in hits]
