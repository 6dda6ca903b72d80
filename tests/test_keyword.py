"""
Tests for the keyword matcher.
"""

from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from dataset.models import Entry, KEYWORD_FIELDS
from search.keyword import KeywordMatcher
from search.normalizer import normalize_text


class TestKeywordMatcher:
    """Tests for KeywordMatcher."""

    def test_matches_title(self, sample_dataset):
        matcher = KeywordMatcher()
        results = matcher.match("mastodon", sample_dataset.entries)
        assert [e.id for e in results] == ["mastodon"]

    def test_accent_and_case_insensitive(self, sample_dataset):
        matcher = KeywordMatcher()
        results = matcher.match("VIDEOSURVEILLANCE", sample_dataset.entries)
        assert [e.id for e in results] == ["camera"]

    def test_matches_author_and_tag(self, sample_dataset):
        matcher = KeywordMatcher()
        assert [e.id for e in matcher.match("kempf", sample_dataset.entries)] == ["reporterre"]
        assert [e.id for e in matcher.match("medias", sample_dataset.entries)] == ["reporterre"]

    def test_matches_quote(self, sample_dataset):
        matcher = KeywordMatcher()
        results = matcher.match("liberté numérique", sample_dataset.entries)
        assert [e.id for e in results] == ["quote-liberte"]

    def test_ignores_non_keyword_fields(self):
        entry = Entry(id="1", titre="Titre", legende="caption only", source="https://x.org")
        matcher = KeywordMatcher()
        assert matcher.match("caption", [entry]) == []
        assert matcher.match("x org", [entry]) == []

    def test_keeps_dataset_order(self, sample_dataset):
        matcher = KeywordMatcher()
        results = matcher.match("surveillance", sample_dataset.entries)
        assert [e.id for e in results] == ["quadrature", "camera"]

    def test_every_result_contains_query(self, sample_dataset):
        matcher = KeywordMatcher()
        for query in ["libre", "art", "un", "du", "e", "net"]:
            normalized = normalize_text(query)
            for entry in matcher.match(query, sample_dataset.entries):
                assert any(
                    normalized in normalize_text(getattr(entry, name))
                    for name in KEYWORD_FIELDS
                )

    def test_substring_not_word(self):
        entry = Entry(id="1", titre="Décentralisé")
        assert KeywordMatcher().match("central", [entry]) == [entry]

    def test_no_match(self, sample_dataset):
        assert KeywordMatcher().match("blockchain", sample_dataset.entries) == []

    def test_empty_query_matches_everything(self, sample_dataset):
        results = KeywordMatcher().match("  ", sample_dataset.entries)
        assert len(results) == len(sample_dataset)

    def test_malformed_fields_never_match(self, sample_dataset):
        matcher = KeywordMatcher()
        assert matcher.match("42", sample_dataset.entries) == []
        assert matcher.match("nested", sample_dataset.entries) == []

    def test_empty_entries(self):
        assert KeywordMatcher().match("libre", []) == []
