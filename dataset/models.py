"""
Data Models for the Galat dataset

Entry is the immutable schema every dataset record is validated into.
SearchResult is an Entry decorated with its provenance and score.

Every text field has a defined empty representation (""), so search code
never has to guard against missing keys or odd types.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Optional


class EntryType(Enum):
    """Presentation kind of an entry. Affects display only."""
    TEXT_IMAGE = "TEXTE + IMAGE"
    TEXT_QUOTE = "TEXTE + CITATION"
    PLAIN = "TEXTE"

    @classmethod
    def from_value(cls, value: str) -> 'EntryType':
        for member in cls:
            if member.value == value:
                return member
        return cls.PLAIN


class SearchType(Enum):
    """Which matcher produced a result."""
    SEMANTIC = "semantic"
    KEYWORD = "keyword"


# Fields compared by the keyword matcher
KEYWORD_FIELDS = ('titre', 'texte', 'auteur', 'citation', 'tag')

# Fields tokenized by the semantic matcher
SEMANTIC_FIELDS = ('titre', 'texte', 'auteur', 'citation', 'legende', 'tag')

TEXT_FIELDS = (
    'titre', 'texte', 'auteur', 'citation', 'tag',
    'source', 'image', 'legende', 'type',
)


def as_text(value: Any) -> str:
    """Return value if it is a string, else the empty string."""
    return value if isinstance(value, str) else ''


@dataclass(frozen=True)
class Entry:
    """One dataset item (article, quote or image record)."""
    id: str
    titre: str = ''
    texte: str = ''
    auteur: str = ''
    citation: str = ''
    tag: str = ''
    source: str = ''
    image: str = ''
    legende: str = ''
    type: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any], default_id: Optional[str] = None) -> 'Entry':
        """
        Build an Entry from a raw record.

        Non-string text fields become "". Integer ids are kept as their
        string form; a missing id falls back to default_id.
        """
        raw_id = data.get('id')
        if isinstance(raw_id, bool) or raw_id is None or raw_id == '':
            entry_id = default_id
        elif isinstance(raw_id, (str, int)):
            entry_id = str(raw_id)
        else:
            entry_id = default_id

        return cls(
            id=entry_id if entry_id is not None else '',
            **{name: as_text(data.get(name)) for name in TEXT_FIELDS}
        )

    @property
    def entry_type(self) -> EntryType:
        return EntryType.from_value(self.type)

    def field_text(self, name: str) -> str:
        return as_text(getattr(self, name, ''))

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class SearchResult:
    """An entry with the matcher that found it and its similarity score."""
    entry: Entry
    search_type: SearchType
    similarity_score: float

    @property
    def id(self) -> str:
        return self.entry.id

    def to_dict(self) -> Dict[str, Any]:
        data = self.entry.to_dict()
        data['searchType'] = self.search_type.value
        data['similarityScore'] = self.similarity_score
        return data
