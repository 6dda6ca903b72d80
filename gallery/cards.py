"""
Card view-model for gallery entries.

Applies the display rules of a gallery card (fallback title, hidden
"collectif" author, image/quote/title layout, category slug) without
rendering anything, so any front end, including the command line tool,
can draw it.
"""

import hashlib
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from dataset.models import Entry, EntryType, SearchResult

UNTITLED = "Sans titre"
NO_CONTENT = "Aucun contenu disponible"
COLLECTIVE_AUTHOR = "collectif"
EMPTY_RESULTS_MESSAGE = "Aucun résultat trouvé"
EMPTY_RESULTS_HINT = "Essayez de modifier vos critères de recherche"

PALETTE = ('#f0f8ff', '#f0fff0', '#fff0f0', '#fff8f0', '#f8f0ff', '#f0ffff')

_SLUG_TABLE = str.maketrans({'é': 'e', 'è': 'e', 'ê': 'e'})


class CardLayout(Enum):
    IMAGE = "image"
    QUOTE = "quote"
    TITLE = "title"


@dataclass(frozen=True)
class Card:
    entry_id: str
    layout: CardLayout
    title: str
    text: str
    author: Optional[str] = None
    category: Optional[str] = None
    category_slug: Optional[str] = None
    source_url: Optional[str] = None
    image_url: Optional[str] = None
    show_image_placeholder: bool = False
    caption: Optional[str] = None
    quote: Optional[str] = None
    background_color: Optional[str] = None
    search_type: Optional[str] = None
    similarity_score: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['layout'] = self.layout.value
        return data


def category_slug(tag: str) -> str:
    return tag.lower().translate(_SLUG_TABLE)


def background_color(entry_id: str) -> str:
    """Palette color, stable for a given entry id."""
    digest = hashlib.md5(entry_id.encode('utf-8')).digest()
    return PALETTE[digest[0] % len(PALETTE)]


def display_author(author: str) -> Optional[str]:
    if not author or author.lower() == COLLECTIVE_AUTHOR:
        return None
    return author


def _blank(value: str) -> bool:
    return not value or not value.strip()


def build_card(item: Union[Entry, SearchResult]) -> Card:
    """Build the card for an entry or a search result."""
    if isinstance(item, SearchResult):
        entry = item.entry
        search_type = item.search_type.value
        score = item.similarity_score
    else:
        entry = item
        search_type = None
        score = None

    kind = entry.entry_type
    image_url = None
    placeholder = False
    caption = None
    quote = None
    color = None

    if kind is EntryType.TEXT_IMAGE:
        layout = CardLayout.IMAGE
        image_url = entry.image or None
        placeholder = not entry.image
        caption = None if _blank(entry.legende) else entry.legende
        color = background_color(entry.id)
    elif kind is EntryType.TEXT_QUOTE and entry.citation:
        layout = CardLayout.QUOTE
        quote = entry.citation
        color = background_color(entry.id)
    else:
        layout = CardLayout.TITLE

    return Card(
        entry_id=entry.id,
        layout=layout,
        title=entry.titre or UNTITLED,
        text=entry.texte or NO_CONTENT,
        author=display_author(entry.auteur),
        category=entry.tag or None,
        category_slug=category_slug(entry.tag) if entry.tag else None,
        source_url=None if _blank(entry.source) else entry.source,
        image_url=image_url,
        show_image_placeholder=placeholder,
        caption=caption,
        quote=quote,
        background_color=color,
        search_type=search_type,
        similarity_score=score,
    )


def format_card(card: Card, width: int = 100) -> str:
    """Plain-text rendering for terminals."""
    header = card.title
    if card.category:
        header = f"[{card.category}] {header}"
    if card.search_type:
        header = f"{header}  ({card.search_type} {card.similarity_score:.2f})"

    lines = [header]
    if card.author:
        lines.append(f"  par {card.author}")
    if card.quote:
        lines.append(f"  « {card.quote} »")
    if card.layout is CardLayout.IMAGE:
        lines.append(f"  image: {card.image_url or '(aucune image)'}")
        if card.caption:
            lines.append(f"  légende: {card.caption}")

    text = card.text if len(card.text) <= width else card.text[:width - 3] + '...'
    lines.append(f"  {text}")

    if card.source_url:
        lines.append(f"  source: {card.source_url}")
    return '\n'.join(lines)
