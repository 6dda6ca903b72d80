"""
Gallery Dataset

Immutable entry schema and the loader that validates the static dataset
once at start-up.

Usage:
    from dataset import load_dataset, Entry

    dataset = load_dataset('data/galat_data.json')
    for entry in dataset:
        print(entry.id, entry.titre)
"""

from .models import Entry, EntryType, SearchResult, SearchType, KEYWORD_FIELDS, SEMANTIC_FIELDS
from .loader import Dataset, build_dataset, load_dataset

__all__ = [
    'Entry',
    'EntryType',
    'SearchResult',
    'SearchType',
    'KEYWORD_FIELDS',
    'SEMANTIC_FIELDS',
    'Dataset',
    'build_dataset',
    'load_dataset',
]
