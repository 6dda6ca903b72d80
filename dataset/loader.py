"""
Dataset Provider

Loads the curated gallery dataset once at start-up and validates every
record into an immutable Entry.

Accepted file shapes:
- JSON array of records
- JSON object {"entries": [...], "tags": [...]}
- JSONL, one record per line
- YAML with either of the JSON shapes

Usage:
    from dataset import load_dataset

    dataset = load_dataset('data/galat_data.json')
    print(len(dataset), dataset.tags)
"""

import json
import logging
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import yaml

from core.errors import DatasetError
from .models import Entry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dataset:
    """Read-only snapshot of the gallery: entries plus the closed tag set."""
    entries: Tuple[Entry, ...] = ()
    tags: Tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    def get(self, entry_id: str) -> Optional[Entry]:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    def tag_counts(self) -> List[Tuple[str, int]]:
        """Number of entries per tag, in tag-set order."""
        counts = Counter(entry.tag for entry in self.entries)
        return [(tag, counts.get(tag, 0)) for tag in self.tags]


def build_dataset(
    records: Iterable[Any],
    tags: Optional[Sequence[Any]] = None
) -> Dataset:
    """
    Validate raw records into a Dataset.

    Records that are not mappings are skipped. A record without a usable
    id gets its position as id. Duplicate ids are rejected.

    Args:
        records: Raw records (dicts)
        tags: Closed tag set; derived from the entries when omitted

    Returns:
        Dataset
    """
    entries: List[Entry] = []
    seen_ids = set()
    skipped = 0

    for position, record in enumerate(records):
        if not isinstance(record, dict):
            skipped += 1
            continue

        entry = Entry.from_dict(record, default_id=str(position))
        if entry.id in seen_ids:
            raise DatasetError(f'Duplicate entry id: {entry.id}', entry_id=entry.id)
        seen_ids.add(entry.id)
        entries.append(entry)

    if skipped:
        logger.warning(f'Skipped {skipped} malformed records', extra={'skipped': skipped})

    if tags is None:
        # First-seen order, empty tags excluded
        tag_list = list(dict.fromkeys(entry.tag for entry in entries if entry.tag))
    else:
        tag_list = list(dict.fromkeys(t for t in tags if isinstance(t, str) and t))

    return Dataset(entries=tuple(entries), tags=tuple(tag_list))


def _split_payload(payload: Any, path: Path) -> Tuple[List[Any], Optional[List[Any]]]:
    """Return (records, tags) from a decoded JSON/YAML document."""
    if payload is None:
        return [], None
    if isinstance(payload, list):
        return payload, None
    if isinstance(payload, dict):
        records = payload.get('entries', payload.get('data'))
        if not isinstance(records, list):
            raise DatasetError('Dataset object must hold an "entries" list', path=str(path))
        tags = payload.get('tags')
        if tags is not None and not isinstance(tags, list):
            raise DatasetError('"tags" must be a list', path=str(path))
        return records, tags
    raise DatasetError('Dataset must be a list or an object', path=str(path))


def _read_jsonl(path: Path) -> List[Any]:
    records = []
    with open(path, encoding='utf-8') as f:
        for line_number, line in enumerate(f, 1):
            if not line.strip():
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise DatasetError(
                    f'Invalid JSON on line {line_number}: {e.msg}',
                    path=str(path), line=line_number
                )
    return records


def load_dataset(path: Union[str, Path]) -> Dataset:
    """
    Load and validate a dataset file.

    Args:
        path: .json, .jsonl or .yaml/.yml file

    Returns:
        Dataset

    Raises:
        DatasetError: file missing, unreadable or inconsistent
    """
    path = Path(path)
    if not path.exists():
        raise DatasetError(f'Dataset file not found: {path}', path=str(path))

    suffix = path.suffix.lower()
    tags = None

    try:
        if suffix == '.jsonl':
            records = _read_jsonl(path)
        elif suffix in ('.yaml', '.yml'):
            with open(path, encoding='utf-8') as f:
                records, tags = _split_payload(yaml.safe_load(f), path)
        else:
            with open(path, encoding='utf-8') as f:
                records, tags = _split_payload(json.load(f), path)
    except json.JSONDecodeError as e:
        raise DatasetError(f'Invalid JSON in {path}: {e.msg}', path=str(path))
    except yaml.YAMLError as e:
        raise DatasetError(f'Invalid YAML in {path}: {e}', path=str(path))
    except OSError as e:
        raise DatasetError(f'Could not read {path}: {e}', path=str(path))

    dataset = build_dataset(records, tags)

    logger.info(
        f'Loaded {len(dataset)} entries from {path.name}',
        extra={'entry_count': len(dataset), 'tag_count': len(dataset.tags)}
    )
    return dataset

