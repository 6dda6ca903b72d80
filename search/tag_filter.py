"""
Tag Filter

Restricts the working set to one category before any matching happens.
"""

from typing import Optional, Sequence

from dataset.models import Entry


def filter_by_tag(tag: Optional[str], entries: Sequence[Entry]) -> Sequence[Entry]:
    """
    Keep the entries whose tag equals the selected one.

    An empty or unset tag means no filter: entries is returned as is.
    Comparison is exact and case-sensitive, tags being a closed set.
    """
    if not tag:
        return entries
    return [entry for entry in entries if entry.tag == tag]
