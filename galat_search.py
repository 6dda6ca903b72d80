#!/usr/bin/env python3
"""
Galat Search command line tool

Searches the gallery dataset from a terminal.

Usage:
    # One-shot hybrid search
    python galat_search.py search "logiciel libre"
    python galat_search.py search "surveillance" --tag Art --json

    # List the categories
    python galat_search.py tags

    # Replay keystrokes through the debouncer (300 ms apart)
    python galat_search.py type l li lib libre --delay-ms 300

    # Use another dataset or config
    python galat_search.py --dataset data/other.jsonl --config galat.yaml search wiki
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List

from core.config import SearchConfig, get_config
from core.errors import GalatError, ValidationError
from core.logging_config import setup_logging
from dataset import load_dataset
from dataset.models import SearchResult
from gallery.cards import EMPTY_RESULTS_HINT, EMPTY_RESULTS_MESSAGE, build_card, format_card
from search import HybridSearcher, SearchSession

logger = logging.getLogger('galat.cli')


def print_results(results, as_json: bool = False, limit: int = 0):
    """Print results as JSON or as text cards."""
    shown = list(results)[:limit] if limit else list(results)

    if as_json:
        print(json.dumps([item.to_dict() for item in shown], indent=2, ensure_ascii=False))
        return

    if not shown:
        print(EMPTY_RESULTS_MESSAGE)
        print(EMPTY_RESULTS_HINT)
        return

    searched = any(isinstance(item, SearchResult) for item in shown)
    label = "results" if searched else "entries"
    print(f"\n{len(results)} {label}:\n")
    for item in shown:
        print(format_card(build_card(item)))
        print()


def cmd_search(searcher: HybridSearcher, args) -> int:
    results = searcher.search(args.query, args.tag or '')
    print_results(results, as_json=args.json, limit=args.limit)
    return 0


def cmd_tags(searcher: HybridSearcher, args) -> int:
    counts = searcher.dataset.tag_counts()
    if args.json:
        print(json.dumps([{'tag': tag, 'count': count} for tag, count in counts],
                         indent=2, ensure_ascii=False))
        return 0

    for tag, count in counts:
        print(f"  {tag:30} {count}")
    return 0


async def replay_keystrokes(
    searcher: HybridSearcher,
    keystrokes: List[str],
    interval: float,
    delay: float,
    tag: str = ''
):
    """Feed successive raw query values through a session, as typing would."""
    session = SearchSession(searcher, interval=interval)
    if tag:
        session.set_tag(tag)

    for value in keystrokes:
        session.set_query(value)
        logger.debug(f"Typed '{value}'", extra={'is_searching': session.is_searching})
        await asyncio.sleep(delay)

    if session.is_searching:
        # Let the last pending commit fire
        await asyncio.sleep(interval + 0.05)

    session.close()
    return session


def cmd_type(searcher: HybridSearcher, args, config: SearchConfig) -> int:
    session = asyncio.run(replay_keystrokes(
        searcher,
        args.keystrokes,
        interval=config.debounce_seconds,
        delay=args.delay_ms / 1000.0,
        tag=args.tag or ''
    ))

    if not args.json:
        print(f"Committed query: '{session.committed_query}' "
              f"({session.debouncer.commit_count} commit(s))")
    print_results(session.results, as_json=args.json, limit=args.limit)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Hybrid search over the Galat gallery")
    parser.add_argument('--dataset', '-d', help="Dataset file (JSON, JSONL or YAML)")
    parser.add_argument('--config', '-c', help="YAML configuration file")
    parser.add_argument('--log-level', help="Logging level (default from config)")
    parser.add_argument('--json-logs', action='store_true', help="Log as JSON lines")

    subparsers = parser.add_subparsers(dest='command', required=True)

    search_parser = subparsers.add_parser('search', help="Run one search")
    search_parser.add_argument('query', help="Search query (empty string to browse)")
    search_parser.add_argument('--tag', '-t', help="Restrict to one category")
    search_parser.add_argument('--limit', '-l', type=int, default=0,
                               help="Show at most N results (0 = all)")
    search_parser.add_argument('--json', action='store_true', help="Output as JSON")

    tags_parser = subparsers.add_parser('tags', help="List categories")
    tags_parser.add_argument('--json', action='store_true', help="Output as JSON")

    type_parser = subparsers.add_parser('type', help="Replay keystrokes through the debouncer")
    type_parser.add_argument('keystrokes', nargs='+', help="Successive raw query values")
    type_parser.add_argument('--tag', '-t', help="Restrict to one category")
    type_parser.add_argument('--delay-ms', type=int, default=100,
                             help="Pause between keystrokes (default: 100)")
    type_parser.add_argument('--limit', '-l', type=int, default=0,
                             help="Show at most N results (0 = all)")
    type_parser.add_argument('--json', action='store_true', help="Output as JSON")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if getattr(args, 'limit', 0) < 0:
            raise ValidationError('--limit must be >= 0', limit=args.limit)
        if getattr(args, 'delay_ms', 0) < 0:
            raise ValidationError('--delay-ms must be >= 0', delay_ms=args.delay_ms)

        config = get_config(args.config)
        setup_logging(
            level=args.log_level or config.log_level,
            json_format=args.json_logs or config.log_format == 'json',
            stream=sys.stderr
        )

        dataset = load_dataset(args.dataset or config.dataset_file)
        searcher = HybridSearcher.from_config(dataset, config)

        if args.command == 'search':
            return cmd_search(searcher, args)
        if args.command == 'tags':
            return cmd_tags(searcher, args)
        return cmd_type(searcher, args, config)

    except GalatError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
