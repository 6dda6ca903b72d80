"""
Galat Search Structured Logging Configuration

Provides:
- JSON lines for machine consumption, with search context grouped under
  a "search" object
- Colorized console output for interactive use
- A timing decorator for search entry points

Usage:
    from core.logging_config import setup_logging, get_logger

    # At startup
    setup_logging(level='INFO', json_format=False)

    # In modules
    logger = get_logger(__name__)
    logger.debug('Merged results', extra={'query': 'libre', 'semantic_count': 2})
"""

import logging
import json
import sys
import time
import traceback
from datetime import datetime, timezone
from functools import wraps


# Attributes every LogRecord carries; anything else came in through `extra`.
_RESERVED_ATTRS = frozenset((
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'pathname', 'process', 'processName', 'relativeCreated',
    'stack_info', 'exc_info', 'exc_text', 'thread', 'threadName',
    'taskName', 'message',
))

# Extra fields describing a search, in display order
SEARCH_FIELDS = (
    'query', 'tag', 'query_terms',
    'semantic_count', 'keyword_count', 'hit_count', 'working_set',
    'commit_count',
)


def search_context(record):
    """Search fields present on a record, in SEARCH_FIELDS order."""
    return {key: getattr(record, key) for key in SEARCH_FIELDS if hasattr(record, key)}


def _exception_info(exc_info):
    exc_type, exc_value, _ = exc_info
    return {
        'type': exc_type.__name__ if exc_type else None,
        'message': str(exc_value) if exc_value else None,
        'traceback': traceback.format_exception(*exc_info),
    }


# =============================================================================
# Formatters
# =============================================================================

class JSONFormatter(logging.Formatter):
    """
    One JSON object per record.

    Search fields go under "search"; any other extra stays at the top level
    (entry_count, duration_ms, function, ...).
    """

    def format(self, record):
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        search = search_context(record)
        if search:
            log_entry['search'] = search

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key in SEARCH_FIELDS or key.startswith('_'):
                continue
            log_entry[key] = value

        if record.exc_info:
            log_entry['exception'] = _exception_info(record.exc_info)

        return json.dumps(log_entry, default=str, ensure_ascii=False)


class ColoredFormatter(logging.Formatter):
    """Console formatter: colored level, message, then query/tag and timing."""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        color = self.COLORS.get(record.levelname, '')
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S')

        parts = [
            f'{color}[{timestamp}] {record.levelname:8}{self.RESET}',
            f'{record.name}:',
            record.getMessage(),
        ]

        if getattr(record, 'query', None):
            parts.append(f"query='{record.query}'")
        if getattr(record, 'tag', None):
            parts.append(f"tag={record.tag}")
        if hasattr(record, 'duration_ms'):
            parts.append(f'({record.duration_ms}ms)')

        message = ' '.join(parts)
        if record.exc_info:
            message += '\n' + ''.join(traceback.format_exception(*record.exc_info))
        return message


# =============================================================================
# Setup
# =============================================================================

def setup_logging(level='INFO', json_format=False, stream=None):
    """
    Configure the root logger with a single console handler.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON lines instead of colored console output
        stream: Output stream (defaults to stdout)

    Returns:
        The configured root logger
    """
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(JSONFormatter() if json_format else ColoredFormatter())
    root_logger.addHandler(handler)

    root_logger.debug('Logging configured', extra={
        'format': 'json' if json_format else 'colored',
        'log_level': logging.getLevelName(numeric_level)
    })
    return root_logger


def get_logger(name):
    """Get a logger with the given name."""
    return logging.getLogger(name)


# =============================================================================
# Timing
# =============================================================================

def log_performance(logger_name=None):
    """
    Log how long each call takes, at debug level; failures at error level
    before re-raising.

    Usage:
        @log_performance('galat.search')
        def compute_results(dataset, committed_query, selected_tag):
            ...
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger(logger_name or func.__module__)
            start_time = time.perf_counter()

            def elapsed_ms():
                return round((time.perf_counter() - start_time) * 1000, 3)

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f'{func.__name__} failed: {e}',
                    extra={
                        'function': func.__name__,
                        'duration_ms': elapsed_ms(),
                        'error_type': type(e).__name__,
                    }
                )
                raise

            logger.debug(
                f'{func.__name__} completed',
                extra={'function': func.__name__, 'duration_ms': elapsed_ms()}
            )
            return result

        return wrapper
    return decorator
