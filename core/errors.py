"""
Galat Search Error Handling

Provides:
- Custom exception classes for loading, configuration and input
- A fallback decorator for the search passes

Search operations never raise to the caller. Anything that goes wrong
inside a matcher pass is logged and the pass contributes no results.
Errors only surface at the edges: reading the dataset, reading the
configuration, bad command line input.

Usage:
    from core.errors import DatasetError, safe_operation

    if not path.exists():
        raise DatasetError("Dataset file not found", path=str(path))

    @safe_operation(default_value=())
    def semantic_pass(query, entries):
        ...
"""

from functools import wraps
import logging

logger = logging.getLogger('galat.errors')


# =============================================================================
# Custom Exceptions
# =============================================================================

class GalatError(Exception):
    """Base exception for Galat Search errors."""

    error_type = 'internal_error'
    message = 'An unexpected error occurred'

    def __init__(self, message=None, **kwargs):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.details = kwargs

    def to_dict(self):
        return {
            'error': self.error_type,
            'message': self.message,
            'details': self.details
        }


class DatasetError(GalatError):
    """Dataset file missing, unreadable or inconsistent."""
    error_type = 'dataset_error'
    message = 'Dataset could not be loaded'


class ValidationError(GalatError):
    """Invalid input data."""
    error_type = 'validation_error'
    message = 'Invalid input'


class ConfigurationError(GalatError):
    """Configuration issue."""
    error_type = 'configuration_error'
    message = 'Invalid configuration'


# =============================================================================
# Error Recovery Utilities
# =============================================================================

def safe_operation(default_value=None, log_errors=True):
    """
    Decorator for safe operation execution with fallback.

    The default value is returned as is, so pass an immutable one.

    Usage:
        @safe_operation(default_value=())
        def keyword_pass(query, entries):
            return matcher.match(query, entries)
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if log_errors:
                    logger.error(
                        f'Error in {func.__name__}: {str(e)}',
                        extra={'function': func.__name__, 'error': str(e)},
                        exc_info=True
                    )
                return default_value
        return wrapper
    return decorator

