"""
Configuration for Galat Search

Settings come from three layers, later ones winning:
1. Defaults declared on SearchConfig
2. An optional YAML file (GALAT_CONFIG or an explicit path)
3. GALAT_* environment variables, after a .env file has been loaded

Usage:
    from core.config import get_config

    config = get_config()
    print(config.debounce_ms, config.min_relevance)
"""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv

from .errors import ConfigurationError

PROJECT_ROOT = Path(__file__).parent.parent

# Environment variable -> config field
ENV_VARS = {
    'GALAT_DEBOUNCE_MS': 'debounce_ms',
    'GALAT_MIN_RELEVANCE': 'min_relevance',
    'GALAT_KEYWORD_SCORE': 'keyword_score',
    'GALAT_CACHE_SIZE': 'cache_size',
    'GALAT_DATASET': 'dataset_path',
    'GALAT_LOG_LEVEL': 'log_level',
    'GALAT_LOG_FORMAT': 'log_format',
}

LOG_FORMATS = ('colored', 'json')


@dataclass(frozen=True)
class SearchConfig:
    """Tunable settings for the search engine and its surroundings."""
    debounce_ms: int = 500
    min_relevance: float = 0.3
    keyword_score: float = 0.05
    cache_size: int = 128
    dataset_path: str = 'data/galat_data.json'
    log_level: str = 'INFO'
    log_format: str = 'colored'

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0

    @property
    def dataset_file(self) -> Path:
        """Dataset path, relative paths resolved against the project root."""
        path = Path(self.dataset_path)
        return path if path.is_absolute() else PROJECT_ROOT / path

    def validate(self) -> 'SearchConfig':
        """Check value ranges, raising ConfigurationError on the first bad one."""
        if self.debounce_ms < 0:
            raise ConfigurationError('debounce_ms must be >= 0', debounce_ms=self.debounce_ms)
        if not 0.0 < self.min_relevance <= 1.0:
            raise ConfigurationError(
                'min_relevance must be in (0, 1]', min_relevance=self.min_relevance
            )
        if not 0.0 <= self.keyword_score < 1.0:
            raise ConfigurationError(
                'keyword_score must be in [0, 1)', keyword_score=self.keyword_score
            )
        if self.cache_size < 0:
            raise ConfigurationError('cache_size must be >= 0', cache_size=self.cache_size)
        if self.log_format not in LOG_FORMATS:
            raise ConfigurationError(
                f'log_format must be one of {", ".join(LOG_FORMATS)}',
                log_format=self.log_format
            )
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _coerce(name: str, value: Any) -> Any:
    """Convert a raw YAML/env value to the type of the named field."""
    field_types = {f.name: f.type for f in fields(SearchConfig)}
    if name not in field_types:
        raise ConfigurationError(f'Unknown configuration key: {name}', key=name)

    target = field_types[name]
    try:
        if target in (int, 'int'):
            return int(value)
        if target in (float, 'float'):
            return float(value)
        return str(value)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f'Invalid value for {name}: {value!r}', key=name, value=value
        )


def load_yaml_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read overrides from a YAML file.

    Keys may sit at the top level or under a `search:` section.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigurationError(f'Config file not found: {config_path}', path=str(config_path))

    try:
        with open(config_path, encoding='utf-8') as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f'Invalid YAML in {config_path}: {e}', path=str(config_path))

    if not isinstance(raw, dict):
        raise ConfigurationError('Config file must contain a mapping', path=str(config_path))

    section = raw.get('search', raw)
    if not isinstance(section, dict):
        raise ConfigurationError('`search` section must be a mapping', path=str(config_path))

    return {key: _coerce(key, value) for key, value in section.items()}


def load_env_config(environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Read overrides from GALAT_* environment variables."""
    environ = os.environ if environ is None else environ
    overrides = {}
    for env_name, field_name in ENV_VARS.items():
        value = environ.get(env_name)
        if value is not None and value.strip():
            overrides[field_name] = _coerce(field_name, value.strip())
    return overrides


def get_config(
    config_path: Optional[Union[str, Path]] = None,
    environ: Optional[Dict[str, str]] = None,
    load_env_file: bool = True
) -> SearchConfig:
    """
    Build the effective configuration.

    Args:
        config_path: YAML file to read (falls back to GALAT_CONFIG)
        environ: Environment mapping (defaults to os.environ)
        load_env_file: Load PROJECT_ROOT/.env before reading the environment

    Returns:
        A validated SearchConfig
    """
    if load_env_file and environ is None:
        load_dotenv(PROJECT_ROOT / '.env')

    env = os.environ if environ is None else environ
    config = SearchConfig()

    config_path = config_path or env.get('GALAT_CONFIG')
    if config_path:
        config = replace(config, **load_yaml_config(config_path))

    config = replace(config, **load_env_config(env))
    return config.validate()
