"""Utility functions for application configuration management.

Configuration is read from a YAML document, one per application
environment (`APP_ENV`), located at `<project root>/config/<env>.yaml`.
`LINKSHORTENER_CONFIG` may point at an explicit file instead.

The YAML document follows this structure (every key is optional):

    backend: redis              # "redis" or "memory"
    base_url: https://sho.rt    # public base URL used to print short URLs
    redis:
      host: localhost
      port: 6379
      db: 0
      username: null
      password: null
    shortener:
      length: 6                 # length of generated shortcodes
      max_attempts: 1000        # allocation retry bound
    diagnostics:
      sink_url: null            # overridden by DIAGNOSTIC_SINK_URL

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return key prefix for DAOs, or None if `APP_NAME` is not set.

    project_root() -> Path
        Return the project root directory, using `PROJECT_ROOT` when available.

    config_path() -> Path
        Return the path of the YAML file `load_config()` reads.

    load_config(path: Path | None = None) -> Settings
        Load and validate configuration into a frozen Settings object.

Example:
    >>> from linkshortener.utils.config import load_config
    >>> settings = load_config()
    >>> settings.backend
    'redis'
    >>> settings.redis['host']
    'localhost'
"""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from linkshortener.constants import ENV, Backend, Defaults
from linkshortener.exceptions import BadConfigurationError


logger = logging.getLogger(__name__)


# decode_responses is fixed to True by RedisClientMixin
REDIS_OPTIONS = frozenset({'host', 'port', 'db', 'username', 'password'})


@dataclass(frozen=True)
class Settings:
    """Validated application configuration.

    Attributes:
        backend (str): which ShortLink DAO to build ('redis' or 'memory')
        base_url (str): public base URL of the redirect service
        redis (dict): keyword arguments for RedisClientMixin (without the 'redis_' prefix)
        shortcode_length (int): length of generated shortcodes
        max_attempts (int): shortcode allocation retry bound
        prefix (str | None): namespace for storage keys
        sink_url (str | None): diagnostic sink endpoint, if any
    """

    backend: str = Defaults.BACKEND
    base_url: str = Defaults.BASE_URL
    redis: dict[str, Any] = field(default_factory=dict)
    shortcode_length: int = Defaults.SHORTCODE_LENGTH
    max_attempts: int = Defaults.SHORTCODE_MAX_ATTEMPTS
    prefix: str | None = None
    sink_url: str | None = None


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Returns:
        str:
            Value of `APP_ENV` environment variable, `'local'` by default.

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'

    Returns:
        str:
            Value of `APP_NAME` environment variable.
            None if variable is not set.
    """
    return os.environ.get(ENV.App.APP_NAME) or None


def app_prefix() -> str | None:
    """Return key prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'linkshortener'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'linkshortener:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def project_root() -> Path:
    """Return the project root directory (`PROJECT_ROOT`, or the working directory)."""
    return Path(os.environ.get(ENV.App.PROJECT_ROOT, os.getcwd()))


def config_path() -> Path:
    explicit = os.environ.get(ENV.App.CONFIG_PATH)
    if explicit:
        return Path(explicit)
    return project_root() / 'config' / f'{app_env()}.yaml'


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise BadConfigurationError(f'Configuration file {path} is not valid YAML.') from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BadConfigurationError(f'Configuration file {path} must contain a mapping at the top level.')
    return data


def _positive_int(section: str, name: str, value: Any) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        raise BadConfigurationError(f'{section}.{name} must be a positive integer (given value: {value!r}).')
    return value


def load_config(path: Path | None = None) -> Settings:
    """Load configuration from YAML and return validated Settings

    A missing configuration file is not an error: defaults are used (Redis
    on localhost). The storage prefix is always set: `<APP_NAME>:<APP_ENV>`,
    or `linkshortener:<APP_ENV>` when APP_NAME is unset, so clearing the store
    never touches keys outside this application's namespace.
    DIAGNOSTIC_SINK_URL takes precedence over the file's sink_url.

    Args:
        path (Path | None):
            Explicit YAML file. Defaults to config_path().

    Returns:
        Settings: validated configuration

    Raises:
        BadConfigurationError:
            If the file is not valid YAML or holds invalid values.
    """
    path = path or config_path()
    if path.is_file():
        logger.debug('Loading configuration file.', extra={'path': str(path)})
        data = _read_yaml(path)
    else:
        logger.debug('No configuration file found, using defaults.', extra={'path': str(path)})
        data = {}

    backend = str(data.get('backend', Defaults.BACKEND)).lower()
    backends = sorted(b.value for b in Backend)
    if backend not in backends:
        raise BadConfigurationError(f'backend must be one of {backends} (given value: {backend!r}).')

    redis_config = data.get('redis') or {}
    if not isinstance(redis_config, dict):
        raise BadConfigurationError('redis must be a mapping of connection options.')
    unknown = set(redis_config) - REDIS_OPTIONS
    if unknown:
        raise BadConfigurationError(f'Unknown redis options: {", ".join(sorted(unknown))}.')

    shortener = data.get('shortener') or {}
    diagnostics = data.get('diagnostics') or {}
    if not isinstance(shortener, dict) or not isinstance(diagnostics, dict):
        raise BadConfigurationError('shortener and diagnostics must be mappings.')

    return Settings(
        backend=backend,
        base_url=str(data.get('base_url', Defaults.BASE_URL)),
        redis=dict(redis_config),
        shortcode_length=_positive_int('shortener', 'length', shortener.get('length', Defaults.SHORTCODE_LENGTH)),
        max_attempts=_positive_int(
            'shortener', 'max_attempts', shortener.get('max_attempts', Defaults.SHORTCODE_MAX_ATTEMPTS)
        ),
        prefix=app_prefix() or f'{Defaults.APP_NAME}:{app_env()}',
        sink_url=os.environ.get(ENV.Diagnostics.SINK_URL) or diagnostics.get('sink_url'),
    )
