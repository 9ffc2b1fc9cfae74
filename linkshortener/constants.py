import string
from enum import StrEnum


class TTL:
    """Durations in seconds."""

    # Sliding window used for "recent clicks" statistics (24 hours in seconds)
    ONE_DAY = 86_400  # 60 * 60 * 24
    # One minute of link validity
    ONE_MINUTE = 60


class Limits:
    """Hard limits enforced by validation."""

    MIN_VALIDITY_MINUTES = 1
    MAX_VALIDITY_MINUTES = 43_200  # 30 days
    MIN_BATCH_SIZE = 1
    MAX_BATCH_SIZE = 5
    MIN_SHORTCODE_LENGTH = 3
    MAX_SHORTCODE_LENGTH = 20
    RECENT_CLICKS = 10  # Clicks listed per link in statistics


class Defaults:
    """Default values used when configuration is silent."""

    VALIDITY_MINUTES = 30
    SHORTCODE_LENGTH = 6
    SHORTCODE_MAX_ATTEMPTS = 1_000
    BACKEND = 'redis'
    APP_NAME = 'linkshortener'  # key namespace when APP_NAME is unset
    BASE_URL = 'http://localhost:3000'
    REFERRER = 'Direct'
    SINK_TIMEOUT_SECONDS = 2


# Base62 alphabet: 26 lowercase + 26 uppercase + 10 digits
SHORTCODE_ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits

# Shortcodes that collide with application routes
RESERVED_SHORTCODES = frozenset({'api', 'www', 'admin', 'stats', 'app', 'create', 'delete', 'edit'})

# Hostnames a short link may never point to
FORBIDDEN_HOSTNAMES = frozenset({'localhost', '127.0.0.1'})


class Backend(StrEnum):
    REDIS = 'redis'
    MEMORY = 'memory'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        LOG_LEVEL = 'LOG_LEVEL'
        CONFIG_PATH = 'LINKSHORTENER_CONFIG'

    class Diagnostics(StrEnum):
        SINK_URL = 'DIAGNOSTIC_SINK_URL'  # e.g. http://logs.internal/evaluation-service/logs
