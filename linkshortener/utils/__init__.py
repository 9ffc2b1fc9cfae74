from linkshortener.utils.config import app_env, app_name, app_prefix, project_root, load_config, Settings
from linkshortener.utils.helpers import get_short_url, new_link_id
from linkshortener.utils.shortener import generate_shortcode, validate_shortcode, is_shortcode_unique, allocate_shortcode
from linkshortener.utils.url_validator import validate_url, validate_urls
from linkshortener.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'validate_shortcode',
    'is_shortcode_unique',
    'allocate_shortcode',
    'validate_url',
    'validate_urls',
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'Settings',
    'get_short_url',
    'new_link_id',
    'initialize_logging',
]
