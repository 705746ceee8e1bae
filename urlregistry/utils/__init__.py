from urlregistry.utils.config import app_env, app_name, project_root, app_prefix, load_config
from urlregistry.utils.helpers import get_short_url, is_valid_url, is_valid_shortcode, utcnow
from urlregistry.utils.shortener import generate_shortcode
from urlregistry.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'get_short_url',
    'is_valid_url',
    'is_valid_shortcode',
    'utcnow',
    'initialize_logging',
]
