import os
from dotenv import load_dotenv

load_dotenv()


def _getenv_first(*names, default=None):
    """Return the first non-empty environment variable among ``names``."""
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


def _get_base_url():
    """
    Get the NocoBase base URL without a trailing slash.

    Accepts NOCOBASE_BASE_URL or the shorter BASE_URL used by older deployments.
    Returns None when unset - the client raises on first use instead of
    blocking app startup.
    """
    base_url = _getenv_first('NOCOBASE_BASE_URL', 'BASE_URL')
    if not base_url:
        return None
    return base_url.rstrip('/')


class Config:
    DEBUG = os.getenv('FLASK_DEBUG', 'False').lower() == 'true'
    PORT = int(os.getenv('PORT', '3001'))

    # Upstream NocoBase connection
    NOCOBASE_BASE_URL = _get_base_url()
    NOCOBASE_API_KEY = _getenv_first('NOCOBASE_API_KEY', 'API_KEY')
    NOCOBASE_TIMEOUT_SECONDS = float(os.getenv('NOCOBASE_TIMEOUT_SECONDS', '15'))
    NOCOBASE_PAGE_SIZE = int(os.getenv('NOCOBASE_PAGE_SIZE', '200'))

    # Fixed request headers expected by the NocoBase "Assets" app
    NOCOBASE_ROLE = os.getenv('NOCOBASE_ROLE', 'admin')
    NOCOBASE_LOCALE = os.getenv('NOCOBASE_LOCALE', 'en-US')
    NOCOBASE_APP = os.getenv('NOCOBASE_APP', 'Assets')
    NOCOBASE_TIMEZONE = os.getenv('NOCOBASE_TIMEZONE', '+05:30')
    NOCOBASE_HOSTNAME = os.getenv('NOCOBASE_HOSTNAME', 'spaces.iitm.ac.in')
    NOCOBASE_AUTHENTICATION = os.getenv('NOCOBASE_AUTHENTICATION', 'basic')

    # Report cache
    CACHE_TTL_SECONDS = int(os.getenv('CACHE_TTL_SECONDS', '300'))
    CACHE_MAX_SIZE = int(os.getenv('CACHE_MAX_SIZE', '500'))
