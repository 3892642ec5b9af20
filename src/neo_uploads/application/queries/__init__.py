"""Upload queries (URLs and file data)."""

from .resolve_url import UrlResolver, create_url_resolver
from .get_file_data import get_file_data

__all__ = [
    "UrlResolver",
    "create_url_resolver",
    "get_file_data",
]
