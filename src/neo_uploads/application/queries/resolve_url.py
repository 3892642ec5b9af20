"""Resolve URL query.

ONLY URL resolution - turns a stored file reference into the URL of one
version (or of all versions), falling back to the definition's default URL
when there is no file.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from ...core.entities.artifact import StoredFile
from ..services.version_naming import resolve_file_name

logger = logging.getLogger(__name__)


class UrlResolver:
    """Builds URLs for stored versions of a definition.

    ``file`` may be a stored name, any object with a ``file_name`` attribute,
    None, or a ``(file, scope)`` tuple of those.
    """

    def __init__(self, definition):
        self._definition = definition

    def url(self, file: Any, version: Optional[str] = None, **options: Any) -> Optional[str]:
        """URL of ``version`` (the first declared version by default).

        Args:
            file: Stored file reference, optionally paired with a scope
            version: Version name
            **options: ``signed``, ``expires_in`` (``expire_in`` accepted)

        Returns:
            The URL, the default URL when ``file`` is None, or None when the
            version is skipped
        """
        if version is None:
            version = self._definition.versions[0]

        file, scope = _split_scope(file)
        if file is None:
            return self._definition.default_url(version, scope)
        if isinstance(file, str):
            file = StoredFile(file)

        if resolve_file_name(self._definition, version, file, scope) is None:
            return None

        return self._definition.storage.url(
            self._definition, version, file, scope, _normalize_options(options)
        )

    def urls(self, file: Any, **options: Any) -> Dict[str, Optional[str]]:
        """URLs of every declared version, keyed by version."""
        return {
            version: self.url(file, version, **options)
            for version in self._definition.versions
        }


def _split_scope(file: Any) -> Tuple[Any, Any]:
    if isinstance(file, tuple) and len(file) == 2:
        return file[0], file[1]
    return file, None


def _normalize_options(options: Dict[str, Any]) -> Dict[str, Any]:
    normalized = dict(options)
    if "expire_in" in normalized:
        normalized.setdefault("expires_in", normalized.pop("expire_in"))
    return normalized


def create_url_resolver(definition) -> UrlResolver:
    """Create URL resolver."""
    return UrlResolver(definition)
