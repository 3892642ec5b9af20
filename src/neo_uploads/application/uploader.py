"""Uploader facade.

ONLY public entry point - binds a definition to the store and delete
commands and the URL resolver.
"""

import logging
from typing import Any, Dict, Optional

from ..config.settings import UploadSettings
from .commands.delete_file import DeleteFileCommand, DeleteFileData, DeleteFileResult
from .commands.store_file import StoreFileCommand, StoreFileData, StoreFileResult
from .queries.resolve_url import UrlResolver
from .services.source_acquirer import SourceAcquirer
from .services.transform_executor import TransformExecutor

logger = logging.getLogger(__name__)


class Uploader:
    """Store, delete and address files of one definition.

    Example::

        uploader = Uploader(AvatarDefinition())
        result = await uploader.store("/tmp/selfie.png", scope=user)
        if result.success:
            uploader.url(result.file_name, "thumb", scope=user)
    """

    def __init__(
        self,
        definition,
        settings: Optional[UploadSettings] = None,
        acquirer: Optional[SourceAcquirer] = None,
        executor: Optional[TransformExecutor] = None,
    ):
        self.definition = definition
        self.settings = settings or definition.settings
        self._store = StoreFileCommand(
            definition, self.settings, acquirer=acquirer, executor=executor
        )
        self._delete = DeleteFileCommand(definition, self.settings)
        self._urls = UrlResolver(definition)

    async def store(self, source: Any, scope: Any = None) -> StoreFileResult:
        """Store ``source`` under every version.

        ``source`` may also be a ``(source, scope)`` tuple.
        """
        data = StoreFileData.from_input(source) if scope is None else StoreFileData(source, scope)
        return await self._store.execute(data)

    async def delete(self, file: Any, scope: Any = None) -> DeleteFileResult:
        """Delete every version of a stored file."""
        data = DeleteFileData.from_input(file if scope is None else (file, scope))
        return await self._delete.execute(data)

    def url(self, file: Any, version: Optional[str] = None, scope: Any = None, **options: Any) -> Optional[str]:
        """URL of one version (the first declared version by default)."""
        return self._urls.url(file if scope is None else (file, scope), version, **options)

    def urls(self, file: Any, scope: Any = None, **options: Any) -> Dict[str, Optional[str]]:
        """URLs of every version."""
        return self._urls.urls(file if scope is None else (file, scope), **options)


def create_uploader(
    definition,
    settings: Optional[UploadSettings] = None,
) -> Uploader:
    """Create uploader."""
    return Uploader(definition, settings)
