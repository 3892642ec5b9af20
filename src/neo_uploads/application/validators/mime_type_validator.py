"""MIME type validator.

ONLY content type validation - checks a file's detected content type
against its extension and an allow-list.

Following maximum separation architecture - one file = one purpose.

Validation steps:

1. Detect the content type with ``file --mime --brief``
2. Check the content type is a known one
3. Check the file extension is registered for that content type
4. Check the content type is allowed
"""

import logging
import mimetypes
import os
import re
from typing import Any, Iterable, Optional, Union

from ...core.exceptions import MissingExecutableError, ValidationRejected
from ...infrastructure.process.command_runner import CommandRunner

logger = logging.getLogger(__name__)

ALL = "all"

INVALID_CONTENT_TYPE = "content type is invalid"
EXTENSION_MISMATCH = "content type and extension doesn't match"
NOT_ALLOWED = "invalid file format"

_CONTENT_TYPE = re.compile(r"^(?P<content_type>[^;\s]+)\s*;")


class MimeTypeValidator:
    """Validates files by detected MIME type.

    Usable directly from ``Definition.validate``::

        def validate(self, artifact, scope):
            return self.mime_validator.validate(artifact)
    """

    def __init__(
        self,
        allowed: Union[str, Iterable[str]] = ALL,
        runner: Optional[CommandRunner] = None,
    ):
        """Initialize validator.

        Args:
            allowed: Allowed content types, or ``"all"``
            runner: Command runner override
        """
        self._allowed = allowed if allowed == ALL else frozenset(allowed)
        self._runner = runner or CommandRunner()

    async def validate(self, file: Any) -> Union[bool, ValidationRejected]:
        """Validate a path or an artifact.

        Returns:
            True when accepted, otherwise a ValidationRejected carrying one of
            the rejection messages
        """
        if self._allowed == ALL:
            return True

        path = file if isinstance(file, str) else getattr(file, "path", None)
        file_name = file if isinstance(file, str) else getattr(file, "file_name", None)

        content_type = await self.content_type(path)
        if content_type is None or not is_known_content_type(content_type):
            return self._reject(INVALID_CONTENT_TYPE, file_name)
        if not extension_matches(file_name or path, content_type):
            return self._reject(EXTENSION_MISMATCH, file_name)
        if content_type not in self._allowed:
            return self._reject(NOT_ALLOWED, file_name)
        return True

    async def content_type(self, path: Optional[str]) -> Optional[str]:
        """Content type reported by the ``file`` utility, None if unknown."""
        if not path or not os.path.exists(path):
            return None
        try:
            result = await self._runner.run("file", ["--mime", "--brief", path])
        except MissingExecutableError:
            logger.error("The 'file' utility is required for MIME validation")
            raise
        if not result.succeeded:
            logger.warning(f"file --mime failed for {path}: {result.output.strip()}")
            return None

        match = _CONTENT_TYPE.match(result.output.strip())
        return match.group("content_type") if match else None

    @staticmethod
    def _reject(message: str, file_name: Optional[str]) -> ValidationRejected:
        logger.info(f"Rejected {file_name}: {message}")
        return ValidationRejected([message], file_name=file_name)


def is_known_content_type(content_type: str) -> bool:
    """True when ``content_type`` is registered with any extension."""
    return bool(mimetypes.guess_all_extensions(content_type, strict=False))


def extension_matches(name: Optional[str], content_type: str) -> bool:
    """True when the extension of ``name`` is registered for ``content_type``."""
    extension = os.path.splitext(name or "")[1].lower()
    return extension in mimetypes.guess_all_extensions(content_type, strict=False)


def create_mime_type_validator(
    allowed: Union[str, Iterable[str]] = ALL,
    runner: Optional[CommandRunner] = None,
) -> MimeTypeValidator:
    """Create MIME type validator."""
    return MimeTypeValidator(allowed, runner)
