"""Version naming.

ONLY destination naming - resolves the stored file name and storage key of a
version. Store, delete, URL resolution and the backends all go through these
functions so they always agree on a name.
"""

import posixpath
from typing import Any, Optional

from ...core.value_objects.transform import Skip


def resolve_file_name(definition, version: str, artifact: Any, scope: Any) -> Optional[str]:
    """Resolve the destination file name of ``version``.

    Returns:
        ``filename`` plus the instruction's output extension when it declares
        one, else plus the source display name's extension; None when the
        version is skipped
    """
    instruction = definition.instruction(version, artifact, scope)
    if isinstance(instruction, Skip):
        return None

    name = str(definition.filename(version, artifact, scope))
    if instruction.output_extension:
        return f"{name}.{instruction.output_extension}"
    return f"{name}{artifact.name_extension}"


def storage_key(definition, version: str, artifact: Any, scope: Any) -> Optional[str]:
    """``storage_dir/resolved_file_name`` for a version, None when skipped."""
    file_name = resolve_file_name(definition, version, artifact, scope)
    if file_name is None:
        return None
    directory = str(definition.storage_dir(version, artifact, scope) or "")
    return posixpath.join(directory, file_name) if directory else file_name
