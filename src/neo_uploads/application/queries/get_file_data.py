"""Get file data query.

ONLY image facts - dimensions, byte size and dominant color of an image,
read with ImageMagick's ``identify`` and ``convert``.
"""

import logging
import re
from typing import Any, Dict, Optional

from ...core.exceptions import MissingExecutableError
from ...infrastructure.process.command_runner import CommandRunner

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = frozenset({"jpg", "png", "gif"})

_DIMENSIONS = re.compile(r"^(\d+)x(\d+)$")
_BYTE_SIZE = re.compile(r"^(\d+)B$")
_HEX_COLOR = re.compile(r"#[0-9A-Fa-f]{6}")

COLOR_ARGS = ("-gravity", "center", "-crop", "85%", "-resize", "1x1!", "-depth", "8", "txt:-")


async def get_file_data(
    extension: Any,
    path: str,
    runner: Optional[CommandRunner] = None,
) -> Dict[str, Any]:
    """Read width, height, size and color of an image.

    Args:
        extension: File extension (``"png"``, ``".png"``)
        path: Path of the image on disk
        runner: Command runner override

    Returns:
        Dict with ``width``, ``height``, ``size`` and ``color`` keys for the
        parts that could be read; empty for other extensions
    """
    if str(extension or "").lstrip(".").lower() not in IMAGE_EXTENSIONS:
        return {}

    runner = runner or CommandRunner()
    data: Dict[str, Any] = {}
    data.update(await _identify_sizes(runner, path))
    data.update(await _identify_color(runner, path))
    return data


async def _identify_sizes(runner: CommandRunner, path: str) -> Dict[str, int]:
    try:
        result = await runner.run("identify", [path])
    except MissingExecutableError as e:
        logger.warning(f"identify unavailable: {e.message}")
        return {}
    if not result.succeeded:
        return {}

    # "<path> PNG 640x480 640x480+0+0 8-bit sRGB 12345B 0.000u 0:00.000"
    tokens = result.output.split()[2:]
    dimensions = next((m for m in map(_DIMENSIONS.match, tokens) if m), None)
    size = next((m for m in map(_BYTE_SIZE.match, tokens) if m), None)
    if dimensions is None or size is None:
        return {}

    return {
        "width": int(dimensions.group(1)),
        "height": int(dimensions.group(2)),
        "size": int(size.group(1)),
    }


async def _identify_color(runner: CommandRunner, path: str) -> Dict[str, str]:
    try:
        result = await runner.run("convert", [path, *COLOR_ARGS])
    except MissingExecutableError as e:
        logger.warning(f"convert unavailable: {e.message}")
        return {}
    if not result.succeeded:
        return {}

    match = _HEX_COLOR.search(result.output)
    return {"color": match.group(0)} if match else {}
