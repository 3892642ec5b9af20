"""Transform instruction value objects.

ONLY transform instructions - the declarative description of how one
version's output is derived from the acquired artifact.

Instructions are immutable and inert: building or inspecting one never runs
anything. The same (version, artifact, scope) must always produce an equal
instruction because it is evaluated again when resolving stored file names.
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Union


ArgsFunction = Callable[[str, str], Union[str, Sequence[str]]]
CommandArgs = Union[str, Sequence[str], ArgsFunction]


def _normalize_extension(extension: Optional[Any]) -> Optional[str]:
    if extension is None:
        return None
    ext = str(extension).lstrip(".")
    return ext or None


@dataclass(frozen=True)
class NoAction:
    """Store the acquired artifact as-is."""

    output_extension = None

    def __repr__(self) -> str:
        return "NO_ACTION"


@dataclass(frozen=True)
class Skip:
    """Produce and store nothing for this version."""

    output_extension = None

    def __repr__(self) -> str:
        return "SKIP"


@dataclass(frozen=True)
class Command:
    """Run an external program.

    ``args`` may be a string (split on whitespace and placed between the
    input and output paths), a list (placed the same way), or a function
    receiving ``(input_path, output_path)`` and returning the full argument
    string or list.
    """

    program: str
    args: CommandArgs = ""
    output_extension: Optional[str] = None

    def __post_init__(self):
        if not self.program:
            raise ValueError("Command program cannot be empty")
        object.__setattr__(self, "program", str(self.program))
        object.__setattr__(self, "output_extension", _normalize_extension(self.output_extension))
        if isinstance(self.args, list):
            object.__setattr__(self, "args", tuple(self.args))

    def build_args(self, input_path: str, output_path: str) -> List[str]:
        """Resolve the concrete argument list for the given paths."""
        if callable(self.args):
            resolved = self.args(input_path, output_path)
            if isinstance(resolved, str):
                return resolved.split()
            return [str(arg) for arg in resolved]

        if isinstance(self.args, str):
            middle = self.args.split()
        else:
            middle = [str(arg) for arg in self.args]
        return [input_path, *middle, output_path]


@dataclass(frozen=True)
class CustomFunction:
    """Call a Python function ``fn(version, artifact)``.

    The function may be a coroutine function; a plain function runs in a
    worker thread. It returns a new Artifact
    (setting ``is_tempfile`` itself) or raises TransformError.
    """

    fn: Callable[..., Any]
    output_extension: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "output_extension", _normalize_extension(self.output_extension))


NO_ACTION = NoAction()
SKIP = Skip()

TransformInstruction = Union[NoAction, Skip, Command, CustomFunction]


def convert(args: CommandArgs, output_extension: Optional[str] = None) -> Command:
    """ImageMagick ``convert`` instruction.

    >>> convert("-strip -thumbnail 100x100^ -gravity center -extent 100x100", "png")
    """
    return Command("convert", args, output_extension)


def ffmpeg(args: CommandArgs, output_extension: Optional[str] = None) -> Command:
    """FFmpeg instruction, e.g. ``ffmpeg(lambda i, o: f"-i {i} -f gif {o}", "gif")``."""
    return Command("ffmpeg", args, output_extension)


def coerce_instruction(value: Any) -> TransformInstruction:
    """Accept the shorthand forms a definition may return.

    ``None``/``"noaction"`` -> NO_ACTION, ``"skip"`` -> SKIP, a
    ``(program, args[, ext])`` tuple -> Command, a bare callable ->
    CustomFunction.
    """
    if isinstance(value, (NoAction, Skip, Command, CustomFunction)):
        return value
    if value is None or value == "noaction":
        return NO_ACTION
    if value == "skip":
        return SKIP
    if isinstance(value, tuple) and 2 <= len(value) <= 3:
        return Command(*value)
    if callable(value):
        return CustomFunction(value)
    raise ValueError(f"Unsupported transform instruction: {value!r}")
