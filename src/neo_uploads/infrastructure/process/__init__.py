"""Process infrastructure."""

from .command_runner import CommandRunner, CommandResult, create_command_runner

__all__ = [
    "CommandRunner",
    "CommandResult",
    "create_command_runner",
]
