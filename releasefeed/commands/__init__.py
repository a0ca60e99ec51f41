"""Subcommands of the ``releasefeed`` CLI.

Each module in this package may define :class:`Command` subclasses; the
entry point discovers them and registers one sub-parser per command name.
"""
from __future__ import annotations

import argparse
import inspect
from pathlib import Path
from typing import Awaitable, List, Optional, Sequence, Type, Union

from ..config import Settings, load_settings

CommandResult = Optional[int]
MaybeAwaitable = Union[CommandResult, Awaitable[CommandResult]]


class Command:
    """Base class for CLI subcommands."""

    name: str = ""
    help: str = ""
    aliases: Sequence[str] = ()
    #: Whether the command accepts ``--config`` and reads :class:`Settings`.
    needs_settings: bool = True

    @classmethod
    def configure_parser(cls, parser: argparse.ArgumentParser) -> None:
        """Hook for subclasses to define command-specific arguments."""

    @classmethod
    def handle(cls, args: argparse.Namespace) -> MaybeAwaitable:
        """Run the command; may return an exit status or a coroutine producing one."""
        raise NotImplementedError("Command subclasses must implement handle()")

    @classmethod
    def attach(cls, subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
        """Register the command, plus ``--config`` when it reads settings."""

        if not cls.name:
            raise ValueError("Command subclasses must define a non-empty 'name'")
        parser = subparsers.add_parser(
            cls.name,
            help=cls.help or None,
            description=cls.help or None,
            aliases=list(cls.aliases),
        )
        if cls.needs_settings:
            parser.add_argument(
                "--config",
                type=Path,
                default=None,
                help="Optional YAML settings file; environment variables override it.",
            )
        cls.configure_parser(parser)
        parser.set_defaults(_command_cls=cls)

    @staticmethod
    def settings(args: argparse.Namespace) -> Settings:
        """Load settings from the command's ``--config`` file and the environment."""

        return load_settings(getattr(args, "config", None))


def discover_commands(module: object) -> List[Type[Command]]:
    """Return every named ``Command`` subclass defined on ``module``, sorted by name."""

    commands: List[Type[Command]] = []
    for _, obj in inspect.getmembers(module, inspect.isclass):
        if issubclass(obj, Command) and obj is not Command and getattr(obj, "name", ""):
            commands.append(obj)
    commands.sort(key=lambda cls: cls.name)
    return commands


__all__ = ["Command", "CommandResult", "MaybeAwaitable", "discover_commands"]
