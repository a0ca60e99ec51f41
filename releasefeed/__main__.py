"""Command-line entry point for the releasefeed package."""
from __future__ import annotations

import argparse
import asyncio
import importlib
import logging
import pkgutil
import sys
from typing import Coroutine, Dict, List, Optional, Sequence, Type, cast

from .commands import Command, CommandResult, MaybeAwaitable, discover_commands
from .config import ConfigurationError
from .storage import StorageError

logger = logging.getLogger("releasefeed")


def _load_command_modules() -> List[Type[Command]]:
    """Collect every command subclass exposed by ``releasefeed.commands``."""

    package = importlib.import_module("releasefeed.commands")
    # Commands may live on the package module itself or in its submodules.
    command_types: List[Type[Command]] = list(discover_commands(package))
    for module_info in pkgutil.iter_modules(package.__path__):
        module = importlib.import_module(f"{package.__name__}.{module_info.name}")
        command_types.extend(discover_commands(module))
    # Later registrations win; sort so --help lists commands predictably.
    unique: Dict[str, Type[Command]] = {}
    for command_type in command_types:
        unique[command_type.name] = command_type
    return sorted(unique.values(), key=lambda cls: cls.name)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="releasefeed",
        description="Collect releases from GitHub push events and publish them as JSON and RSS",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level applied to all commands.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Shortcut for setting --log-level=DEBUG.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    for command_cls in _load_command_modules():
        command_cls.attach(subparsers)
    return parser


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.DEBUG if args.debug else getattr(logging, args.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _execute_handler(result: MaybeAwaitable) -> int:
    if asyncio.iscoroutine(result):
        awaited = cast(Coroutine[object, object, CommandResult], result)
        outcome: CommandResult = asyncio.run(awaited)
    else:
        outcome = cast(CommandResult, result)
    return int(outcome or 0)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args)

    command_cls: Optional[Type[Command]] = getattr(args, "_command_cls", None)
    if command_cls is None:
        parser.print_help()
        return 1

    try:
        return _execute_handler(command_cls.handle(args))
    except (ConfigurationError, StorageError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":  # pragma: no cover - thin wrapper
    sys.exit(main())
