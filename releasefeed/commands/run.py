from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from ..pipeline import build_response
from . import Command, CommandResult, MaybeAwaitable

logger = logging.getLogger(__name__)


class RunCommand(Command):
    name = "run"
    help = "Refresh the release database and print the releases JSON"

    @classmethod
    def configure_parser(cls, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--output",
            type=Path,
            default=None,
            help="Write the releases JSON to this file instead of stdout.",
        )

    @classmethod
    def handle(cls, args: argparse.Namespace) -> MaybeAwaitable:
        settings = cls.settings(args)

        async def _runner() -> CommandResult:
            status, body = await build_response(settings)
            text = json.dumps(body, indent=2)
            if args.output is None:
                print(text)
            elif status == 200:
                args.output.parent.mkdir(parents=True, exist_ok=True)
                args.output.write_text(text)
                logger.info("Wrote %d releases to %s", len(body["infos"]), args.output)
            return 0 if status == 200 else 1

        return _runner()


__all__ = ["RunCommand"]
