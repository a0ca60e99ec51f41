from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from ..feed import render_feed
from ..models import ReleaseData
from ..pipeline import run_pipeline
from . import Command, CommandResult, MaybeAwaitable

logger = logging.getLogger(__name__)


class FeedCommand(Command):
    name = "feed"
    help = "Render the releases as an RSS feed"

    @classmethod
    def configure_parser(cls, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "--input",
            type=Path,
            default=None,
            help="Releases JSON written by 'run'. Refreshes from GitHub when omitted.",
        )
        parser.add_argument(
            "--output",
            type=Path,
            default=None,
            help="Write the feed to this file instead of stdout.",
        )

    @classmethod
    def handle(cls, args: argparse.Namespace) -> MaybeAwaitable:
        settings = cls.settings(args)

        async def _runner() -> CommandResult:
            if args.input is not None:
                data = ReleaseData.from_dict(json.loads(args.input.read_text()))
            else:
                data = await run_pipeline(settings)
            rss = render_feed(data, settings)
            if args.output is None:
                print(rss)
            else:
                args.output.parent.mkdir(parents=True, exist_ok=True)
                args.output.write_text(rss)
                logger.info("Wrote feed with %d items to %s", len(data.infos), args.output)
            return 0

        return _runner()


__all__ = ["FeedCommand"]
