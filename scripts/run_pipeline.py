"""Entry point used by GitHub Actions to refresh and publish the release feed."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from releasefeed.config import load_settings
from releasefeed.feed import render_feed
from releasefeed.models import ReleaseData
from releasefeed.pipeline import build_response


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Refresh the release database and publish the feed")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional YAML settings file.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("public"),
        help="Directory that will receive releases.json and feed.xml.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level.",
    )
    return parser.parse_args()


async def publish(args: argparse.Namespace) -> int:
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))

    settings = load_settings(args.config)
    status, body = await build_response(settings)
    if status != 200:
        logging.error("Refresh failed: %s", body.get("error"))
        return 1

    args.output.mkdir(parents=True, exist_ok=True)
    (args.output / "releases.json").write_text(json.dumps(body, indent=2))
    feed_path = args.output / "feed.xml"
    feed_path.write_text(render_feed(ReleaseData.from_dict(body), settings))
    logging.info("Published %d releases to %s", len(body["infos"]), args.output)
    return 0


def main() -> None:
    args = parse_args()
    sys.exit(asyncio.run(publish(args)))


if __name__ == "__main__":  # pragma: no cover
    main()
