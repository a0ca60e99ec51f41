from __future__ import annotations

import argparse

from ..server import create_app
from . import Command, MaybeAwaitable


class ServeCommand(Command):
    name = "serve"
    help = "Serve releases.json and feed.xml over HTTP"

    @classmethod
    def configure_parser(cls, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--host", default="0.0.0.0", help="Interface to bind.")
        parser.add_argument("--port", type=int, default=8080, help="Port to listen on.")

    @classmethod
    def handle(cls, args: argparse.Namespace) -> MaybeAwaitable:
        app = create_app(cls.settings(args))
        app.run(host=args.host, port=args.port, debug=False)
        return 0


__all__ = ["ServeCommand"]
