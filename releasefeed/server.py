"""HTTP endpoints serving the release JSON and RSS feed."""
from __future__ import annotations

import asyncio
import os
from datetime import datetime, timezone
from typing import Optional

from flask import Flask, Response, jsonify
from flask_cors import CORS

from .config import Settings, load_settings
from .feed import render_feed
from .models import ReleaseData
from .pipeline import build_response

VERSION = os.getenv("VERSION", "dev")


def create_app(settings: Optional[Settings] = None) -> Flask:
    """Build the Flask application.

    Every request to ``/api/releases.json`` or ``/feed.xml`` runs a full
    refresh; caching is left to whatever sits in front of the app.
    """

    settings = settings or load_settings()
    app = Flask(__name__)
    CORS(app)

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify(
            {
                "status": "UP",
                "version": VERSION,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        )

    @app.route("/api/releases.json", methods=["GET"])
    def releases():
        status, body = asyncio.run(build_response(settings))
        return jsonify(body), status

    @app.route("/feed.xml", methods=["GET"])
    def feed():
        status, body = asyncio.run(build_response(settings))
        if status == 200:
            data = ReleaseData.from_dict(body)
        else:
            # The feed stays valid even when the refresh fails.
            data = ReleaseData()
        return Response(render_feed(data, settings), mimetype="application/xml")

    return app
