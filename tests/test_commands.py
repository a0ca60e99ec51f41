import argparse
import importlib
import json

import feedparser

from releasefeed.__main__ import build_parser, main
from releasefeed.commands import Command, discover_commands


def test_discover_commands_finds_all_subclasses():
    module = importlib.import_module("tests.sample_commands")
    commands = discover_commands(module)
    names = [command.name for command in commands]
    assert names == sorted(names)
    assert {"alpha", "beta"}.issubset(set(names))
    assert all(issubclass(command, Command) for command in commands)


def test_command_attach_registers_parser():
    module = importlib.import_module("tests.sample_commands")
    commands = discover_commands(module)
    parser = argparse.ArgumentParser(prog="test")
    subparsers = parser.add_subparsers(dest="command", required=True)
    for command in commands:
        command.attach(subparsers)

    help_text = parser.format_help()
    assert "alpha" in help_text
    assert "beta" in help_text
    assert parser.parse_args(["alpha", "--config", "x.yaml"]).config.name == "x.yaml"
    assert not hasattr(parser.parse_args(["beta"]), "config")


def test_cli_registers_builtin_commands():
    help_text = build_parser().format_help()
    for name in ("run", "feed", "serve"):
        assert name in help_text


def test_feed_command_renders_saved_releases(tmp_path, monkeypatch):
    monkeypatch.setenv("PUBLIC_NAME", "Octo")
    source = tmp_path / "releases.json"
    source.write_text(
        json.dumps(
            {
                "infos": [
                    {
                        "id": "1",
                        "type": "PushEvent",
                        "repo": "octo/widgets",
                        "isOrg": False,
                        "title": "release v1.0.0",
                        "sha": "abc",
                        "commit": "https://github.com/octo/widgets/commit/abc",
                        "created_at": 1714564800000,
                        "version": "1.0.0",
                        "package": "",
                    }
                ],
                "lastUpdated": 1714564800000,
                "lastFetched": 1714564900000,
            }
        )
    )
    target = tmp_path / "out" / "feed.xml"

    assert main(["feed", "--input", str(source), "--output", str(target)]) == 0

    parsed = feedparser.parse(target.read_text())
    assert parsed.feed.title == "Octo is Releasing..."
    assert [entry.id for entry in parsed.entries] == ["abc"]


def test_run_command_without_token_fails(tmp_path, monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    target = tmp_path / "releases.json"

    assert main(["run", "--output", str(target)]) == 1
    assert not target.exists()
