import asyncio

import pytest

from releasefeed.config import ConfigurationError, Settings
from releasefeed.pipeline import build_response, run_pipeline
from tests.fakes import FakeSession, decode_releases, encode_releases, make_client, make_event

EVENTS_PATH = "/users/octo/events"
CONTENTS_PATH = "/repos/acme/db/contents/releases.json"

STORED = [
    {
        "title": "release v1.0.0",
        "sha": "old",
        "commit": "https://github.com/octo/widgets/commit/old",
        "created_at": 1000,
        "version": "1.0.0",
        "package": "",
    }
]


def make_settings(**overrides) -> Settings:
    values = dict(
        github_token="token",
        login="octo",
        storage_owner="acme",
        storage_repo="db",
        storage_path="releases.json",
    )
    values.update(overrides)
    return Settings(**values)


def events_handler(events):
    def handler(params, payload):
        return (200, events if params["page"] == 1 else [])

    return handler


def clock() -> int:
    return 99


def test_missing_token_fails_without_requests():
    session = FakeSession()
    with pytest.raises(ConfigurationError):
        asyncio.run(run_pipeline(make_settings(github_token=None), client=make_client(session)))
    status, body = asyncio.run(build_response(make_settings(github_token=""), client=make_client(session)))
    assert status == 500
    assert body == {"error": "GITHUB_TOKEN missing"}
    assert session.calls == []


def test_missing_database_starts_fresh_and_writes():
    events = [make_event([{"message": "release v2.0.0", "sha": "new"}])]
    session = FakeSession(
        {
            ("GET", EVENTS_PATH): events_handler(events),
            ("PUT", CONTENTS_PATH): (201, {}),
        }
    )

    data = asyncio.run(run_pipeline(make_settings(), client=make_client(session), clock=clock))

    assert [info.sha for info in data.infos] == ["new"]
    assert data.last_updated == data.infos[0].created_at
    assert data.last_fetched == 99
    (put,) = session.calls_to("PUT")
    assert "sha" not in put.payload
    assert [entry["sha"] for entry in decode_releases(put.payload["content"])] == ["new"]


def test_new_release_is_merged_and_persisted_with_token():
    events = [make_event([{"message": "release v2.0.0", "sha": "new"}])]
    session = FakeSession(
        {
            ("GET", CONTENTS_PATH): (200, {"content": encode_releases(STORED), "sha": "blob1"}),
            ("GET", EVENTS_PATH): events_handler(events),
            ("PUT", CONTENTS_PATH): (200, {}),
        }
    )

    status, body = asyncio.run(build_response(make_settings(), client=make_client(session), clock=clock))

    assert status == 200
    assert [info["sha"] for info in body["infos"]] == ["new", "old"]
    assert body["lastFetched"] == 99
    (put,) = session.calls_to("PUT")
    assert put.payload["sha"] == "blob1"


def test_unchanged_database_is_not_rewritten():
    events = [make_event([{"message": "release v1.0.0", "sha": "old"}])]
    session = FakeSession(
        {
            ("GET", CONTENTS_PATH): (200, {"content": encode_releases(STORED), "sha": "blob1"}),
            ("GET", EVENTS_PATH): events_handler(events),
        }
    )

    data = asyncio.run(run_pipeline(make_settings(), client=make_client(session), clock=clock))

    assert [info.sha for info in data.infos] == ["old"]
    assert data.last_updated == 1000
    assert session.calls_to("PUT") == []


def test_live_fetch_failure_serves_stored_releases():
    session = FakeSession(
        {
            ("GET", CONTENTS_PATH): (200, {"content": encode_releases(STORED), "sha": "blob1"}),
            ("GET", EVENTS_PATH): (403, {"message": "rate limited"}),
        }
    )

    status, body = asyncio.run(build_response(make_settings(), client=make_client(session), clock=clock))

    assert status == 200
    assert [info["sha"] for info in body["infos"]] == ["old"]
    assert session.calls_to("PUT") == []


def test_storage_read_error_fails_run_without_writing():
    session = FakeSession({("GET", CONTENTS_PATH): (500, {"message": "Server Error"})})

    status, body = asyncio.run(build_response(make_settings(), client=make_client(session)))

    assert status == 500
    assert body == {"error": "Server Error"}
    assert session.calls_to("PUT") == []


def test_storage_write_error_fails_run():
    events = [make_event([{"message": "release v2.0.0", "sha": "new"}])]
    session = FakeSession(
        {
            ("GET", EVENTS_PATH): events_handler(events),
            ("PUT", CONTENTS_PATH): (409, {"message": "sha does not match"}),
        }
    )

    status, body = asyncio.run(build_response(make_settings(), client=make_client(session)))

    assert status == 500
    assert body["error"] == "sha does not match"


def test_malformed_database_fails_run():
    session = FakeSession({("GET", CONTENTS_PATH): (200, {"content": "bm90IGpzb24=", "sha": "blob1"})})

    status, body = asyncio.run(build_response(make_settings(), client=make_client(session)))

    assert status == 500
    assert "malformed" in body["error"]
    assert session.calls_to("PUT") == []


def test_non_finite_timestamp_in_database_is_an_error_response():
    content = encode_releases([{"sha": "a", "version": "1.0.0", "created_at": float("nan")}])
    session = FakeSession({("GET", CONTENTS_PATH): (200, {"content": content, "sha": "blob1"})})

    status, body = asyncio.run(build_response(make_settings(), client=make_client(session)))

    assert status == 500
    assert "created_at" in body["error"]
    assert session.calls_to("PUT") == []
