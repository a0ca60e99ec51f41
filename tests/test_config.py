from pathlib import Path

import pytest

from releasefeed.config import ConfigurationError, Settings, load_settings


def test_defaults_without_environment():
    settings = load_settings(environ={})
    assert settings.github_token is None
    assert settings.login == "trueberryless"
    assert settings.site_url == "https://example.com/"
    with pytest.raises(ConfigurationError, match="GITHUB_TOKEN missing"):
        settings.require_token()


def test_environment_overrides_file(tmp_path: Path):
    path = tmp_path / "settings.yaml"
    path.write_text(
        "login: from-file\n"
        "name: File Name\n"
        "logo_overrides:\n"
        "  octo/widgets: https://cdn.example.org/w.png\n"
    )
    settings = load_settings(path, environ={"PUBLIC_LOGIN": "from-env", "GITHUB_TOKEN": "t", "SITE_URL": ""})
    assert settings.login == "from-env"
    assert settings.name == "File Name"
    assert settings.require_token() == "t"
    assert settings.site_url == "https://example.com/"
    assert settings.logo_overrides == {"octo/widgets": "https://cdn.example.org/w.png"}


def test_empty_file(tmp_path: Path):
    path = tmp_path / "settings.yaml"
    path.write_text("")
    assert load_settings(path, environ={}) == Settings()


@pytest.mark.parametrize(
    "text",
    [
        "- just\n- a list\n",
        "unknown_key: 1\n",
        "logo_overrides: nope\n",
        "site_url: 123\n",
        "login:\n  - octo\n",
    ],
)
def test_invalid_files(tmp_path: Path, text):
    path = tmp_path / "settings.yaml"
    path.write_text(text)
    with pytest.raises(ConfigurationError):
        load_settings(path, environ={})


def test_site_url_gets_trailing_slash():
    assert Settings(site_url="https://releases.example.org").site_url == "https://releases.example.org/"
