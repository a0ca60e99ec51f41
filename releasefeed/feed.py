"""RSS rendering of the release payload."""
from __future__ import annotations

import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Mapping, Optional

from .config import Settings
from .models import ReleaseData, ReleaseInfo

ATOM_NS = "http://www.w3.org/2005/Atom"

ET.register_namespace("atom", ATOM_NS)


def logo_url(repo: str, overrides: Mapping[str, str]) -> str:
    if repo in overrides:
        return overrides[repo]
    return f"https://github.com/{repo.split('/')[0]}.png"


def _pub_date(created_at: int) -> str:
    moment = datetime.fromtimestamp(created_at / 1000, tz=timezone.utc)
    return format_datetime(moment, usegmt=True)


def _item(channel: ET.Element, info: ReleaseInfo, overrides: Mapping[str, str]) -> None:
    repo = info.repo_name
    item = ET.SubElement(channel, "item")
    guid = ET.SubElement(item, "guid", isPermaLink="false")
    guid.text = info.identity
    ET.SubElement(item, "title").text = f"{repo} v{info.version} released"
    ET.SubElement(item, "link").text = f"https://github.com/{repo}/releases/tag/v{info.version}"
    ET.SubElement(item, "pubDate").text = _pub_date(info.created_at)
    # ElementTree escapes the markup, as RSS readers expect.
    ET.SubElement(item, "description").text = f'<a href="{info.commit}">{info.title}</a>'
    ET.SubElement(
        item,
        "enclosure",
        url=logo_url(repo, overrides),
        type="image/png",
        length="0",
    )


def render_feed(data: ReleaseData, settings: Settings, now: Optional[datetime] = None) -> str:
    """Render ``data`` as an RSS 2.0 document."""

    now = now or datetime.now(timezone.utc)
    site = settings.site_url
    rss = ET.Element("rss", version="2.0")
    channel = ET.SubElement(rss, "channel")
    ET.SubElement(channel, "title").text = f"{settings.name} is Releasing..."
    ET.SubElement(channel, "description").text = f"{settings.name}'s recent releases"
    ET.SubElement(channel, "link").text = site
    ET.SubElement(
        channel,
        f"{{{ATOM_NS}}}link",
        href=f"{site}feed.xml",
        rel="self",
        type="application/rss+xml",
    )
    ET.SubElement(channel, "language").text = "en"
    image = ET.SubElement(channel, "image")
    ET.SubElement(image, "url").text = f"{site}favicon.png"
    ET.SubElement(image, "title").text = settings.name
    ET.SubElement(image, "link").text = site
    ET.SubElement(channel, "copyright").text = f"CC BY-NC-SA 4.0 {now.year} © {settings.name}"
    if data.last_updated:
        ET.SubElement(channel, "lastBuildDate").text = _pub_date(data.last_updated)

    for info in data.infos:
        _item(channel, info, settings.logo_overrides)

    body = ET.tostring(rss, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}'
