# scraper/sources/page_fetch.py

from pathlib import Path
from typing import Optional

import requests

from scraper.errors.exceptions import NetworkError
from scraper.sources.scraper_config import SCRAPER_SETTINGS

HEADERS = {
    "User-Agent": SCRAPER_SETTINGS["USER_AGENT"],
    "Accept-Language": "fa-IR,fa;q=0.9,en;q=0.8",
}


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def fetch_html(url: str, timeout: Optional[float] = None) -> str:
    """
    Statisches HTML per requests holen (ohne JavaScript).
    Für Seiten, die die Pakete erst per JS nachladen -> live_page.fetch_rendered_html.
    """
    try:
        resp = requests.get(
            url,
            headers=HEADERS,
            timeout=timeout or SCRAPER_SETTINGS["HTTP_TIMEOUT"],
        )
        resp.raise_for_status()
    except requests.RequestException as e:
        raise NetworkError(f"Could not fetch {url}: {e}", url=url) from e

    # iranische Seiten liefern oft keinen charset-Header
    if not resp.encoding or resp.encoding.lower() == "iso-8859-1":
        resp.encoding = resp.apparent_encoding or "utf-8"
    return resp.text


def load_html(source: str) -> str:
    """URL oder lokaler Dateipfad."""
    if is_url(source):
        return fetch_html(source)

    path = Path(source)
    if not path.exists():
        raise NetworkError(f"Input file not found: {path}", url=source)
    return path.read_text(encoding="utf-8")
