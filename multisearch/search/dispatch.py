"""
Query Dispatch - Open one browser tab per enabled engine.

The query is percent-escaped the way browsers escape URI components
(spaces become %20, not +) and substituted for every %s in each engine's
URL template:

  https://bing.com/search?q=%s  +  "hello world"
  →  https://bing.com/search?q=hello%20world

Openers are fire-and-forget. A tab that fails to open (missing xdg-open,
popup blocker, ...) is logged and never reported back per engine.
"""

import subprocess
import urllib.parse
import webbrowser
from typing import Iterable, Protocol

from loguru import logger

from multisearch.search.engine import PLACEHOLDER, Engine

# Characters left unescaped by encodeURIComponent besides alphanumerics
URI_COMPONENT_SAFE = "-_.!~*'()"


class BrowserOpener(Protocol):
    """Anything that can request a URL be opened in a new browsing context."""

    def open(self, url: str) -> None:
        ...


class XdgOpener:
    """Open URLs in the default browser via xdg-open."""

    name = "xdg-open"

    def open(self, url: str) -> None:
        try:
            subprocess.Popen(
                ["xdg-open", url],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except FileNotFoundError:
            logger.warning("xdg-open not found, cannot open URL")


class WebbrowserOpener:
    """Open URLs through Python's webbrowser module (portable fallback)."""

    name = "webbrowser"

    def open(self, url: str) -> None:
        if not webbrowser.open_new_tab(url):
            logger.warning(f"No browser accepted {url}")


OPENERS = {
    XdgOpener.name: XdgOpener,
    WebbrowserOpener.name: WebbrowserOpener,
}


def get_opener(name: str) -> BrowserOpener:
    """
    Build an opener by its settings name.

    Unknown names fall back to xdg-open with a warning.
    """
    opener_cls = OPENERS.get(name)
    if opener_cls is None:
        logger.warning(f"Unknown opener '{name}', using xdg-open")
        opener_cls = XdgOpener
    return opener_cls()


def quote_query(query: str) -> str:
    return urllib.parse.quote(query, safe=URI_COMPONENT_SAFE)


def build_query_url(template: str, query: str) -> str:
    """Substitute the escaped query for every placeholder in the template."""
    return template.replace(PLACEHOLDER, quote_query(query))


def open_all(engines: Iterable[Engine], query: str, opener: BrowserOpener) -> list[str]:
    """
    Request a new tab for each engine, in order.

    Args:
        engines: Engines to search (caller filters to enabled ones)
        query: Raw query text
        opener: Where URLs are sent

    Returns:
        URLs that were handed to the opener
    """
    urls = []
    for engine in engines:
        url = build_query_url(engine.url, query)
        try:
            opener.open(url)
        except Exception:
            logger.exception(f"Failed to open {engine.name}: {url}")
        urls.append(url)
    return urls
