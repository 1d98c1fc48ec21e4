"""
Search package - Engine records and query dispatch.

Engines carry a URL template with a %s placeholder; dispatch substitutes
the escaped query and opens one browser tab per enabled engine.
"""

from .dispatch import XdgOpener, WebbrowserOpener, build_query_url
from .engine import Engine, validate_snapshot

__all__ = [
    "Engine",
    "validate_snapshot",
    "build_query_url",
    "XdgOpener",
    "WebbrowserOpener",
]
