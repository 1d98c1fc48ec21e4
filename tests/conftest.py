"""
Shared test fixtures for the Multi Search test suite.

Provides in-memory and on-disk storage, a recording browser opener, and
settings/snapshot files that use real file I/O (no mocking of the filesystem).
"""

import json

import pytest
import toml

from multisearch.services.engine_store import STORAGE_KEY, EngineStore
from multisearch.services.storage import MemoryStorage

SEED = [
    {"id": "1", "name": "Google", "url": "https://www.google.com/search?q=%s",
     "icon": "https://icons.test/google.png", "enabled": True},
    {"id": "2", "name": "Bing", "url": "https://bing.com/search?q=%s",
     "icon": "https://icons.test/bing.png", "enabled": True},
    {"id": "3", "name": "Wikipedia", "url": "https://en.wikipedia.org/w/index.php?search=%s",
     "icon": "https://icons.test/wiki.png", "enabled": False},
]


class RecordingOpener:
    """Browser opener that remembers every URL instead of opening it."""

    def __init__(self):
        self.opened = []

    def open(self, url: str) -> None:
        self.opened.append(url)


@pytest.fixture
def seed():
    return [dict(record) for record in SEED]


@pytest.fixture
def opener():
    return RecordingOpener()


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def store(memory_storage, opener, seed):
    """A loaded store over empty memory storage (starts from SEED)."""
    store = EngineStore(storage=memory_storage, opener=opener, seed=seed)
    store.load()
    return store


@pytest.fixture
def saved(memory_storage):
    """Decode whatever the store last persisted."""
    def _saved():
        raw = memory_storage.read(STORAGE_KEY)
        return None if raw is None else json.loads(raw)
    return _saved


@pytest.fixture
def tmp_snapshot(tmp_path):
    """Create a real export file with two engines."""
    path = tmp_path / "search_engines.json"
    data = [
        {"id": "a", "name": "DuckDuckGo", "url": "https://duckduckgo.com/?q=%s",
         "icon": "", "enabled": True},
        {"id": "b", "name": "GitHub", "url": "https://github.com/search?q=%s",
         "icon": "https://icons.test/gh.png", "enabled": False},
    ]
    path.write_text(json.dumps(data, indent=2))
    return path


@pytest.fixture
def tmp_settings(tmp_path):
    """Create a real settings TOML file pointing storage at tmp_path."""
    settings_path = tmp_path / "settings.toml"
    data = {
        "storage": {"backend": "json", "path": str(tmp_path / "data")},
        "dispatch": {"opener": "xdg-open"},
        "export": {"filename": str(tmp_path / "search_engines.json")},
    }
    settings_path.write_text(toml.dumps(data))
    return settings_path
