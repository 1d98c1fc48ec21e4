"""
Engine Store - Own the user's search engine list and dispatch queries.

The store is the only writer of the engine collection. Every successful
mutation is written through to storage in full before it becomes visible
in memory, so persisted state is never ahead of or behind a validated change.

Failure modes:
  - Validation errors (empty name/url/query, nothing enabled, empty
    selection) raise ValidationError before anything changes.
  - Bad import payloads raise SnapshotError and leave the list untouched.
  - Corrupt persisted state on load is logged and replaced by the seed list.
  - Unknown ids on toggle/edit/remove are silently ignored.
"""

import json
import time
from dataclasses import replace
from pathlib import Path
from typing import Callable, Iterable

from loguru import logger

from multisearch.errors import SnapshotError, ValidationError
from multisearch.search.dispatch import BrowserOpener, XdgOpener, get_opener, open_all
from multisearch.search.engine import (
    DEFAULT_FAVICON_SERVICE,
    Engine,
    ensure_placeholder,
    favicon_url,
    validate_snapshot,
)
from multisearch.services.storage import Storage, create_storage
from multisearch.utils.helpers import load_seed_engines, load_settings

STORAGE_KEY = "search_engines"


class EngineStore:
    """
    Ordered collection of search engines with write-through persistence.

    Signals:
        changed: Emitted after every persisted mutation (and on reload)

    Methods:
        load(): Read persisted engines, falling back to the seed list
        add_engine / edit_engine / toggle_enabled: Change one engine
        remove_engine / remove_many: Delete engines
        export_snapshot / import_snapshot: JSON round-trip of the list
        dispatch_query(query): Open every enabled engine for a query
    """

    def __init__(
        self,
        storage: Storage,
        opener: BrowserOpener | None = None,
        favicon_service: str = DEFAULT_FAVICON_SERVICE,
        seed: list[dict] | None = None,
    ):
        self.storage = storage
        self.opener = opener or XdgOpener()
        self.favicon_service = favicon_service
        self._seed = seed

        self._engines: list[Engine] = []
        self._last_id = 0
        self._listeners: list[Callable[["EngineStore"], None]] = []

    # Signals

    def connect(self, signal: str, callback: Callable[["EngineStore"], None]) -> None:
        """Register a callback for the "changed" signal."""
        if signal != "changed":
            raise ValueError(f"Unknown signal: {signal}")
        self._listeners.append(callback)

    def emit(self, signal: str) -> None:
        if signal != "changed":
            raise ValueError(f"Unknown signal: {signal}")
        for callback in list(self._listeners):
            callback(self)

    # Read access

    @property
    def engines(self) -> list[Engine]:
        """Snapshot of the collection in display order."""
        return list(self._engines)

    def get(self, engine_id: str) -> Engine | None:
        for engine in self._engines:
            if engine.id == engine_id:
                return engine
        return None

    def enabled_engines(self) -> list[Engine]:
        return [engine for engine in self._engines if engine.enabled]

    # Persistence

    def load(self) -> list[Engine]:
        """
        Populate the collection from storage.

        A missing or unreadable value falls back to the seed list. Nothing
        is raised and nothing is written back.

        Returns:
            The loaded collection
        """
        try:
            raw = self.storage.read(STORAGE_KEY)
            saved = None if raw is None else validate_snapshot(json.loads(raw))
        except (UnicodeDecodeError, json.JSONDecodeError, SnapshotError) as e:
            logger.warning(f"Saved engines are corrupt ({e}), using seed list")
            self._engines = self._seed_engines()
        else:
            if saved is None:
                logger.debug("No saved engines, using seed list")
                self._engines = self._seed_engines()
            else:
                self._engines = saved

        logger.debug(f"Loaded {len(self._engines)} engines")
        return self.engines

    def reload(self) -> list[Engine]:
        """Re-read storage (another instance may have written) and notify."""
        engines = self.load()
        self.emit("changed")
        return engines

    def _seed_engines(self) -> list[Engine]:
        seed = self._seed if self._seed is not None else load_seed_engines()
        return validate_snapshot(seed)

    def _commit(self, engines: list[Engine]) -> None:
        """Persist the full collection, then make it current."""
        payload = json.dumps([engine.to_dict() for engine in engines])
        self.storage.write(STORAGE_KEY, payload)
        self._engines = engines
        self.emit("changed")

    # Mutations

    def toggle_enabled(self, engine_id: str) -> None:
        """Flip the enabled flag. Unknown ids are ignored."""
        if self.get(engine_id) is None:
            logger.debug(f"Toggle ignored, no engine {engine_id}")
            return

        self._commit([
            replace(engine, enabled=not engine.enabled)
            if engine.id == engine_id else engine
            for engine in self._engines
        ])

    def add_engine(self, name: str, url: str, icon: str = "") -> Engine:
        """
        Append a new enabled engine.

        Args:
            name: Display label
            url: Search URL, with %s for the query (?q=%s appended if absent)
            icon: Icon URL, derived from the domain if empty

        Returns:
            The stored Engine

        Raises:
            ValidationError: If name or url is blank
        """
        name, url, icon = _require_fields(name, url, icon)

        engine = Engine(
            id=self._new_id(),
            name=name,
            url=ensure_placeholder(url),
            icon=icon or favicon_url(url, self.favicon_service),
            enabled=True,
        )
        self._commit(self._engines + [engine])
        logger.debug(f"Added engine {engine.name} ({engine.id})")
        return engine

    def edit_engine(self, engine_id: str, name: str, url: str, icon: str = "") -> Engine | None:
        """
        Replace an engine's content fields, keeping its id and enabled flag.

        The icon is stored as given (an empty icon clears it).

        Returns:
            The updated Engine, or None if engine_id is unknown

        Raises:
            ValidationError: If name or url is blank
        """
        name, url, icon = _require_fields(name, url, icon)

        current = self.get(engine_id)
        if current is None:
            logger.debug(f"Edit ignored, no engine {engine_id}")
            return None

        updated = Engine(
            id=current.id,
            name=name,
            url=ensure_placeholder(url),
            icon=icon,
            enabled=current.enabled,
        )
        self._commit([
            updated if engine.id == engine_id else engine
            for engine in self._engines
        ])
        return updated

    def remove_engine(self, engine_id: str) -> bool:
        """
        Remove one engine.

        Returns:
            True if an engine was removed
        """
        if self.get(engine_id) is None:
            logger.debug(f"Remove ignored, no engine {engine_id}")
            return False

        self._commit([engine for engine in self._engines if engine.id != engine_id])
        return True

    def remove_many(self, ids: Iterable[str]) -> int:
        """
        Remove every engine whose id is in ids.

        Returns:
            Number of engines removed

        Raises:
            ValidationError: If ids is empty
        """
        doomed = set(ids)
        if not doomed:
            raise ValidationError("Select at least one site to delete")

        remaining = [engine for engine in self._engines if engine.id not in doomed]
        removed = len(self._engines) - len(remaining)
        if removed:
            self._commit(remaining)
        logger.debug(f"Removed {removed} engines")
        return removed

    def _new_id(self) -> str:
        """Millisecond timestamp, bumped past the last issued and existing ids."""
        candidate = max(time.time_ns() // 1_000_000, self._last_id + 1)
        existing = {engine.id for engine in self._engines}
        while str(candidate) in existing:
            candidate += 1
        self._last_id = candidate
        return str(candidate)

    # Import / export

    def export_snapshot(self) -> str:
        """Pretty-printed JSON array of the collection, as import expects."""
        return json.dumps([engine.to_dict() for engine in self._engines], indent=2)

    def export_to_file(self, path: Path) -> Path:
        path = Path(path)
        try:
            path.write_text(self.export_snapshot(), encoding="utf-8")
        except OSError as e:
            raise SnapshotError(f"Could not write {path}: {e}") from e
        logger.debug(f"Exported {len(self._engines)} engines to {path}")
        return path

    def import_snapshot(self, data) -> list[Engine]:
        """
        Replace the whole collection with an imported snapshot.

        Args:
            data: JSON text/bytes, or an already-parsed list of records

        Returns:
            The new collection

        Raises:
            SnapshotError: If data is not a valid engine list (nothing changes)
        """
        if isinstance(data, (str, bytes, bytearray)):
            try:
                data = json.loads(data)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise SnapshotError(f"Invalid JSON file: {e}") from e

        engines = validate_snapshot(data)
        self._commit(engines)
        logger.debug(f"Imported {len(engines)} engines")
        return self.engines

    def import_from_file(self, path: Path) -> list[Engine]:
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise SnapshotError(f"Could not read {path}: {e}") from e
        return self.import_snapshot(data)

    # Dispatch

    def dispatch_query(self, query: str) -> list[str]:
        """
        Open the query in every enabled engine, in collection order.

        Returns:
            URLs requested from the opener

        Raises:
            ValidationError: If the query is blank or no engine is enabled
        """
        if not query or not query.strip():
            raise ValidationError("Type something to search for")

        active = self.enabled_engines()
        if not active:
            raise ValidationError("Please select at least one site to search!")

        urls = open_all(active, query, self.opener)
        logger.debug(f"Dispatched query to {len(urls)} engines")
        return urls


def _require_fields(name: str, url: str, icon: str) -> tuple[str, str, str]:
    """Trim form fields and reject a blank name or url."""
    name, url, icon = (name or "").strip(), (url or "").strip(), (icon or "").strip()
    if not name or not url:
        raise ValidationError("Name and URL are required")
    return name, url, icon


def create_engine_store(settings: dict) -> EngineStore:
    """Build and load a store wired to the backends named in settings."""
    store = EngineStore(
        storage=create_storage(settings),
        opener=get_opener(settings["dispatch"]["opener"]),
        favicon_service=settings["icons"]["favicon_service"],
    )
    store.load()
    return store


# Singleton accessor
_engine_store_instance = None


def get_engine_store(settings: dict | None = None) -> EngineStore:
    """
    Get the singleton EngineStore instance, loading it on first use.

    Args:
        settings: Merged settings; read from disk when omitted

    Returns:
        EngineStore: The global instance
    """
    global _engine_store_instance
    if _engine_store_instance is None:
        _engine_store_instance = create_engine_store(settings or load_settings())
    return _engine_store_instance
