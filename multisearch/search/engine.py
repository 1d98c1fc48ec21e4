"""
Engine model - One configured search destination.

An engine's URL template carries the placeholder token (%s) that is replaced
by the escaped query at dispatch time. Templates without the token get the
default query parameter appended:

  https://example.com/search  →  https://example.com/search?q=%s

Snapshots (persisted state, export files, import payloads) are JSON arrays of
engine records:

  [{"id": "1", "name": "Google", "url": "https://...?q=%s",
    "icon": "https://...", "enabled": true}, ...]
"""

from dataclasses import asdict, dataclass
from urllib.parse import urlparse

from multisearch.errors import SnapshotError

PLACEHOLDER = "%s"
DEFAULT_QUERY_SUFFIX = "?q=%s"
DEFAULT_FAVICON_SERVICE = "https://www.google.com/s2/favicons?domain={domain}&sz=64"


@dataclass(frozen=True)
class Engine:
    """A single search engine record."""
    id: str
    name: str
    url: str
    icon: str = ""
    enabled: bool = True

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Engine":
        return cls(
            id=data["id"],
            name=data["name"],
            url=ensure_placeholder(data["url"]),
            icon=data.get("icon", ""),
            enabled=data.get("enabled", True),
        )


def ensure_placeholder(url: str) -> str:
    """Append the default query parameter if the template has no %s."""
    if PLACEHOLDER in url:
        return url
    return f"{url}{DEFAULT_QUERY_SUFFIX}"


def domain_of(url: str) -> str:
    """
    Extract the host name from a URL.

    Bare host names ("example.com/search") are accepted too. Falls back to
    the raw string when nothing parseable is found.
    """
    try:
        parsed = urlparse(url if "//" in url else f"//{url}")
        return parsed.hostname or url
    except ValueError:
        return url


def favicon_url(url: str, service: str = DEFAULT_FAVICON_SERVICE) -> str:
    """Derive a favicon URL for the engine's domain."""
    return service.format(domain=domain_of(url))


def validate_snapshot(data) -> list[Engine]:
    """
    Check that parsed JSON is an ordered sequence of engine records.

    Args:
        data: Parsed JSON value

    Returns:
        List of Engine objects in payload order

    Raises:
        SnapshotError: If the payload has the wrong shape
    """
    if not isinstance(data, list):
        raise SnapshotError(
            f"Expected a list of engines, got {type(data).__name__}"
        )

    engines = []
    seen_ids = set()
    for index, record in enumerate(data):
        if not isinstance(record, dict):
            raise SnapshotError(f"Engine #{index} is not an object")

        for field in ("id", "name", "url"):
            value = record.get(field)
            if not isinstance(value, str) or not value.strip():
                raise SnapshotError(
                    f"Engine #{index} has a missing or invalid '{field}'"
                )

        if not isinstance(record.get("icon", ""), str):
            raise SnapshotError(f"Engine #{index} has a non-string 'icon'")
        if not isinstance(record.get("enabled", True), bool):
            raise SnapshotError(f"Engine #{index} has a non-boolean 'enabled'")

        if record["id"] in seen_ids:
            raise SnapshotError(f"Duplicate engine id '{record['id']}'")
        seen_ids.add(record["id"])

        engines.append(Engine.from_dict(record))

    return engines
