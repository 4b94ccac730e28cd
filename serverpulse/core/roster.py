"""
Roster Store: the static catalog of known servers, grouped by category.

The roster is loaded once at process start and never mutated afterwards.
Every consumer receives a deep copy, so a snapshot can be modified freely
without touching the catalog it came from.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from importlib import resources
from pathlib import Path
from typing import Any

from loguru import logger

from ..datastructures.type_aliases import CategoryName, RosterDocument
from ..serialization import SnapshotSerializer
from .classifier import ensure_placeholders

DEFAULT_ROSTER_RESOURCE = "default_roster.json"


class RosterError(ValueError):
    """Raised when a roster document cannot be used."""

    pass


def is_probeable(descriptor: Mapping[str, Any]) -> bool:
    link = descriptor.get("link")
    return isinstance(link, str) and bool(link.strip())


def validate_roster(document: Any) -> RosterDocument:
    """Check the roster shape and fill missing display placeholders.

    Category values that are not lists are opaque and kept as-is.
    """
    if not isinstance(document, dict):
        raise RosterError("Roster must be a JSON object of categories")

    for category, entries in document.items():
        if not isinstance(entries, list):
            continue
        for position, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise RosterError(
                    f"Entry {position} in category '{category}' is not an object"
                )
            for key in ("id", "name"):
                value = entry.get(key)
                if not isinstance(value, str) or not value.strip():
                    raise RosterError(
                        f"Entry {position} in category '{category}' has no '{key}'"
                    )
            ensure_placeholders(entry)
    return document


class RosterStore:
    """Immutable, in-memory roster."""

    __slots__ = ("_document", "_source")

    def __init__(self, document: RosterDocument, source: str = "<memory>") -> None:
        self._document = validate_roster(copy.deepcopy(document))
        self._source = source

    @classmethod
    def from_file(cls, path: str | Path) -> RosterStore:
        roster_path = Path(path)
        try:
            raw = roster_path.read_bytes()
        except OSError as e:
            raise RosterError(f"Cannot read roster {roster_path}: {e}") from e
        try:
            document = SnapshotSerializer().deserialize(raw)
        except ValueError as e:
            raise RosterError(f"Roster {roster_path} is not valid JSON: {e}") from e

        store = cls(document, source=str(roster_path))
        logger.info(
            "Loaded roster {} ({} servers, {} probeable)",
            roster_path,
            store.descriptor_count,
            store.probeable_count,
        )
        return store

    @classmethod
    def default(cls) -> RosterStore:
        raw = (
            resources.files("serverpulse.data")
            .joinpath(DEFAULT_ROSTER_RESOURCE)
            .read_bytes()
        )
        return cls(SnapshotSerializer().deserialize(raw), source="<bundled>")

    @classmethod
    def from_settings(cls, roster_path: str | None) -> RosterStore:
        if roster_path:
            return cls.from_file(roster_path)
        return cls.default()

    @property
    def source(self) -> str:
        return self._source

    @property
    def categories(self) -> tuple[CategoryName, ...]:
        return tuple(self._document)

    def _descriptors(self) -> list[dict[str, Any]]:
        return [
            entry
            for entries in self._document.values()
            if isinstance(entries, list)
            for entry in entries
        ]

    @property
    def descriptor_count(self) -> int:
        return len(self._descriptors())

    @property
    def probeable_count(self) -> int:
        return sum(1 for entry in self._descriptors() if is_probeable(entry))

    def snapshot_source(self) -> RosterDocument:
        """Deep copy of the roster, safe for the caller to mutate."""
        return copy.deepcopy(self._document)
