"""Protocol name resolution from the ``protocols.json`` mapping file."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from birdstatus.errors import ResolverLoadError

logger = logging.getLogger(__name__)

DEFAULT_PROTOCOLS_FILE = Path("/etc/bird/protocols.json")


class ProtocolEntry(BaseModel):
    """One value of the mapping file. Keys other than name and tags are ignored."""
    model_config = ConfigDict(extra="ignore")

    name: str
    tags: list[str] | None = None


_MAPPING_ADAPTER = TypeAdapter(dict[str, ProtocolEntry])


@dataclass(frozen=True)
class DisplayEntry:
    name: str
    tags: tuple[str, ...] = ()


class ProtocolNames:
    """Maps BIRD protocol identifiers to display names and tags.

    Lookups are by exact identifier. Unknown identifiers resolve to
    themselves with no tags.
    """

    def __init__(self, entries: dict[str, DisplayEntry] | None = None) -> None:
        self._entries: dict[str, DisplayEntry] = dict(entries or {})

    @classmethod
    def empty(cls) -> ProtocolNames:
        return cls()

    @classmethod
    def from_mapping(cls, raw: dict[str, Any]) -> ProtocolNames:
        """Build from decoded ``protocols.json`` content.

        Raises:
            pydantic.ValidationError: *raw* does not match the file schema.
        """
        parsed = _MAPPING_ADAPTER.validate_python(raw)
        return cls({
            key: DisplayEntry(name=entry.name, tags=tuple(entry.tags or ()))
            for key, entry in parsed.items()
        })

    def resolve(self, name: str) -> DisplayEntry:
        entry = self._entries.get(name)
        if entry is None:
            return DisplayEntry(name=name)
        return entry

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def load_protocol_names(path: str | Path = DEFAULT_PROTOCOLS_FILE) -> ProtocolNames:
    """Load the protocol name mapping from *path*.

    Raises:
        ResolverLoadError: The file is missing, unreadable, or malformed.
    """
    path = Path(path)
    try:
        contents = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ResolverLoadError(f"Reading protocol names from {path}: {exc}") from exc

    try:
        raw = json.loads(contents)
    except json.JSONDecodeError as exc:
        raise ResolverLoadError(f"Unmarshalling protocol names from {path}: {exc}") from exc

    try:
        names = ProtocolNames.from_mapping(raw)
    except ValidationError as exc:
        raise ResolverLoadError(
            f"Invalid protocol names in {path}: {exc.error_count()} validation error(s)"
        ) from exc

    logger.debug("Loaded %d protocol names from %s", len(names), path)
    return names
