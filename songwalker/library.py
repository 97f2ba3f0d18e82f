"""Registry of remote preset libraries and the presets they index.

Library indexes are JSON documents of the form::

    {"format": "songwalker-index", "version": 1, "name": "...",
     "entries": [{"type": "index", "name": "...", "path": "...", "presetCount": 3}, ...]}

Entries of type ``"index"`` point to further indexes; entries of type
``"preset"`` describe presets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from songwalker.state import DEFAULT_LIBRARY_URL

_U8_MASK = 0xFF
_U32_MASK = 0xFFFFFFFF


def _as_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _as_u64(value: Any) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    return None


def _get(obj: Any, key: str) -> Any:
    return obj.get(key) if isinstance(obj, dict) else None


def _str_field(obj: Any, key: str, default: str) -> str:
    value = _as_str(_get(obj, key))
    return default if value is None else value


def _entries(index: Any) -> list[Any] | None:
    entries = _get(index, "entries")
    return entries if isinstance(entries, list) else None


class LibraryStatus(Enum):
    """Loading state of a library."""

    NOT_LOADED = "not_loaded"
    LOADING = "loading"
    LOADED = "loaded"
    OFFLINE = "offline"
    ERROR = "error"


@dataclass
class LibraryInfo:
    """A library listed in the root index."""

    name: str
    path: str
    slug: str
    description: str = ""
    preset_count: int = 0
    status: LibraryStatus = LibraryStatus.NOT_LOADED
    error_message: str | None = None
    expanded: bool = False


@dataclass
class PresetInfo:
    """A preset listed in a library index."""

    name: str
    path: str
    category: str = "sampler"
    tags: list[str] = field(default_factory=list)
    gm_program: int | None = None
    zone_count: int = 0


@dataclass
class SubIndexInfo:
    """A nested index within a library, such as one game in a collection."""

    name: str
    path: str
    instrument_count: int = 0
    expanded: bool = False


def parse_preset_entry(entry: Any) -> PresetInfo:
    """Build a PresetInfo from an index entry, filling defaults for missing fields."""
    raw_tags = _get(entry, "tags")
    tags = [t for t in raw_tags if isinstance(t, str)] if isinstance(raw_tags, list) else []
    gm = _as_u64(_get(entry, "gmProgram"))
    zone_count = _as_u64(_get(entry, "zoneCount"))
    return PresetInfo(
        name=_str_field(entry, "name", "unknown"),
        path=_str_field(entry, "path", ""),
        category=_str_field(entry, "category", "sampler"),
        tags=tags,
        gm_program=None if gm is None else gm & _U8_MASK,
        zone_count=0 if zone_count is None else zone_count & _U32_MASK,
    )


def _entry_type(entry: Any) -> str:
    return _str_field(entry, "type", "")


@dataclass
class PresetManager:
    """In-memory registry of libraries, their presets and sub-indexes."""

    libraries: list[LibraryInfo] = field(default_factory=list)
    library_presets: dict[str, list[PresetInfo]] = field(default_factory=dict)
    sub_indexes: dict[str, list[SubIndexInfo]] = field(default_factory=dict)
    sub_index_presets: dict[str, list[PresetInfo]] = field(default_factory=dict)
    base_url: str = DEFAULT_LIBRARY_URL
    search_query: str = ""
    category_filter: str | None = None
    refresh_started: bool = False
    status_message: str = ""

    def parse_root_index(self, root: Any) -> None:
        """Replace the library list with the ``"index"`` entries of a root index.

        A document without an ``entries`` array leaves the list unchanged.
        Libraries whose presets are already known keep the loaded status.
        """
        entries = _entries(root)
        if entries is None:
            return

        self.libraries.clear()
        for entry in entries:
            if _entry_type(entry) != "index":
                continue
            name = _str_field(entry, "name", "unknown")
            path = _str_field(entry, "path", "")
            count = _as_u64(_get(entry, "presetCount"))
            status = (
                LibraryStatus.LOADED if name in self.library_presets else LibraryStatus.NOT_LOADED
            )
            self.libraries.append(
                LibraryInfo(
                    name=name,
                    path=path,
                    slug=path.split("/", 1)[0],
                    description=_str_field(entry, "description", ""),
                    preset_count=0 if count is None else count,
                    status=status,
                )
            )

    def parse_library_index(self, library_name: str, index: Any) -> None:
        """Record the presets and sub-indexes listed in a library's index.

        Only non-empty lists are stored.
        """
        entries = _entries(index)
        if entries is None:
            return

        presets: list[PresetInfo] = []
        subs: list[SubIndexInfo] = []
        for entry in entries:
            kind = _entry_type(entry)
            if kind == "preset":
                presets.append(parse_preset_entry(entry))
            elif kind == "index":
                if isinstance(entry, dict) and "instrumentCount" in entry:
                    raw_count = entry["instrumentCount"]
                else:
                    raw_count = _get(entry, "presetCount")
                count = _as_u64(raw_count)
                subs.append(
                    SubIndexInfo(
                        name=_str_field(entry, "name", "unknown"),
                        path=_str_field(entry, "path", ""),
                        instrument_count=0 if count is None else count,
                    )
                )

        if presets:
            self.library_presets[library_name] = presets
        if subs:
            self.sub_indexes[library_name] = subs

    def parse_sub_index(self, key: str, index: Any) -> None:
        """Record the presets of a sub-index under key ("library/subindex")."""
        entries = _entries(index)
        if entries is None:
            return
        self.sub_index_presets[key] = [
            parse_preset_entry(entry) for entry in entries if _entry_type(entry) == "preset"
        ]

    def library_has_sub_indexes(self, library_name: str) -> bool:
        """Whether the library is hierarchical rather than a flat list of presets."""
        return bool(self.sub_indexes.get(library_name))

    def _matches(self, preset: PresetInfo, query: str) -> bool:
        if self.category_filter is not None and preset.category != self.category_filter:
            return False
        if query:
            if query not in preset.name.lower() and not any(
                query in tag.lower() for tag in preset.tags
            ):
                return False
        return True

    def _filter(self, presets: list[PresetInfo] | None) -> list[PresetInfo]:
        if presets is None:
            return []
        query = self.search_query.lower()
        return [p for p in presets if self._matches(p, query)]

    def filtered_presets_for_library(self, library_name: str) -> list[PresetInfo]:
        """Presets of a library that pass the category filter and search query."""
        return self._filter(self.library_presets.get(library_name))

    def filtered_presets_for_sub_index(self, key: str) -> list[PresetInfo]:
        """Presets of a sub-index that pass the category filter and search query."""
        return self._filter(self.sub_index_presets.get(key))

    def available_categories(self) -> list[str]:
        """Sorted unique categories across all loaded library presets."""
        return sorted(
            {p.category for presets in self.library_presets.values() for p in presets}
        )