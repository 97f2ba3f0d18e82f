import pytest

from songwalker.library import (
    LibraryStatus,
    PresetManager,
    parse_preset_entry,
)
from songwalker.state import DEFAULT_LIBRARY_URL


ROOT_INDEX = {
    "format": "songwalker-index",
    "version": 1,
    "name": "Root",
    "entries": [
        {
            "type": "index",
            "name": "FluidR3 GM",
            "path": "FluidR3_GM/index.json",
            "description": "General MIDI set",
            "presetCount": 128,
        },
        {"type": "preset", "name": "Stray", "path": "stray.json"},
        {"type": "index", "name": "Flat", "path": "flat.json"},
        "not an object",
    ],
}


@pytest.fixture
def manager():
    return PresetManager()


def test_defaults(manager):
    assert manager.base_url == DEFAULT_LIBRARY_URL
    assert manager.libraries == []
    assert manager.category_filter is None
    assert manager.refresh_started is False


def test_parse_root_index_reads_index_entries(manager):
    manager.parse_root_index(ROOT_INDEX)
    assert [lib.name for lib in manager.libraries] == ["FluidR3 GM", "Flat"]
    first = manager.libraries[0]
    assert first.path == "FluidR3_GM/index.json"
    assert first.slug == "FluidR3_GM"
    assert first.description == "General MIDI set"
    assert first.preset_count == 128
    assert first.status is LibraryStatus.NOT_LOADED
    assert first.expanded is False


def test_parse_root_index_slug_without_slash(manager):
    manager.parse_root_index(ROOT_INDEX)
    flat = manager.libraries[1]
    assert flat.slug == flat.path == "flat.json"
    assert flat.description == ""
    assert flat.preset_count == 0


def test_parse_root_index_without_entries_keeps_libraries(manager):
    manager.parse_root_index(ROOT_INDEX)
    manager.parse_root_index({"name": "nothing"})
    manager.parse_root_index([1, 2])
    assert len(manager.libraries) == 2


def test_parse_root_index_replaces_previous_list(manager):
    manager.parse_root_index(ROOT_INDEX)
    manager.parse_root_index({"entries": [{"type": "index", "name": "Only", "path": "o/i.json"}]})
    assert [lib.name for lib in manager.libraries] == ["Only"]


def test_parse_root_index_preserves_loaded_status(manager):
    manager.parse_library_index("Flat", {"entries": [{"type": "preset", "name": "P", "path": "p.json"}]})
    manager.parse_root_index(ROOT_INDEX)
    statuses = {lib.name: lib.status for lib in manager.libraries}
    assert statuses["Flat"] is LibraryStatus.LOADED
    assert statuses["FluidR3 GM"] is LibraryStatus.NOT_LOADED


def test_parse_root_index_missing_name_and_bad_count(manager):
    manager.parse_root_index({"entries": [{"type": "index", "presetCount": -4}]})
    lib = manager.libraries[0]
    assert lib.name == "unknown"
    assert lib.path == ""
    assert lib.preset_count == 0


def test_parse_preset_entry_defaults():
    info = parse_preset_entry({"type": "preset"})
    assert info.name == "unknown"
    assert info.path == ""
    assert info.category == "sampler"
    assert info.tags == []
    assert info.gm_program is None
    assert info.zone_count == 0


def test_parse_preset_entry_full():
    info = parse_preset_entry(
        {
            "type": "preset",
            "name": "Grand Piano",
            "path": "piano/preset.json",
            "category": "keys",
            "tags": ["piano", 5, "acoustic", None],
            "gmProgram": 0,
            "zoneCount": 12,
        }
    )
    assert info.name == "Grand Piano"
    assert info.path == "piano/preset.json"
    assert info.category == "keys"
    assert info.tags == ["piano", "acoustic"]
    assert info.gm_program == 0
    assert info.zone_count == 12


def test_parse_preset_entry_ignores_non_integer_numbers():
    info = parse_preset_entry({"gmProgram": 1.5, "zoneCount": "7"})
    assert info.gm_program is None
    assert info.zone_count == 0


def test_parse_library_index_flat(manager):
    manager.parse_library_index(
        "Lib",
        {
            "entries": [
                {"type": "preset", "name": "A", "path": "a.json"},
                {"type": "preset", "name": "B", "path": "b.json"},
                {"type": "other", "name": "C"},
            ]
        },
    )
    assert [p.name for p in manager.library_presets["Lib"]] == ["A", "B"]
    assert "Lib" not in manager.sub_indexes
    assert manager.library_has_sub_indexes("Lib") is False


def test_parse_library_index_hierarchical(manager):
    manager.parse_library_index(
        "SNES",
        {
            "entries": [
                {"type": "index", "name": "Game One", "path": "one/index.json", "instrumentCount": 9},
                {"type": "index", "name": "Game Two", "path": "two/index.json", "presetCount": 4},
                {"type": "index", "name": "Game Three", "path": "three/index.json",
                 "instrumentCount": None, "presetCount": 4},
            ]
        },
    )
    subs = manager.sub_indexes["SNES"]
    assert [s.name for s in subs] == ["Game One", "Game Two", "Game Three"]
    assert [s.instrument_count for s in subs] == [9, 4, 0]
    assert all(not s.expanded for s in subs)
    assert "SNES" not in manager.library_presets
    assert manager.library_has_sub_indexes("SNES") is True


def test_parse_library_index_empty_stores_nothing(manager):
    manager.parse_library_index("Empty", {"entries": []})
    manager.parse_library_index("NoEntries", {})
    assert manager.library_presets == {}
    assert manager.sub_indexes == {}


def test_parse_sub_index_stores_presets(manager):
    manager.parse_sub_index(
        "SNES/Game One",
        {"entries": [
            {"type": "preset", "name": "Lead", "path": "lead.json"},
            {"type": "index", "name": "Nested", "path": "n.json"},
        ]},
    )
    assert [p.name for p in manager.sub_index_presets["SNES/Game One"]] == ["Lead"]


def test_parse_sub_index_stores_empty_list_but_not_missing_entries(manager):
    manager.parse_sub_index("a/b", {"entries": [{"type": "index"}]})
    manager.parse_sub_index("a/c", {"name": "x"})
    assert manager.sub_index_presets["a/b"] == []
    assert "a/c" not in manager.sub_index_presets


def _load_sample(manager):
    manager.parse_library_index(
        "Lib",
        {
            "entries": [
                {"type": "preset", "name": "Grand Piano", "path": "p.json", "category": "keys",
                 "tags": ["acoustic"]},
                {"type": "preset", "name": "Synth Bass", "path": "b.json", "category": "bass",
                 "tags": ["Electronic"]},
                {"type": "preset", "name": "Organ", "path": "o.json", "category": "keys",
                 "tags": ["electric"]},
            ]
        },
    )


def test_filter_without_query_returns_all(manager):
    _load_sample(manager)
    assert [p.name for p in manager.filtered_presets_for_library("Lib")] == [
        "Grand Piano", "Synth Bass", "Organ",
    ]


def test_filter_by_category(manager):
    _load_sample(manager)
    manager.category_filter = "keys"
    assert [p.name for p in manager.filtered_presets_for_library("Lib")] == ["Grand Piano", "Organ"]


def test_filter_by_name_is_case_insensitive(manager):
    _load_sample(manager)
    manager.search_query = "PIANO"
    assert [p.name for p in manager.filtered_presets_for_library("Lib")] == ["Grand Piano"]


def test_filter_matches_tags(manager):
    _load_sample(manager)
    manager.search_query = "electr"
    assert [p.name for p in manager.filtered_presets_for_library("Lib")] == ["Synth Bass", "Organ"]


def test_filter_combines_category_and_query(manager):
    _load_sample(manager)
    manager.search_query = "electr"
    manager.category_filter = "keys"
    assert [p.name for p in manager.filtered_presets_for_library("Lib")] == ["Organ"]


def test_filter_unknown_library_is_empty(manager):
    _load_sample(manager)
    assert manager.filtered_presets_for_library("Missing") == []
    assert manager.filtered_presets_for_sub_index("Missing/Sub") == []


def test_filter_sub_index(manager):
    manager.parse_sub_index(
        "SNES/Game",
        {"entries": [
            {"type": "preset", "name": "Lead", "path": "l.json", "category": "synth"},
            {"type": "preset", "name": "Drums", "path": "d.json", "category": "drums"},
        ]},
    )
    manager.category_filter = "drums"
    assert [p.name for p in manager.filtered_presets_for_sub_index("SNES/Game")] == ["Drums"]
    manager.category_filter = None
    manager.search_query = "lea"
    assert [p.name for p in manager.filtered_presets_for_sub_index("SNES/Game")] == ["Lead"]


def test_available_categories_sorted_unique(manager):
    _load_sample(manager)
    manager.parse_library_index(
        "Other", {"entries": [{"type": "preset", "name": "X", "path": "x.json"}]}
    )
    categories = manager.available_categories()
    assert categories == sorted(set(categories))
    assert categories == ["bass", "keys", "sampler"]


def test_available_categories_ignores_sub_index_presets(manager):
    manager.parse_sub_index(
        "a/b", {"entries": [{"type": "preset", "name": "Y", "category": "drums"}]}
    )
    assert manager.available_categories() == []