import json

import pytest

from songwalker.state import PluginState, SlotConfig


def test_plugin_state_default():
    state = PluginState()
    assert len(state.library_urls) == 1
    assert "songwalker-library" in state.library_urls[0]
    assert state.slot_configs == []


def test_plugin_state_serialize_roundtrip():
    state = PluginState()
    state.add_slot_config(SlotConfig.new_preset("Piano", "lib/piano"))
    state.add_slot_config(SlotConfig.new_with_source("Custom", "loadPreset('test')"))

    restored = PluginState.from_bytes(state.to_bytes())

    assert restored.library_urls == state.library_urls
    assert len(restored.slot_configs) == 2
    assert restored.slot_configs[0].name == "Piano"
    assert restored.slot_configs[0].preset_id == "lib/piano"
    assert restored.slot_configs[1].name == "Custom"
    assert restored.slot_configs[1].source_code == "loadPreset('test')"


def test_plugin_state_from_invalid_bytes():
    with pytest.raises(ValueError):
        PluginState.from_bytes(b"not valid json")


def test_plugin_state_from_bytes_missing_field():
    with pytest.raises(ValueError):
        PluginState.from_bytes(b'{"library_urls": []}')


def test_slot_config_missing_preset_id_defaults_to_none():
    config = SlotConfig.new_preset("Bass", "lib/bass")
    data = config.to_dict()
    del data["preset_id"]
    payload = json.dumps({"library_urls": [], "slot_configs": [data]}).encode()
    restored = PluginState.from_bytes(payload)
    assert restored.slot_configs[0].preset_id is None
    assert restored.slot_configs[0].name == "Bass"


def test_compile_error_not_persisted():
    config = SlotConfig.new_with_source("Track", "C D")
    config.compile_error = "boom"
    state = PluginState(slot_configs=[config])
    raw = json.loads(state.to_bytes())
    assert "compile_error" not in raw["slot_configs"][0]
    restored = PluginState.from_bytes(state.to_bytes())
    assert restored.slot_configs[0].compile_error is None


def test_slot_config_default():
    config = SlotConfig()
    assert config.name == "New Slot"
    assert config.preset_id is None
    assert config.midi_channel == 0
    assert config.volume == 0.8
    assert config.pan == 0.0
    assert not config.muted
    assert not config.solo
    assert config.root_note == 60
    assert config.source_code == ""
    assert config.compile_error is None


def test_add_remove_slot_config():
    state = PluginState()
    idx = state.add_slot_config(SlotConfig())
    assert idx == 0
    assert len(state.slot_configs) == 1

    idx2 = state.add_slot_config(SlotConfig.new_preset("Bass", "lib/bass"))
    assert idx2 == 1
    assert len(state.slot_configs) == 2

    state.remove_slot_config(0)
    assert len(state.slot_configs) == 1
    assert state.slot_configs[0].name == "Bass"


def test_remove_slot_config_out_of_bounds():
    state = PluginState()
    state.add_slot_config(SlotConfig())
    state.remove_slot_config(5)
    assert len(state.slot_configs) == 1


def test_slot_config_new_preset():
    config = SlotConfig.new_preset("Grand Piano", "FluidR3_GM/acoustic_grand_piano")
    assert config.name == "Grand Piano"
    assert config.preset_id == "FluidR3_GM/acoustic_grand_piano"
    assert config.volume == 0.8


def test_slot_config_new_with_source():
    config = SlotConfig.new_with_source("Track 1", "C D E F")
    assert config.name == "Track 1"
    assert config.source_code == "C D E F"
    assert config.preset_id is None