# songwalker

songwalker is a multi-timbral instrument rack written in pure Python. It uses only the standard library.

## Modules

- **`songwalker.slot`**: `Slot` is one instrument.
  - A slot without source code plays its loaded preset. When no preset is loaded, or no zone matches the note, it plays a sine wave.
  - With `has_source` set, a `NoteOn` starts a pattern-runner instance instead.
  - `render()` adds the slot's audio into the left and right lists you pass in.
  - `midi_channel` is clamped to the range 0–16.
- **`songwalker.rack`**: `SlotManager` holds up to `MAX_SLOTS` (16) slots.
  - `allocate_all()` fills an empty rack.
  - `add_slot()` returns the new slot's index, or `None` when the rack is full.
  - `remove_slot()` renumbers the remaining slots and never removes the last one.
  - `any_solo()` reports whether any slot is soloed.
- **`songwalker.voices`**:
  - `VoicePool` allocates voices. When the pool is full it steals a releasing voice, or the first voice if none is releasing.
  - `advance_envelope()` steps an ADSR envelope described by `EnvelopeParams`.
  - `midi_to_freq()` converts a MIDI note to a frequency, with A4 = 440 Hz.
- **`songwalker.instrument`**:
  - `SampleZone`, `LoadedZone` and `PresetInstance` describe decoded sampler presets. `find_zone_indexed()` looks up the zone for a note and velocity.
  - `PresetSlotState` holds a slot's active preset and its controller values. Mod wheel is CC1 and expression is CC11.
  - `sample_playback_rate()` gives the pitch-shift ratio.
- **`songwalker.runner`**:
  - `RunnerSlotState` plays an `EventList` of `ScheduledNote`s. The pattern is transposed by the triggering note minus `root_note`, and it loops when it ends. At most 16 instances run at once.
  - `parse_pitch()` reads names such as `"C4"`, `"D#5"` and `"Eb3"`.
- **`songwalker.events`**:
  - Event classes: `NoteOn`, `NoteOff`, `PolyPressure`, `MidiCC`, `MidiPitchBend` and `MidiChannelPressure`.
  - `parse_midi_bytes()` decodes one raw MIDI message. It returns `None` for a message it does not handle. A Note On with velocity zero becomes a `NoteOff`.
- **`songwalker.mixbuffer`**: `MixBuffer` is a fixed-size stereo buffer. It provides per-frame `get`/`set`/`add`, `mix_from`, `apply_gain` and constant-power `apply_pan`.
- **`songwalker.dsp`**: `mix_add()` and `apply_gain()` work in place on sample lists.
- **`songwalker.transport`**: `TransportState` holds the tempo, time signature and position. `update()` changes them, and the object converts between beats and samples.
- **`songwalker.state`**:
  - `PluginState` and `SlotConfig` hold the saved configuration.
  - `PluginState.to_bytes()` writes compact JSON.
  - `PluginState.from_bytes()` raises `ValueError` on invalid input.
- **`songwalker.library`**:
  - `PresetManager` parses the root index, library indexes and sub-indexes into `LibraryInfo`, `PresetInfo` and `SubIndexInfo` records.
  - It filters presets by `search_query`, which matches names or tags case-insensitively, and by `category_filter`.
  - `available_categories()` returns the sorted categories.

## Example

```python
from songwalker.events import parse_midi_bytes
from songwalker.runner import EventList, ScheduledNote
from songwalker.slot import Slot
from songwalker.transport import TransportState

transport = TransportState()

# Preset mode: no preset loaded, so the slot plays a sine wave.
slot = Slot(0)
slot.initialize(44100.0)
slot.handle_midi_event(parse_midi_bytes(bytes([0x90, 69, 100])), transport)
left, right = [0.0] * 256, [0.0] * 256
slot.render(left, right, 256, 44100.0, transport)

# Runner mode: each held note plays the pattern, transposed.
runner = Slot(1)
runner.has_source = True
runner.runner_state.event_list = EventList(
    events=[ScheduledNote(0.0, "C4"), ScheduledNote(1.0, "E4")],
    total_beats=2.0,
)
runner.handle_midi_event(parse_midi_bytes(bytes([0x90, 62, 100])), transport)
runner.render(left, right, 256, 44100.0, transport)
```

## What it does not do

The package has no audio output and no MIDI device input. You feed it events, and it fills sample lists that you supply.

It does not compile pattern source text into an `EventList`. Build `EventList`s directly.

It does not fetch library indexes or preset files over the network. `PresetManager` only parses index documents that have already been decoded from JSON.

It does not decode audio files. `LoadedZone` expects PCM samples already decoded to floats.

## Running the tests

```
pip install -e .[test]
pytest
```