"""Persistent plugin state: library URLs and per-slot configuration."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

DEFAULT_LIBRARY_URL = "https://clevertree.github.io/songwalker-library"

_MISSING = object()


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _take(obj: dict, key: str, check, what: str, default: Any = _MISSING) -> Any:
    if key not in obj:
        if default is _MISSING:
            raise ValueError(f"missing field `{key}`")
        return default
    value = obj[key]
    if not check(value):
        raise ValueError(f"invalid type for `{key}`: expected {what}")
    return value


@dataclass
class SlotConfig:
    """Configuration for a single slot, persisted in the project.

    A slot can hold a preset and/or inline source code.
    """

    name: str = "New Slot"
    preset_id: str | None = None
    midi_channel: int = 0
    volume: float = 0.8
    pan: float = 0.0
    muted: bool = False
    solo: bool = False
    root_note: int = 60
    source_code: str = ""
    compile_error: str | None = field(default=None, compare=False)

    @classmethod
    def new_preset(cls, name: str, preset_id: str) -> SlotConfig:
        """Create a slot with a preset assigned."""
        return cls(name=name, preset_id=preset_id)

    @classmethod
    def new_with_source(cls, name: str, source: str) -> SlotConfig:
        """Create a slot with source code."""
        return cls(name=name, source_code=source)

    def to_dict(self) -> dict[str, Any]:
        """Serializable form; the compile error is not persisted."""
        return {
            "name": self.name,
            "preset_id": self.preset_id,
            "midi_channel": self.midi_channel,
            "volume": self.volume,
            "pan": self.pan,
            "muted": self.muted,
            "solo": self.solo,
            "root_note": self.root_note,
            "source_code": self.source_code,
        }

    @classmethod
    def from_dict(cls, obj: Any) -> SlotConfig:
        """Build from a decoded mapping, raising ValueError on bad input."""
        if not isinstance(obj, dict):
            raise ValueError("slot config must be an object")
        root_note = _take(obj, "root_note", _is_int, "integer")
        if not 0 <= root_note <= 255:
            raise ValueError("`root_note` out of range")
        return cls(
            name=_take(obj, "name", lambda v: isinstance(v, str), "string"),
            preset_id=_take(
                obj,
                "preset_id",
                lambda v: v is None or isinstance(v, str),
                "string or null",
                default=None,
            ),
            midi_channel=_take(obj, "midi_channel", _is_int, "integer"),
            volume=float(_take(obj, "volume", _is_number, "number")),
            pan=float(_take(obj, "pan", _is_number, "number")),
            muted=_take(obj, "muted", lambda v: isinstance(v, bool), "boolean"),
            solo=_take(obj, "solo", lambda v: isinstance(v, bool), "boolean"),
            root_note=root_note,
            source_code=_take(obj, "source_code", lambda v: isinstance(v, str), "string"),
        )


@dataclass
class PluginState:
    """Plugin state saved and restored by the host."""

    library_urls: list[str] = field(default_factory=lambda: [DEFAULT_LIBRARY_URL])
    slot_configs: list[SlotConfig] = field(default_factory=list)

    def add_slot_config(self, config: SlotConfig) -> int:
        """Append a slot configuration and return its index."""
        self.slot_configs.append(config)
        return len(self.slot_configs) - 1

    def remove_slot_config(self, index: int) -> None:
        """Remove a slot by index; out-of-range indexes are ignored."""
        if 0 <= index < len(self.slot_configs):
            del self.slot_configs[index]

    def to_bytes(self) -> bytes:
        """Serialize to compact JSON bytes."""
        payload = {
            "library_urls": list(self.library_urls),
            "slot_configs": [c.to_dict() for c in self.slot_configs],
        }
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> PluginState:
        """Deserialize from JSON bytes, raising ValueError if they are invalid."""
        obj = json.loads(data)
        if not isinstance(obj, dict):
            raise ValueError("plugin state must be an object")
        urls = _take(obj, "library_urls", lambda v: isinstance(v, list), "array")
        if not all(isinstance(u, str) for u in urls):
            raise ValueError("`library_urls` must hold strings")
        configs = _take(obj, "slot_configs", lambda v: isinstance(v, list), "array")
        return cls(
            library_urls=list(urls),
            slot_configs=[SlotConfig.from_dict(c) for c in configs],
        )