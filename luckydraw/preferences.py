"""UI preferences kept outside the draw state (sound toggle, theme)."""

from __future__ import annotations

import json
import logging
import pathlib
from typing import Any, Dict, Optional, Protocol

SOUND_ENABLED_KEY = "sound-enabled"
THEME_KEY = "theme"
VALID_THEMES = ("light", "dark", "system")

logger = logging.getLogger("luckydraw.preferences")


class PreferenceStore(Protocol):
    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...


class InMemoryPreferences:
    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._values: Dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value


class JsonFilePreferences:
    """Preferences persisted as a flat JSON object.

    A missing or unreadable file behaves like an empty store.
    """

    def __init__(self, path: str) -> None:
        self._path = pathlib.Path(path)

    def _load(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Ignoring unreadable preferences file %s: %s", self._path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._path.write_text(json.dumps(data), encoding="utf-8")


def sound_enabled(store: PreferenceStore) -> bool:
    value = store.get(SOUND_ENABLED_KEY)
    if value is None:
        return True
    if isinstance(value, str):
        return value == "true"
    return bool(value)


def set_sound_enabled(store: PreferenceStore, enabled: bool) -> None:
    store.set(SOUND_ENABLED_KEY, bool(enabled))


def theme(store: PreferenceStore) -> str:
    value = store.get(THEME_KEY)
    return value if value in VALID_THEMES else "system"


def set_theme(store: PreferenceStore, value: str) -> None:
    if value not in VALID_THEMES:
        raise ValueError(f"Unknown theme: {value}")
    store.set(THEME_KEY, value)


def resolve_theme(value: str, system_theme: str = "light") -> str:
    """Map ``"system"`` onto the platform theme."""
    if value == "system":
        return system_theme
    return value


def toggle_theme(store: PreferenceStore, system_theme: str = "light") -> str:
    current = resolve_theme(theme(store), system_theme)
    new_theme = "dark" if current == "light" else "light"
    set_theme(store, new_theme)
    return new_theme
