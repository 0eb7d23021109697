"""String key-value storage backends for persisted quiz state."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from PySide6.QtCore import QSettings

from slidequiz.constants.storage_constants import SETTINGS_APPLICATION, SETTINGS_ORGANIZATION

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """Synchronous string-keyed storage, modelled on browser localStorage."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Process-local storage; contents vanish with the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class QSettingsStorage:
    """Storage backed by QSettings, flushed to disk on every write."""

    def __init__(self, settings: QSettings | None = None) -> None:
        self._settings = settings or QSettings(SETTINGS_ORGANIZATION, SETTINGS_APPLICATION)

    @classmethod
    def from_file(cls, file_path: Path) -> QSettingsStorage:
        """Use an INI file instead of the platform's per-user settings store."""
        return cls(QSettings(str(file_path), QSettings.Format.IniFormat))

    def get_item(self, key: str) -> str | None:
        value = self._settings.value(key)
        if value is None:
            return None
        if not isinstance(value, str):
            logger.warning("Ignoring non-string settings value for %r", key)
            return None
        return value

    def set_item(self, key: str, value: str) -> None:
        self._settings.setValue(key, value)
        self._settings.sync()

    def remove_item(self, key: str) -> None:
        self._settings.remove(key)
        self._settings.sync()
