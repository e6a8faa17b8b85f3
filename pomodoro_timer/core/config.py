from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from typing import Any

from pomodoro_timer.data.storage import Storage


SETTINGS_KEY = "settings"
MIN_CUSTOM_MINUTES = 1
MAX_CUSTOM_MINUTES = 240

logger = logging.getLogger(__name__)


@dataclass
class AppSettings:
    custom_minutes: int = 30
    tick_sound: bool = False
    alarm_sound: bool = True
    show_completion_dialog: bool = True

    def __post_init__(self) -> None:
        self.custom_minutes = max(MIN_CUSTOM_MINUTES, min(MAX_CUSTOM_MINUTES, int(self.custom_minutes)))

    @classmethod
    def from_dict(cls, raw: Any) -> AppSettings:
        if not isinstance(raw, dict):
            return cls()
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in raw.items() if key in known}
        try:
            return cls(**values)
        except (TypeError, ValueError):
            logger.warning("Ignoring malformed settings: %r", raw)
            return cls()

    @classmethod
    def load(cls, storage: Storage) -> AppSettings:
        return cls.from_dict(storage.get_setting(SETTINGS_KEY, {}))

    def save(self, storage: Storage) -> None:
        storage.set_setting(SETTINGS_KEY, asdict(self))
