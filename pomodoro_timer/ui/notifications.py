from __future__ import annotations

import logging

from PyQt6.QtWidgets import QApplication, QMessageBox, QWidget

from pomodoro_timer.core.config import AppSettings
from pomodoro_timer.core.models import SessionType
from pomodoro_timer.core.ports import NotificationSink


logger = logging.getLogger(__name__)


class LoggingNotificationSink(NotificationSink):
    def on_tick(self) -> None:
        logger.debug("tick")

    def on_alarm(self) -> None:
        logger.info("Alarm: countdown finished")

    def on_session_completed(self, completed_type: SessionType, next_type: SessionType) -> None:
        logger.info("%s completed, next: %s", completed_type.display_name, next_type.display_name)


class QtNotificationSink(LoggingNotificationSink):
    """Beeps and shows a completion dialog according to the user's settings."""

    def __init__(self, settings: AppSettings, parent: QWidget | None = None) -> None:
        self._settings = settings
        self._parent = parent

    def set_parent(self, parent: QWidget) -> None:
        self._parent = parent

    def on_tick(self) -> None:
        super().on_tick()
        if self._settings.tick_sound:
            QApplication.beep()

    def on_alarm(self) -> None:
        super().on_alarm()
        if self._settings.alarm_sound:
            QApplication.beep()

    def on_session_completed(self, completed_type: SessionType, next_type: SessionType) -> None:
        super().on_session_completed(completed_type, next_type)
        if not self._settings.show_completion_dialog:
            return
        QMessageBox.information(
            self._parent,
            "Session completed",
            f"{completed_type.display_name} finished. Next up: {next_type.display_name}.",
        )
