from __future__ import annotations

from PyQt6.QtCore import QRect, QRectF, Qt
from PyQt6.QtGui import QAction, QBrush, QColor, QKeySequence, QPainter, QPen
from PyQt6.QtWidgets import (
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSpinBox,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from pomodoro_timer.core.config import MAX_CUSTOM_MINUTES, MIN_CUSTOM_MINUTES, AppSettings
from pomodoro_timer.core.errors import PomodoroError
from pomodoro_timer.core.models import POMODOROS_PER_CYCLE, SessionType, TimerState
from pomodoro_timer.core.service import TimerService, TimerStateView
from pomodoro_timer.data.storage import Storage


HISTORY_LIMIT = 50

SESSION_COLORS = {
    SessionType.WORK: "#e57373",
    SessionType.SHORT_BREAK: "#81c784",
    SessionType.LONG_BREAK: "#64b5f6",
}


def format_remaining(seconds: int) -> str:
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


class CountdownWidget(QWidget):
    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setMinimumSize(360, 360)
        self._progress = 0.0
        self._remaining_text = "00:00"
        self._color = QColor(SESSION_COLORS[SessionType.WORK])
        self._cycle = 0

    def set_state(self, progress: float, remaining_text: str, session_type: SessionType, cycle: int) -> None:
        self._progress = max(0.0, min(1.0, progress))
        self._remaining_text = remaining_text
        self._color = QColor(SESSION_COLORS[session_type])
        self._cycle = cycle
        self.update()

    def paintEvent(self, event) -> None:  # noqa: N802
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        rect = self.rect().adjusted(10, 10, -10, -40)

        diameter = int(min(rect.width(), rect.height()) * 0.9)
        circle_rect = QRect(
            rect.center().x() - diameter // 2,
            rect.center().y() - diameter // 2,
            diameter,
            diameter,
        )

        painter.setPen(QPen(QColor(0, 0, 0, 40), 10))
        painter.drawEllipse(circle_rect)
        painter.setPen(QPen(self._color, 10))
        span = int(-360 * 16 * self._progress)
        painter.drawArc(circle_rect, 90 * 16, span)

        font = painter.font()
        font.setPointSize(max(12, diameter // 6))
        painter.setFont(font)
        painter.setPen(QColor("#263238"))
        painter.drawText(circle_rect, Qt.AlignmentFlag.AlignCenter, self._remaining_text)

        # cycle dots
        dot = 14
        gap = 10
        total_width = POMODOROS_PER_CYCLE * dot + (POMODOROS_PER_CYCLE - 1) * gap
        left = self.rect().center().x() - total_width / 2
        top = self.rect().bottom() - 30
        painter.setPen(QPen(self._color, 2))
        for i in range(POMODOROS_PER_CYCLE):
            filled = i < self._cycle
            painter.setBrush(QBrush(self._color) if filled else Qt.BrushStyle.NoBrush)
            painter.drawEllipse(QRectF(left + i * (dot + gap), top, dot, dot))


class MainWindow(QMainWindow):
    def __init__(self, service: TimerService, storage: Storage, settings: AppSettings) -> None:
        super().__init__()
        self.setWindowTitle("Pomodoro Timer")
        self.resize(900, 560)

        self.service = service
        self.storage = storage
        self.settings = settings
        # Duration of the running countdown, for the progress ring.
        self._total_seconds = 0

        self._build_ui()
        self._connect_signals()

        self.refresh_state()
        self.refresh_history()

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)

        split = QSplitter(Qt.Orientation.Horizontal)
        left = QWidget()
        right = QWidget()
        split.addWidget(left)
        split.addWidget(right)
        split.setStretchFactor(0, 3)
        split.setStretchFactor(1, 2)

        root_layout = QHBoxLayout(central)
        root_layout.addWidget(split)

        left_layout = QVBoxLayout(left)
        self.session_label = QLabel(SessionType.WORK.display_name)
        self.session_label.setObjectName("Heading")
        self.session_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        left_layout.addWidget(self.session_label)

        self.countdown_widget = CountdownWidget()
        left_layout.addWidget(self.countdown_widget, 1)

        custom_bar = QHBoxLayout()
        self.custom_minutes = QSpinBox()
        self.custom_minutes.setRange(MIN_CUSTOM_MINUTES, MAX_CUSTOM_MINUTES)
        self.custom_minutes.setValue(self.settings.custom_minutes)
        self.custom_btn = QPushButton("Start custom")
        custom_bar.addWidget(QLabel("Custom min:"))
        custom_bar.addWidget(self.custom_minutes)
        custom_bar.addWidget(self.custom_btn)
        custom_bar.addStretch()
        left_layout.addLayout(custom_bar)

        controls = QHBoxLayout()
        self.start_btn = QPushButton("Start")
        self.start_btn.setObjectName("PrimaryButton")
        self.pause_btn = QPushButton("Pause")
        self.resume_btn = QPushButton("Resume")
        self.reset_btn = QPushButton("Reset")
        self.stop_btn = QPushButton("Stop")
        for button in (self.start_btn, self.pause_btn, self.resume_btn, self.reset_btn, self.stop_btn):
            controls.addWidget(button)
        controls.addStretch()
        left_layout.addLayout(controls)

        right_layout = QVBoxLayout(right)
        stats_box = QWidget()
        stats_form = QFormLayout(stats_box)
        self.today_label = QLabel("0")
        self.cycle_label = QLabel("0")
        stats_form.addRow("Pomodoros today:", self.today_label)
        stats_form.addRow("Current cycle:", self.cycle_label)

        self.history_list = QListWidget()
        right_layout.addWidget(QLabel("Statistics"))
        right_layout.addWidget(stats_box)
        right_layout.addWidget(QLabel("Recent sessions"))
        right_layout.addWidget(self.history_list, 1)

        space_action = QAction(self)
        space_action.setShortcut(QKeySequence(Qt.Key.Key_Space))
        space_action.triggered.connect(self._space_toggle)
        self.addAction(space_action)

    def _connect_signals(self) -> None:
        self.start_btn.clicked.connect(self.start_session)
        self.custom_btn.clicked.connect(self.start_custom_session)
        self.pause_btn.clicked.connect(self.service.pause)
        self.resume_btn.clicked.connect(self.service.resume)
        self.reset_btn.clicked.connect(self.service.reset)
        self.stop_btn.clicked.connect(self.service.stop)
        self.custom_minutes.valueChanged.connect(self._save_custom_minutes)
        self.service.state_changed.connect(self.refresh_state)
        self.service.record_saved.connect(lambda _record: self.refresh_history())
        self.service.session_completed.connect(self.on_session_completed)

    def _space_toggle(self) -> None:
        state = self.service.current_state().state
        if state == TimerState.RUNNING:
            self.service.pause()
        elif state == TimerState.PAUSED:
            self.service.resume()
        else:
            self.start_session()

    def start_session(self) -> None:
        self._run_command(self.service.start_normal)

    def start_custom_session(self) -> None:
        self._run_command(lambda: self.service.start_custom(self.custom_minutes.value()))

    def _run_command(self, command) -> None:
        try:
            started = command()
        except PomodoroError as exc:
            QMessageBox.warning(self, "Timer", str(exc))
            return
        if not started:
            QMessageBox.information(self, "Timer", "Session is already running")
            return
        self._total_seconds = self.service.current_state().remaining_seconds

    def on_session_completed(self, completed_type: SessionType, next_type: SessionType) -> None:
        self._total_seconds = 0
        self.statusBar().showMessage(
            f"{completed_type.display_name} finished. Next up: {next_type.display_name}."
        )

    def _save_custom_minutes(self, value: int) -> None:
        self.settings.custom_minutes = value
        self.settings.save(self.storage)

    def refresh_state(self) -> None:
        view = self.service.current_state()
        active = view.state in {TimerState.RUNNING, TimerState.PAUSED}
        progress = 0.0
        if active and self._total_seconds > 0:
            progress = 1.0 - view.remaining_seconds / self._total_seconds
        elif view.state == TimerState.COMPLETED:
            progress = 1.0

        remaining = view.remaining_seconds if active else view.session_type.default_minutes * 60
        self.countdown_widget.set_state(progress, format_remaining(remaining), view.session_type, view.current_cycle)
        self.session_label.setText(view.session_type.display_name)
        self.today_label.setText(str(view.completed_pomodoros))
        self.cycle_label.setText(f"{view.current_cycle}/{POMODOROS_PER_CYCLE}")
        self._update_buttons(view)

    def _update_buttons(self, view: TimerStateView) -> None:
        state = view.state
        idle = state not in {TimerState.RUNNING, TimerState.PAUSED}
        self.start_btn.setEnabled(idle)
        self.custom_btn.setEnabled(idle)
        self.pause_btn.setEnabled(state == TimerState.RUNNING)
        self.resume_btn.setEnabled(state == TimerState.PAUSED)
        self.stop_btn.setEnabled(not idle)

    def refresh_history(self) -> None:
        self.history_list.clear()
        for record in self.storage.load_all_records(limit=HISTORY_LIMIT):
            status = "✅" if record.was_completed else "⏹"
            pauses = f" · {record.pause_count} pauses" if record.pause_count else ""
            item_text = (
                f"{status} {record.finished_at:%Y-%m-%d %H:%M} · "
                f"{record.session_type.display_name} · {record.duration_minutes}m{pauses}"
            )
            QListWidgetItem(item_text, self.history_list)

    def closeEvent(self, event) -> None:  # noqa: N802
        if self.service.is_active:
            answer = QMessageBox.question(
                self,
                "Exit",
                "A session is active. Exit and record it as stopped?",
                QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            )
            if answer != QMessageBox.StandardButton.Yes:
                event.ignore()
                return
            self.service.stop()
        self.service.shutdown()
        event.accept()
