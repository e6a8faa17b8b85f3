from __future__ import annotations

from PyQt6.QtWidgets import QApplication


POMODORO_QSS = """
QWidget {
    background: #fbf4ef;
    color: #3a2f2a;
    font-size: 13px;
}

QLabel {
    background: transparent;
}

QLabel#Heading {
    font-size: 22px;
    font-weight: 700;
    color: #b3473c;
}

QPushButton {
    border: none;
    background: #f3e3d9;
    border-radius: 14px;
    padding: 8px 14px;
    font-weight: 600;
}

QPushButton:hover {
    background: #ecd6c9;
}

QPushButton:disabled {
    color: #b9aaa0;
    background: #f6eee8;
}

QPushButton#PrimaryButton {
    background: #e0645a;
    color: #ffffff;
    border-radius: 20px;
    padding: 10px 24px;
}

QPushButton#PrimaryButton:hover {
    background: #cf554b;
}

QPushButton#PrimaryButton:disabled {
    background: #f0b7b1;
    color: #fff7f5;
}

QSpinBox {
    background: #fff8f3;
    border: none;
    border-radius: 12px;
    padding: 6px 10px;
}

QListWidget {
    background: #fff8f3;
    border: none;
    border-radius: 12px;
    padding: 6px;
}

QListWidget::item {
    padding: 4px;
}

QSplitter::handle {
    background: transparent;
    width: 16px;
}
"""


def apply_theme(app: QApplication) -> None:
    app.setStyleSheet(POMODORO_QSS)
