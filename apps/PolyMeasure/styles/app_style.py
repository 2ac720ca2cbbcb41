"""Shared UI styling helpers for PolyMeasure widgets."""

from PySide6.QtWidgets import QGroupBox, QLabel, QLineEdit, QPushButton, QToolButton


FORM_LABEL_STYLE = """
    QLabel#FormLabel {
        color: #a6adc8;
        font-size: 11px;
        font-weight: 600;
        padding: 2px 4px;
        background: transparent;
        border: none;
    }
"""

VALUE_LABEL_STYLE = """
    QLabel#ValueLabel {
        color: #f9e2af;
        font-size: 13px;
        font-weight: bold;
        font-family: "Consolas", "DejaVu Sans Mono", monospace;
        padding: 2px 4px;
    }
"""

NUMERIC_INPUT_STYLE = """
    QLineEdit {
        background-color: #313244;
        color: #cdd6f4;
        border: 1px solid #45475a;
        border-radius: 4px;
        padding: 4px 6px;
        font-size: 11px;
    }
    QLineEdit:focus {
        border-color: #89b4fa;
    }
    QLineEdit:disabled {
        color: #6c7086;
    }
"""

UNIT_BUTTON_STYLE = """
    QToolButton {
        background-color: #313244;
        border: 1px solid #45475a;
        border-radius: 4px;
        color: #89b4fa;
        font-size: 10px;
        min-width: 36px;
        padding: 2px 6px;
    }
    QToolButton:hover {
        background-color: #45475a;
    }
"""

ACTION_BUTTON_STYLE = """
    QPushButton {
        text-align: left;
        padding: 6px 10px;
    }
    QPushButton:disabled {
        color: #6c7086;
        border-color: #313244;
    }
"""

GROUPBOX_STYLE = """
    QGroupBox {
        border: 1px solid #45475a;
        border-radius: 4px;
        margin-top: 10px;
        color: #cdd6f4;
        font-weight: 600;
    }
    QGroupBox::title {
        subcontrol-origin: margin;
        left: 8px;
        padding: 0 4px;
        background-color: #313244;
        color: #cdd6f4;
        border-radius: 3px;
    }
"""

SPLITTER_STYLE = """
    QSplitter::handle {
        background-color: #313244;
    }
"""


def apply_form_label_style(label: QLabel) -> None:
    label.setObjectName("FormLabel")
    label.setAutoFillBackground(False)
    label.setStyleSheet(FORM_LABEL_STYLE)


def apply_value_label_style(label: QLabel) -> None:
    label.setObjectName("ValueLabel")
    label.setStyleSheet(VALUE_LABEL_STYLE)


def apply_numeric_input_style(line_edit: QLineEdit) -> None:
    line_edit.setStyleSheet(NUMERIC_INPUT_STYLE)


def apply_unit_button_style(button: QToolButton) -> None:
    button.setStyleSheet(UNIT_BUTTON_STYLE)


def apply_action_button_style(button: QPushButton) -> None:
    button.setStyleSheet(ACTION_BUTTON_STYLE)


def apply_groupbox_style(groupbox: QGroupBox) -> None:
    groupbox.setStyleSheet(GROUPBOX_STYLE)


def apply_splitter_style(splitter) -> None:
    splitter.setStyleSheet(SPLITTER_STYLE)
