"""
PolyMeasure entry point.

Run with: python -m apps.PolyMeasure
"""

import logging
import sys
import os

# Add project root to path for imports
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt
from PySide6.QtGui import QFont

from apps.PolyMeasure.main_window import MainWindow


def main():
    """Application entry point."""
    logging.basicConfig(
        level=os.environ.get("POLYMEASURE_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv)

    app.setApplicationName("PolyMeasure")
    app.setApplicationVersion("0.1.0")
    app.setOrganizationName("PolyMeasure")

    font = QFont("Segoe UI", 9)
    app.setFont(font)

    app.setStyleSheet(get_stylesheet())

    window = MainWindow()
    window.show()

    sys.exit(app.exec())


def get_stylesheet() -> str:
    """Return the application stylesheet."""
    return """
    QWidget {
        background-color: #1e1e2e;
        color: #cdd6f4;
        font-family: 'Segoe UI', sans-serif;
    }

    QLabel {
        color: #cdd6f4;
        background-color: transparent;
    }

    QLineEdit {
        background-color: #313244;
        border: 1px solid #45475a;
        border-radius: 6px;
        padding: 6px 10px;
        color: #cdd6f4;
    }

    QLineEdit:focus {
        border-color: #89b4fa;
    }

    QGroupBox {
        font-weight: bold;
        border: 1px solid #45475a;
        border-radius: 8px;
        margin-top: 12px;
        padding-top: 8px;
        background-color: #181825;
    }

    QGroupBox::title {
        subcontrol-origin: margin;
        subcontrol-position: top left;
        padding: 4px 12px;
        color: #89b4fa;
    }

    QToolTip {
        background-color: #313244;
        color: #cdd6f4;
        border: 1px solid #45475a;
    }
    """


if __name__ == "__main__":
    main()
