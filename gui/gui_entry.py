"""
gui_entry.py - GUI Entry

Launch PySide6 GUI application
"""

import sys

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt

from .gui_mainwindow import MainWindow


def main():
    """GUI main entry"""
    # High DPI support
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv)
    app.setApplicationName("listmove")
    app.setApplicationVersion("1.0.0")

    # Set style
    app.setStyle("Fusion")

    # Remaining non-option arguments preset the path field
    paths = [arg for arg in sys.argv[1:] if not arg.startswith("-")]
    window = MainWindow(paths)
    window.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
