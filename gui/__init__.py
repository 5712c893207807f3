"""
gui - PySide6 front-end for listmove
"""

from .gui_entry import main

__all__ = ["main"]
