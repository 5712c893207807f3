"""
gui_workers.py - GUI Worker Threads

Provides background execution of long tasks to avoid blocking UI
"""

from typing import List, Optional

from PySide6.QtCore import QThread, Signal, QObject

from core import (
    build_catalog, decode, reconcile, schedule_plan, execute_actions,
    Action, Catalog, MoveOptions, ListMoveError,
)


class ScanWorker(QThread):
    """Catalog building worker thread"""

    # Signals
    finished = Signal(object)       # Complete, returns Catalog
    error = Signal(str)             # Error message

    def __init__(self, options: MoveOptions, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.options = options

    def run(self):
        try:
            self.finished.emit(build_catalog(self.options))
        except (ListMoveError, OSError) as e:
            self.error.emit(str(e))


class PlanWorker(QThread):
    """Decode + reconcile + schedule worker thread"""

    # Signals
    finished = Signal(object, object)   # Plan, action list (None when plan invalid)
    error = Signal(str)                 # Structural error message

    def __init__(
        self,
        catalog: Catalog,
        text: str,
        options: MoveOptions,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.catalog = catalog
        self.text = text
        self.options = options

    def run(self):
        try:
            plan = reconcile(self.catalog, decode(self.text), self.options)
            actions = schedule_plan(plan) if plan.valid else None
            self.finished.emit(plan, actions)
        except (ListMoveError, OSError) as e:
            self.error.emit(str(e))


class ExecuteWorker(QThread):
    """Plan execution worker thread"""

    # Signals
    progress = Signal(int, int, str)    # current, total, message
    finished = Signal(object)           # ExecutionResult

    def __init__(self, actions: List[Action], parent: Optional[QObject] = None):
        super().__init__(parent)
        self.actions = actions

    def run(self):
        def progress_callback(current: int, total: int, action: Action):
            self.progress.emit(current, total, action.describe())

        result = execute_actions(self.actions, progress_callback=progress_callback)
        self.finished.emit(result)
