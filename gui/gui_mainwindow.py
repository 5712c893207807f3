"""
gui_mainwindow.py - GUI Main Window

Listing editor with preview table:
1. Load a catalog into the editable listing
2. Preview: reconcile the edited listing, show operations and collisions
3. Execute the scheduled actions
"""

import re
from pathlib import Path
from typing import Optional, List, Dict

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QLabel, QLineEdit, QPushButton, QCheckBox, QPlainTextEdit,
    QTableWidget, QTableWidgetItem, QProgressBar, QFileDialog,
    QMessageBox, QHeaderView, QGroupBox, QSplitter,
)
from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QColor, QFont

from core import (
    Action, Catalog, Collision, ExecutionResult, MoveOptions, OpKind, Plan,
    encode, render_actions,
)
from .gui_workers import ScanWorker, PlanWorker, ExecuteWorker


STATUS_COLORS = {
    OpKind.NOOP: QColor(150, 150, 150),
    OpKind.MOVE: QColor(0, 150, 0),
    OpKind.COPY: QColor(0, 110, 180),
    OpKind.DELETE: QColor(200, 0, 0),
}


class ListingPanel(QWidget):
    """Listing editor and preview"""

    def __init__(self, initial_paths: Optional[List[str]] = None, parent=None):
        super().__init__(parent)
        self.catalog: Optional[Catalog] = None
        self.plan: Optional[Plan] = None
        self.actions: Optional[List[Action]] = None
        self.scan_worker: Optional[ScanWorker] = None
        self.plan_worker: Optional[PlanWorker] = None
        self.execute_worker: Optional[ExecuteWorker] = None

        self._init_ui()
        if initial_paths:
            self.path_edit.setText(" ".join(initial_paths))

    def _init_ui(self):
        layout = QVBoxLayout(self)

        # Source settings group
        source_group = QGroupBox("Source Settings")
        source_layout = QGridLayout(source_group)

        source_layout.addWidget(QLabel("Paths:"), 0, 0)
        self.path_edit = QLineEdit()
        self.path_edit.setPlaceholderText("Directory, paths or wildcard patterns (space separated)")
        source_layout.addWidget(self.path_edit, 0, 1)
        self.browse_btn = QPushButton("Browse...")
        self.browse_btn.clicked.connect(self._browse_directory)
        source_layout.addWidget(self.browse_btn, 0, 2)

        source_layout.addWidget(QLabel("Exclude:"), 1, 0)
        self.exclude_edit = QLineEdit()
        self.exclude_edit.setPlaceholderText("Regular expression (optional)")
        source_layout.addWidget(self.exclude_edit, 1, 1, 1, 2)

        # Options
        options_layout = QHBoxLayout()
        self.hidden_check = QCheckBox("Include Hidden")
        self.directory_check = QCheckBox("Directories Themselves")
        self.sort_check = QCheckBox("Natural Sort")
        self.absolute_check = QCheckBox("Absolute Paths")
        self.copy_check = QCheckBox("Copy Instead of Move")
        for check in (self.hidden_check, self.directory_check, self.sort_check,
                      self.absolute_check, self.copy_check):
            options_layout.addWidget(check)
        options_layout.addStretch()
        source_layout.addLayout(options_layout, 2, 0, 1, 3)

        self.load_btn = QPushButton("Load")
        self.load_btn.clicked.connect(self._do_load)
        source_layout.addWidget(self.load_btn, 3, 0, 1, 3)

        layout.addWidget(source_group)

        # Listing editor and preview table side by side
        splitter = QSplitter(Qt.Orientation.Horizontal)

        self.listing_edit = QPlainTextEdit()
        self.listing_edit.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)
        self.listing_edit.setFont(QFont("monospace"))
        self.listing_edit.setPlaceholderText("Load paths, then edit one line per entry. Prefix a line with // to delete it.")
        self.listing_edit.textChanged.connect(self._on_text_changed)
        splitter.addWidget(self.listing_edit)

        self.table = QTableWidget()
        self.table.setColumnCount(4)
        self.table.setHorizontalHeaderLabels(["Original", "New", "Operation", "Status"])
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        self.table.horizontalHeader().setSectionResizeMode(1, QHeaderView.ResizeMode.Stretch)
        self.table.horizontalHeader().setSectionResizeMode(2, QHeaderView.ResizeMode.ResizeToContents)
        self.table.horizontalHeader().setSectionResizeMode(3, QHeaderView.ResizeMode.Stretch)
        self.table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        splitter.addWidget(self.table)

        layout.addWidget(splitter, 1)

        # Progress and execution
        bottom_layout = QHBoxLayout()

        self.progress_bar = QProgressBar()
        self.progress_bar.setVisible(False)
        bottom_layout.addWidget(self.progress_bar, 1)

        self.preview_btn = QPushButton("Preview")
        self.preview_btn.clicked.connect(self._do_preview)
        self.preview_btn.setEnabled(False)
        bottom_layout.addWidget(self.preview_btn)

        self.execute_btn = QPushButton("Execute")
        self.execute_btn.clicked.connect(self._do_execute)
        self.execute_btn.setEnabled(False)
        self.execute_btn.setStyleSheet("QPushButton { background-color: #4CAF50; color: white; font-weight: bold; padding: 8px 16px; }")
        bottom_layout.addWidget(self.execute_btn)

        layout.addLayout(bottom_layout)

        # Status label
        self.status_label = QLabel("")
        layout.addWidget(self.status_label)

    def _options(self) -> Optional[MoveOptions]:
        """Collect run options from the form"""
        pattern = None
        exclude = self.exclude_edit.text().strip()
        if exclude:
            try:
                pattern = re.compile(exclude)
            except re.error as e:
                QMessageBox.warning(self, "Warning", f"Invalid exclude pattern: {e}")
                return None

        paths = self.path_edit.text().split()
        base_dir = Path.cwd()
        return MoveOptions(
            paths=paths,
            sort=self.sort_check.isChecked(),
            absolute=self.absolute_check.isChecked(),
            directory=self.directory_check.isChecked(),
            with_hidden=self.hidden_check.isChecked(),
            exclude_pattern=pattern,
            copy=self.copy_check.isChecked(),
            base_dir=base_dir,
        )

    def _browse_directory(self):
        """Browse and select directory"""
        directory = QFileDialog.getExistingDirectory(self, "Select Directory")
        if directory:
            self.path_edit.setText(directory)

    def _do_load(self):
        """Build the catalog"""
        options = self._options()
        if options is None:
            return

        self.load_btn.setEnabled(False)
        self.load_btn.setText("Loading...")
        self.preview_btn.setEnabled(False)
        self.execute_btn.setEnabled(False)

        self.scan_worker = ScanWorker(options)
        self.scan_worker.finished.connect(self._on_scan_finished)
        self.scan_worker.error.connect(self._on_scan_error)
        self.scan_worker.start()

    @Slot(object)
    def _on_scan_finished(self, catalog: Catalog):
        """Catalog loaded"""
        self.catalog = catalog
        self.plan = None
        self.actions = None
        self.load_btn.setEnabled(True)
        self.load_btn.setText("Load")

        self.listing_edit.setPlainText(encode(catalog))
        self.table.setRowCount(0)

        if len(catalog):
            self.preview_btn.setEnabled(True)
            self.status_label.setText(f"Loaded {len(catalog)} entries")
        else:
            self.status_label.setText("No entries found")

    @Slot(str)
    def _on_scan_error(self, error: str):
        """Catalog error"""
        self.load_btn.setEnabled(True)
        self.load_btn.setText("Load")
        QMessageBox.critical(self, "Error", f"Load failed: {error}")

    def _on_text_changed(self):
        # Any edit invalidates the previous preview
        self.actions = None
        self.execute_btn.setEnabled(False)

    def _do_preview(self):
        """Reconcile the edited listing"""
        if self.catalog is None:
            return
        options = self._options()
        if options is None:
            return

        self.preview_btn.setEnabled(False)
        self.preview_btn.setText("Checking...")

        self.plan_worker = PlanWorker(self.catalog, self.listing_edit.toPlainText(), options)
        self.plan_worker.finished.connect(self._on_plan_finished)
        self.plan_worker.error.connect(self._on_plan_error)
        self.plan_worker.start()

    @Slot(object, object)
    def _on_plan_finished(self, plan: Plan, actions: Optional[List[Action]]):
        """Reconciliation complete"""
        self.plan = plan
        self.actions = actions
        self.preview_btn.setEnabled(True)
        self.preview_btn.setText("Preview")

        self._update_table(plan)

        if not plan.valid:
            self.status_label.setText(f"{len(plan.fatal_collisions)} collision(s), edit the listing and preview again")
        elif plan.is_noop:
            self.status_label.setText("Nothing to do")
        else:
            self.execute_btn.setEnabled(True)
            self.status_label.setText(
                f"Will perform {len(plan.changes)} operations "
                f"(existing destinations: {len(plan.warnings)})"
            )

    @Slot(str)
    def _on_plan_error(self, error: str):
        """Structural error"""
        self.preview_btn.setEnabled(True)
        self.preview_btn.setText("Preview")
        self.table.setRowCount(0)
        QMessageBox.warning(self, "Warning", error)

    def _update_table(self, plan: Plan):
        """Show one row per entry with its operation and collisions"""
        problems: Dict[int, List[Collision]] = {}
        for collision in plan.collisions:
            for op in collision.operations:
                problems.setdefault(op.entry.index, []).append(collision)

        self.table.setRowCount(len(plan.operations))
        for i, op in enumerate(plan.operations):
            new_text = op.target_text if op.is_transfer else ""
            self.table.setItem(i, 0, QTableWidgetItem(op.entry.original_path))
            self.table.setItem(i, 1, QTableWidgetItem(new_text))

            kind_item = QTableWidgetItem(op.kind.value)
            kind_item.setForeground(STATUS_COLORS[op.kind])
            self.table.setItem(i, 2, kind_item)

            collisions = problems.get(op.entry.index, [])
            status_item = QTableWidgetItem("; ".join(c.message for c in collisions))
            if any(c.fatal for c in collisions):
                status_item.setBackground(QColor(255, 200, 200))
            elif collisions:
                status_item.setBackground(QColor(255, 255, 200))
            self.table.setItem(i, 3, status_item)

    def _do_execute(self):
        """Execute scheduled actions"""
        if not self.plan or not self.actions:
            return

        message = f"Are you sure you want to execute {len(self.plan.changes)} operations?"
        if self.plan.warnings:
            message += f"\n\n{len(self.plan.warnings)} existing destination(s) will be overwritten."
        message += "\n\n" + "\n".join(render_actions(self.actions)[:15])
        message += "\n\nThis action cannot be undone!"

        reply = QMessageBox.question(
            self, "Confirm", message,
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
        )
        if reply != QMessageBox.StandardButton.Yes:
            return

        self.execute_btn.setEnabled(False)
        self.execute_btn.setText("Executing...")
        self.preview_btn.setEnabled(False)
        self.load_btn.setEnabled(False)
        self.progress_bar.setVisible(True)
        self.progress_bar.setRange(0, len(self.actions))

        self.execute_worker = ExecuteWorker(self.actions)
        self.execute_worker.progress.connect(self._on_execute_progress)
        self.execute_worker.finished.connect(self._on_execute_finished)
        self.execute_worker.start()

    @Slot(int, int, str)
    def _on_execute_progress(self, current: int, total: int, msg: str):
        """Execution progress update"""
        self.progress_bar.setValue(current)
        self.status_label.setText(msg)

    @Slot(object)
    def _on_execute_finished(self, result: ExecutionResult):
        """Execution complete"""
        self.execute_btn.setText("Execute")
        self.load_btn.setEnabled(True)
        self.progress_bar.setVisible(False)

        if result.ok:
            QMessageBox.information(self, "Complete", f"Processed total {result.processed_count}")
        else:
            QMessageBox.critical(self, "Failed", result.summary())

        # The catalog no longer matches the filesystem
        self.catalog = None
        self.plan = None
        self.actions = None
        self.table.setRowCount(0)
        self.listing_edit.clear()
        self.status_label.setText("Complete, load again to continue")


class MainWindow(QMainWindow):
    """Main window"""

    def __init__(self, initial_paths: Optional[List[str]] = None):
        super().__init__()
        self.setWindowTitle("listmove")
        self.setMinimumSize(900, 600)

        self.panel = ListingPanel(initial_paths)
        self.setCentralWidget(self.panel)

        # Status bar
        self.statusBar().showMessage("Ready")
