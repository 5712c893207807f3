"""
exec_plan.py - Plan Execution Module

Responsibilities:
- Apply scheduled actions one at a time
- Stop at the first failure (no rollback)
- Report completed / failed / not attempted actions
"""

from typing import List, Tuple, Optional, Callable
from dataclasses import dataclass, field
import logging

from .fs_ops import FileSystem, LocalFileSystem
from .plan_actions import Action, ActionKind


logger = logging.getLogger(__name__)


@dataclass
class ExecutionResult:
    """Execution result"""
    completed: List[Action] = field(default_factory=list)
    failed: Optional[Tuple[Action, str]] = None     # (action, error_msg)
    not_attempted: List[Action] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failed is None

    @property
    def processed_count(self) -> int:
        """Completed moves, copies and deletions (directories and staging excluded)"""
        return sum(1 for a in self.completed
                   if a.kind in (ActionKind.MOVE, ActionKind.COPY, ActionKind.DELETE))

    def summary(self) -> str:
        """Generate summary"""
        lines = [
            f"Execution Result:",
            f"  - Completed: {len(self.completed)}",
            f"  - Failed: {0 if self.ok else 1}",
            f"  - Not attempted: {len(self.not_attempted)}",
        ]
        if self.failed is not None:
            action, error = self.failed
            lines.append("Failure Details:")
            lines.append(f"  - {action.describe()}: {error}")
        if self.not_attempted:
            lines.append("Not Attempted:")
            for action in self.not_attempted[:10]:  # Show at most 10
                lines.append(f"  - {action.describe()}")
            if len(self.not_attempted) > 10:
                lines.append(f"  ... and {len(self.not_attempted) - 10} more actions")
        return "\n".join(lines)


def apply_action(action: Action, fs: FileSystem) -> None:
    """Apply a single action"""
    if action.kind is ActionKind.CREATE_DIR:
        fs.make_dirs(action.target)
    elif action.kind in (ActionKind.STAGE, ActionKind.MOVE):
        fs.move(action.source, action.target, overwrite=action.overwrite)
    elif action.kind is ActionKind.COPY:
        fs.copy(action.source, action.target, overwrite=action.overwrite)
    elif action.kind is ActionKind.DELETE:
        fs.remove(action.target)
    else:
        raise ValueError(f"Unknown action: {action.kind}")


def execute_actions(
    actions: List[Action],
    fs: Optional[FileSystem] = None,
    progress_callback: Optional[Callable[[int, int, Action], None]] = None
) -> ExecutionResult:
    """
    Execute scheduled actions in order, fail-fast

    Args:
        actions: Actions from schedule_plan()
        fs: Filesystem implementation
        progress_callback: Called after each completed action (current, total, action)

    Returns:
        Execution result
    """
    fs = fs or LocalFileSystem()
    result = ExecutionResult()
    total = len(actions)

    for i, action in enumerate(actions):
        logger.debug("Executing %s", action.describe())
        try:
            apply_action(action, fs)
        except OSError as e:
            message = str(e)
            logger.error("Failed to %s: %s", action.describe(), message)
            result.failed = (action, message)
            result.not_attempted = list(actions[i + 1:])
            break

        result.completed.append(action)
        if progress_callback:
            progress_callback(i + 1, total, action)

    return result
