"""
plan_actions.py - Action Scheduling Module

Turns a valid plan into an ordered list of filesystem actions:
1. Create missing destination directories
2. Moves and copies (chains tail first, cycles broken via a temporary name)
3. Deletions, deepest first
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional
import logging
import uuid

from .fs_ops import FileSystem, LocalFileSystem
from .models_fs import Operation, OpKind, Plan, CollisionKind


logger = logging.getLogger(__name__)

TEMP_PREFIX = ".__tmp_listmove__"


class ActionKind(Enum):
    """Scheduled action kind"""
    CREATE_DIR = "mkdir"
    STAGE = "stage"
    MOVE = "move"
    COPY = "copy"
    DELETE = "delete"


@dataclass(frozen=True)
class Action:
    """Single filesystem action"""
    kind: ActionKind
    target: Path
    source: Optional[Path] = None
    overwrite: bool = False
    operation: Optional[Operation] = None

    @property
    def source_text(self) -> str:
        if self.operation is not None and self.source == self.operation.source:
            return self.operation.entry.original_path
        return str(self.source)

    @property
    def target_text(self) -> str:
        if self.operation is not None and self.kind in (ActionKind.MOVE, ActionKind.COPY):
            return self.operation.target_text
        if self.operation is not None and self.kind is ActionKind.DELETE:
            return self.operation.entry.original_path
        return str(self.target)

    def describe(self) -> str:
        """Dry-run rendering"""
        if self.kind is ActionKind.CREATE_DIR:
            return f"MKDIR {self.target_text}"
        if self.kind is ActionKind.DELETE:
            return f"DELETE {self.target_text}"
        if self.kind is ActionKind.STAGE:
            return f"STAGE {self.source_text} -> {self.target_text}"
        prefix = "COPY " if self.kind is ActionKind.COPY else ""
        suffix = " (overwrite)" if self.overwrite else ""
        return f"{prefix}{self.source_text} -> {self.target_text}{suffix}"


def generate_temp_name(original: Path) -> Path:
    """Generate temporary name next to the original"""
    unique_id = uuid.uuid4().hex[:8]
    return original.parent / f"{TEMP_PREFIX}{unique_id}__{original.name}"


def is_temp_name(name: str) -> bool:
    """Check if it's a temporary filename"""
    return name.startswith(TEMP_PREFIX)


def _missing_directories(transfers: List[Operation], fs: FileSystem) -> List[Path]:
    """Parent directories of targets that do not exist yet"""
    needed = set()
    for op in transfers:
        for parent in op.target.parents:
            if fs.is_dir(parent):
                break
            needed.add(parent)
    # makedirs creates intermediate levels, keep only the deepest ones
    leaves = [d for d in needed if not any(other != d and d in other.parents for other in needed)]
    return sorted(leaves, key=lambda p: (len(p.parts), str(p)))


def _order_transfers(transfers: List[Operation], overwrite_targets: set) -> List[Action]:
    """
    Order moves/copies so no target is written while another pending
    move still has to read it

    Args:
        transfers: Move/copy operations in catalog order
        overwrite_targets: Targets confirmed to be overwritten

    Returns:
        Actions including STAGE steps for cycles and case-only renames
    """
    actions: List[Action] = []
    current_source: Dict[int, Path] = {}
    owner: Dict[Path, Operation] = {op.source: op for op in transfers if op.kind is OpKind.MOVE}
    pending = list(transfers)

    def stage(op: Operation) -> None:
        temp = generate_temp_name(op.source)
        actions.append(Action(kind=ActionKind.STAGE, source=op.source, target=temp, operation=op))
        current_source[op.entry.index] = temp
        owner.pop(op.source, None)

    def emit(op: Operation) -> None:
        kind = ActionKind.COPY if op.kind is OpKind.COPY else ActionKind.MOVE
        actions.append(Action(
            kind=kind,
            source=current_source.get(op.entry.index, op.source),
            target=op.target,
            overwrite=op.target in overwrite_targets,
            operation=op,
        ))
        if owner.get(op.source) is op:
            del owner[op.source]

    for op in pending:
        if op.kind is OpKind.MOVE and op.is_case_only_change:
            stage(op)

    while pending:
        progressed = False
        for op in list(pending):
            blocker = owner.get(op.target)
            if blocker is None or blocker is op:
                emit(op)
                pending.remove(op)
                progressed = True
        if not progressed:
            # Every pending op waits on another one: a cycle
            head = pending[0]
            logger.debug("Breaking move cycle at %s", head.entry.original_path)
            stage(head)
    return actions


def schedule_plan(plan: Plan, fs: Optional[FileSystem] = None) -> List[Action]:
    """
    Order a valid plan's operations for execution

    Args:
        plan: Reconciled plan
        fs: Filesystem for directory existence checks

    Returns:
        Ordered actions

    Raises:
        CollisionDetected: The plan has fatal collisions
    """
    plan.raise_for_collisions()
    fs = fs or LocalFileSystem()

    transfers = [op for op in plan.operations if op.is_transfer]
    deletions = [op for op in plan.operations if op.kind is OpKind.DELETE]
    overwrite_targets = {
        c.target for c in plan.collisions if c.kind is CollisionKind.DESTINATION_EXISTS
    }

    actions = [Action(kind=ActionKind.CREATE_DIR, target=d) for d in _missing_directories(transfers, fs)]
    actions.extend(_order_transfers(transfers, overwrite_targets))

    # Deepest first so directory contents go before the directory
    for op in sorted(deletions, key=lambda o: -len(o.source.parts)):
        actions.append(Action(kind=ActionKind.DELETE, target=op.source, operation=op))

    logger.debug("Scheduled %d actions for %d changes", len(actions), len(plan.changes))
    return actions


def render_actions(actions: List[Action]) -> List[str]:
    """Render actions as dry-run lines"""
    return [action.describe() for action in actions]
