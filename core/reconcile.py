"""
reconcile.py - Listing Reconciliation Module

Responsibilities:
- Pair catalog entries with edited lines by position
- Classify each pair (noop / move / copy / delete)
- Detect destination collisions over the whole set
- Output Plan
"""

from pathlib import Path
from typing import List, Dict, Optional, Sequence, Set
from collections import defaultdict
import logging
import os

from .errors import LineCountMismatch, UnresolvableTargetPath
from .fs_ops import FileSystem, LocalFileSystem
from .models_fs import (
    Catalog, Entry, LineRecord, MoveOptions, Operation, OpKind,
    Collision, CollisionKind, Plan,
)
from .path_text import absolute, normalize, to_native
from .safety_checks import check_file_name, check_not_inside_source, find_enclosing


logger = logging.getLogger(__name__)


def resolve_target(record: LineRecord, base_dir: Path) -> Path:
    """
    Resolve an edited line to an absolute destination

    Args:
        record: Unmarked line record
        base_dir: Directory relative lines are resolved against

    Returns:
        Lexically normalized absolute path

    Raises:
        UnresolvableTargetPath: Empty result, '.', '..' or filesystem root
    """
    text = normalize(record.raw_text)
    if not text or text == os.curdir:
        raise UnresolvableTargetPath(record.line_number, record.raw_text)
    if os.path.basename(text) == os.pardir:
        raise UnresolvableTargetPath(record.line_number, record.raw_text, "ends with a parent reference")

    target = absolute(text, base_dir)
    if target.parent == target:
        raise UnresolvableTargetPath(record.line_number, record.raw_text, "root directory")
    return target


def classify(entry: Entry, record: LineRecord, options: MoveOptions) -> Operation:
    """
    Classify one (entry, line) pairing

    Args:
        entry: Catalog entry
        record: Edited line at the same position
        options: Run options (copy mode, base directory)

    Returns:
        Operation
    """
    if record.marked_for_deletion:
        return Operation(kind=OpKind.DELETE, entry=entry, record=record)

    target = resolve_target(record, options.base_dir)
    target_text = to_native(record.raw_text)
    if target == entry.abs_path:
        return Operation(kind=OpKind.NOOP, entry=entry, record=record,
                         target=target, target_text=target_text)

    kind = OpKind.COPY if options.copy else OpKind.MOVE
    return Operation(kind=kind, entry=entry, record=record,
                     target=target, target_text=target_text)


class CollisionTracker:
    """Destination bookkeeping for collision detection"""

    def __init__(self, operations: Sequence[Operation]):
        self.operations = list(operations)
        self.transfers = [op for op in self.operations if op.is_transfer]

        # Paths freed by this plan (only moves free their source before deletes run)
        self.vacated: Set[Path] = {op.source for op in self.operations if op.kind is OpKind.MOVE}
        self.deleted: Dict[Path, Operation] = {
            op.source: op for op in self.operations if op.kind is OpKind.DELETE
        }
        # Paths that stay where they are
        self.held: Dict[Path, Operation] = {
            op.source: op for op in self.operations
            if op.kind in (OpKind.NOOP, OpKind.COPY)
        }

        self.by_target: Dict[Path, List[Operation]] = defaultdict(list)
        for op in self.transfers:
            self.by_target[op.target].append(op)

    def duplicates(self) -> List[Collision]:
        collisions = []
        for target, ops in self.by_target.items():
            if len(ops) > 1:
                sources = ", ".join(op.entry.original_path for op in ops)
                collisions.append(Collision(
                    kind=CollisionKind.DUPLICATE_DESTINATION,
                    target=target,
                    operations=tuple(ops),
                    detail=f"Duplicated destination: {ops[0].target_text} (from {sources})",
                ))
        return collisions

    def check(self, op: Operation, fs: FileSystem) -> List[Collision]:
        """Collisions involving a single move/copy"""
        collisions = []

        def add(kind: CollisionKind, detail: str, *others: Operation) -> None:
            collisions.append(Collision(kind=kind, target=op.target,
                                        operations=(op,) + others, detail=detail))

        holder = self.held.get(op.target)
        if holder is not None and holder is not op:
            add(CollisionKind.DUPLICATE_DESTINATION,
                f"Duplicated destination: {op.target_text} is kept by line {holder.record.line_number}",
                holder)

        doomed = self.deleted.get(op.target)
        if doomed is not None:
            add(CollisionKind.DESTINATION_DELETED,
                f"Destination is marked for deletion: {op.target_text}", doomed)

        # Deletions run last and would remove whatever was moved in
        doomed_parent = find_enclosing(op.target, self.deleted)
        if doomed_parent is not None:
            add(CollisionKind.DESTINATION_DELETED,
                f"Destination lies inside a directory marked for deletion: {op.target_text}",
                self.deleted[doomed_parent])

        ok, reason = check_file_name(op)
        if not ok:
            add(CollisionKind.MISSING_FILE_NAME, reason)

        ok, reason = check_not_inside_source(op)
        if not ok:
            add(CollisionKind.DESTINATION_IN_SOURCE, reason)

        enclosing = find_enclosing(op.target, self.by_target)
        if enclosing is not None:
            add(CollisionKind.NESTED_DESTINATION,
                f"Destination should not be included in other destination: {op.target_text}",
                *self.by_target[enclosing])

        moved_parent = find_enclosing(op.target, self.vacated - {op.source})
        if moved_parent is not None:
            add(CollisionKind.NESTED_DESTINATION,
                f"Destination lies inside a directory that is being moved: {op.target_text}")

        if not collisions and self._occupied_on_disk(op, fs):
            add(CollisionKind.DESTINATION_EXISTS, f"Destination exists: {op.target_text}")

        return collisions

    def check_source(self, op: Operation) -> List[Collision]:
        """An entry cannot be acted on once its parent directory has been moved away"""
        parent = find_enclosing(op.source, self.vacated - {op.source})
        if parent is None:
            return []
        movers = tuple(o for o in self.operations
                       if o.kind is OpKind.MOVE and o.source == parent)
        return [Collision(
            kind=CollisionKind.SOURCE_IN_MOVED_DIRECTORY,
            target=op.source,
            operations=(op,) + movers,
            detail=(f"Source lies inside a directory that is being moved: "
                    f"{op.entry.original_path} (in {movers[0].entry.original_path})"),
        )]

    def _occupied_on_disk(self, op: Operation, fs: FileSystem) -> bool:
        if op.target in self.vacated:
            return False
        # Renaming only the case of the entry itself
        if op.kind is OpKind.MOVE and op.is_case_only_change:
            return False
        return fs.exists(op.target)


def detect_collisions(operations: Sequence[Operation], fs: Optional[FileSystem] = None) -> List[Collision]:
    """
    Detect collisions over a classified operation set

    Args:
        operations: Classified operations
        fs: Filesystem used for existence checks (read-only)

    Returns:
        Collision list (fatal and non-fatal)
    """
    fs = fs or LocalFileSystem()
    tracker = CollisionTracker(operations)

    collisions = tracker.duplicates()
    for op in tracker.transfers:
        collisions.extend(tracker.check(op, fs))
    for op in tracker.operations:
        if op.kind is not OpKind.NOOP:
            collisions.extend(tracker.check_source(op))
    return collisions


def reconcile(
    catalog: Catalog,
    records: Sequence[LineRecord],
    options: Optional[MoveOptions] = None,
    fs: Optional[FileSystem] = None,
) -> Plan:
    """
    Reconcile edited lines against the catalog

    Args:
        catalog: Entry catalog
        records: Decoded line records
        options: Run options
        fs: Filesystem for existence checks

    Returns:
        Plan (check plan.valid for fatal collisions)

    Raises:
        LineCountMismatch: Number of lines differs from the catalog
        UnresolvableTargetPath: A line does not name a destination
    """
    if options is None:
        options = MoveOptions(base_dir=catalog.base_dir)

    if len(records) != len(catalog):
        raise LineCountMismatch(expected=len(catalog), actual=len(records))

    operations = tuple(
        classify(entry, record, options)
        for entry, record in zip(catalog, records)
    )
    for op in operations:
        if op.kind is not OpKind.NOOP:
            logger.debug("Line %d: %s", op.record.line_number, op.describe())

    collisions = tuple(detect_collisions(operations, fs))
    for c in collisions:
        logger.debug("Collision (%s): %s", "fatal" if c.fatal else "warning", c.message)

    return Plan(operations=operations, collisions=collisions)
