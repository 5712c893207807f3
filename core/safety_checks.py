"""
safety_checks.py - Safety Check Module

Per-operation destination checks used by the reconciler
"""

from pathlib import Path
from typing import Tuple, Optional, Iterable
import os

from .models_fs import Operation, EntryKind
from .path_text import is_within


def check_file_name(op: Operation) -> Tuple[bool, Optional[str]]:
    """
    Check that a file is not moved onto a bare directory path

    Args:
        op: Move/copy operation

    Returns:
        (is_valid, error_reason)
    """
    if op.record.trailing_separator and op.entry.kind is EntryKind.FILE:
        return False, f"Missing file name: {op.record.raw_text}{os.sep} for {op.entry.original_path}"
    return True, None


def check_not_inside_source(op: Operation) -> Tuple[bool, Optional[str]]:
    """
    Check that a directory is not moved into itself

    Args:
        op: Move/copy operation

    Returns:
        (is_valid, error_reason)
    """
    if op.target is not None and is_within(op.target, op.source):
        return False, (
            f"Destination should not be included in source. "
            f"Source: {op.entry.original_path} Destination: {op.target_text}"
        )
    return True, None


def find_enclosing(target: Path, candidates: Iterable[Path]) -> Optional[Path]:
    """
    Find a candidate path that strictly contains target

    Args:
        target: Path to check
        candidates: Possible ancestors

    Returns:
        First enclosing candidate, or None
    """
    ancestors = set(target.parents)
    for candidate in candidates:
        if candidate != target and candidate in ancestors:
            return candidate
    return None
