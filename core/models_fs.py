"""
models_fs.py - Core Data Structure Definitions

Contains:
- Entry / Catalog: Baseline snapshot of filesystem entries
- LineRecord: One parsed line of the edited listing
- Operation: Classified (entry, line) pairing
- Collision: Problem detected between operations
- Plan: Full reconciliation result
- MoveOptions: Run configuration
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List, Tuple, Iterator, Pattern
from enum import Enum
import os


class EntryKind(Enum):
    """Kind of catalog entry"""
    FILE = "file"                    # Regular file or symlink (never followed)
    DIRECTORY = "directory"


class OpKind(Enum):
    """Operation kind"""
    NOOP = "noop"
    MOVE = "move"
    COPY = "copy"
    DELETE = "delete"


class CollisionKind(Enum):
    """Collision category"""
    DUPLICATE_DESTINATION = "duplicate_destination"      # Same target produced twice
    DESTINATION_DELETED = "destination_deleted"          # Target is an entry marked for deletion
    MISSING_FILE_NAME = "missing_file_name"              # File moved onto a bare directory path
    DESTINATION_IN_SOURCE = "destination_in_source"      # Directory moved inside itself
    NESTED_DESTINATION = "nested_destination"            # Target inside another target or moved directory
    SOURCE_IN_MOVED_DIRECTORY = "source_in_moved_directory"  # Entry inside a directory that is being moved
    DESTINATION_EXISTS = "destination_exists"            # Target already on disk

    @property
    def fatal(self) -> bool:
        """Whether this collision always invalidates the plan"""
        return self is not CollisionKind.DESTINATION_EXISTS


@dataclass(frozen=True)
class Entry:
    """One filesystem object captured at catalog time"""
    index: int                      # Position in catalog (correlation key)
    original_path: str              # Display text, trailing separators trimmed
    kind: EntryKind
    abs_path: Path                  # Lexically normalized absolute path

    @property
    def path(self) -> Path:
        return Path(self.original_path)

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    def display_text(self) -> str:
        """Listing text (directories get a trailing separator)"""
        if self.is_dir and not self.original_path.endswith(os.sep):
            return self.original_path + os.sep
        return self.original_path


@dataclass(frozen=True)
class Catalog:
    """Ordered, immutable set of entries for one run"""
    entries: Tuple[Entry, ...] = ()
    base_dir: Path = field(default_factory=Path.cwd)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> Entry:
        return self.entries[index]


@dataclass(frozen=True)
class LineRecord:
    """One non-blank line of the edited listing"""
    index: int                      # Position after blank-line elision
    raw_text: str                   # Content without deletion marker
    marked_for_deletion: bool = False
    trailing_separator: bool = False  # Unmarked line ended with a path separator
    line_number: int = 0            # 1-based line in the edited text


@dataclass(frozen=True)
class Operation:
    """Classified pairing of an entry with its edited line"""
    kind: OpKind
    entry: Entry
    record: LineRecord
    target: Optional[Path] = None   # Resolved absolute destination (MOVE/COPY/NOOP)
    target_text: str = ""           # Destination as typed, normalized

    @property
    def source(self) -> Path:
        return self.entry.abs_path

    @property
    def is_transfer(self) -> bool:
        """Whether the operation materializes something at target"""
        return self.kind in (OpKind.MOVE, OpKind.COPY)

    @property
    def is_case_only_change(self) -> bool:
        """Whether it's only a case change"""
        if self.target is None:
            return False
        return (self.source.parent == self.target.parent and
                self.source.name.lower() == self.target.name.lower() and
                self.source.name != self.target.name)

    def describe(self) -> str:
        if self.kind is OpKind.DELETE:
            return f"DELETE {self.entry.original_path}"
        if self.kind is OpKind.NOOP:
            return self.entry.original_path
        prefix = "COPY " if self.kind is OpKind.COPY else ""
        return f"{prefix}{self.entry.original_path} -> {self.target_text}"


@dataclass(frozen=True)
class Collision:
    """Collision between plan operations or with the filesystem"""
    kind: CollisionKind
    target: Path
    operations: Tuple[Operation, ...] = ()
    detail: str = ""

    @property
    def fatal(self) -> bool:
        return self.kind.fatal

    @property
    def message(self) -> str:
        return self.detail or f"{self.kind.value}: {self.target}"


@dataclass(frozen=True)
class Plan:
    """Reconciliation result: classified operations plus collisions"""
    operations: Tuple[Operation, ...] = ()
    collisions: Tuple[Collision, ...] = ()

    @property
    def fatal_collisions(self) -> List[Collision]:
        return [c for c in self.collisions if c.fatal]

    @property
    def warnings(self) -> List[Collision]:
        """Non-fatal collisions (destination exists)"""
        return [c for c in self.collisions if not c.fatal]

    @property
    def valid(self) -> bool:
        return not self.fatal_collisions

    @property
    def changes(self) -> List[Operation]:
        """Operations that touch the filesystem"""
        return [op for op in self.operations if op.kind is not OpKind.NOOP]

    @property
    def is_noop(self) -> bool:
        return not self.changes

    def raise_for_collisions(self) -> None:
        """Raise CollisionDetected if the plan has fatal collisions"""
        from .errors import CollisionDetected

        fatal = self.fatal_collisions
        if fatal:
            raise CollisionDetected(fatal)


@dataclass
class MoveOptions:
    """Run configuration, assembled once at startup"""
    paths: List[str] = field(default_factory=list)

    # Catalog options
    sort: bool = False              # Natural-order sort of the whole listing
    absolute: bool = False          # List absolute paths
    directory: bool = False         # Directories themselves, not their contents
    with_hidden: bool = False       # Include hidden files
    exclude_pattern: Optional[Pattern[str]] = None

    # Reconciliation / execution options
    copy: bool = False              # Copy instead of move
    dry_run: bool = False           # Preview only, do not actually execute
    oops: bool = False              # Abort on any collision instead of prompting

    # Output options
    verbose: bool = False
    quiet: bool = False
    interactive: bool = True        # Prompts allowed (attached to a terminal)

    base_dir: Path = field(default_factory=Path.cwd)

    @property
    def may_prompt(self) -> bool:
        return self.interactive and not self.quiet and not self.oops
