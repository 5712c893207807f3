"""
core - listmove Core Module

Provides catalog building, listing encode/decode, reconciliation,
action scheduling, execution and the edit/validate/execute loop.
"""

from .errors import (
    ListMoveError,
    ScanError,
    EncodingError,
    ReconciliationError,
    LineCountMismatch,
    UnresolvableTargetPath,
    CollisionDetected,
    EditorError,
)

from .models_fs import (
    Entry,
    EntryKind,
    Catalog,
    LineRecord,
    Operation,
    OpKind,
    Collision,
    CollisionKind,
    Plan,
    MoveOptions,
)

from .scan_files import (
    build_catalog,
    expand_patterns,
)

from .sort_rules import (
    natural_key,
    sort_naturally,
    sort_entries,
)

from .listing_codec import (
    DELETION_MARKER,
    encode,
    decode,
)

from .reconcile import (
    reconcile,
    classify,
    detect_collisions,
)

from .plan_actions import (
    Action,
    ActionKind,
    schedule_plan,
    render_actions,
)

from .fs_ops import (
    FileSystem,
    LocalFileSystem,
)

from .exec_plan import (
    execute_actions,
    ExecutionResult,
)

from .editor_launch import (
    EditorLauncher,
    ExternalEditor,
    find_editor,
)

from .controller import (
    RunController,
    RunOutcome,
    RunState,
    Decision,
    Prompter,
    Reporter,
)

__all__ = [
    # Errors
    "ListMoveError",
    "ScanError",
    "EncodingError",
    "ReconciliationError",
    "LineCountMismatch",
    "UnresolvableTargetPath",
    "CollisionDetected",
    "EditorError",

    # Data models
    "Entry",
    "EntryKind",
    "Catalog",
    "LineRecord",
    "Operation",
    "OpKind",
    "Collision",
    "CollisionKind",
    "Plan",
    "MoveOptions",

    # Catalog
    "build_catalog",
    "expand_patterns",

    # Sorting
    "natural_key",
    "sort_naturally",
    "sort_entries",

    # Listing codec
    "DELETION_MARKER",
    "encode",
    "decode",

    # Reconciliation
    "reconcile",
    "classify",
    "detect_collisions",

    # Scheduling
    "Action",
    "ActionKind",
    "schedule_plan",
    "render_actions",

    # Execution
    "FileSystem",
    "LocalFileSystem",
    "execute_actions",
    "ExecutionResult",

    # Run loop
    "EditorLauncher",
    "ExternalEditor",
    "find_editor",
    "RunController",
    "RunOutcome",
    "RunState",
    "Decision",
    "Prompter",
    "Reporter",
]
