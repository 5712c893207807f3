"""
errors.py - Exception Hierarchy

All errors raised by the core derive from ListMoveError so front-ends can
catch them in one place.
"""

from typing import List, Sequence


class ListMoveError(Exception):
    """Base exception for listmove."""

    pass


class ScanError(ListMoveError):
    """Building the entry catalog failed"""

    pass


class EncodingError(ListMoveError):
    """A path cannot be represented as UTF-8 text"""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Failed to convert path to UTF-8: {path}")


class ReconciliationError(ListMoveError):
    """The edited listing cannot be turned into a plan"""

    pass


class LineCountMismatch(ReconciliationError):
    """Edited listing has a different number of lines than the catalog"""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Number of lines {actual} does not match the original one {expected}"
        )


class UnresolvableTargetPath(ReconciliationError):
    """An edited line does not name a usable destination"""

    def __init__(self, line_number: int, text: str, reason: str = "empty resulting path"):
        self.line_number = line_number
        self.text = text
        self.reason = reason
        super().__init__(f"Line {line_number}: cannot resolve destination {text!r} ({reason})")


class CollisionDetected(ReconciliationError):
    """The plan contains fatal collisions"""

    def __init__(self, collisions: Sequence):
        self.collisions: List = list(collisions)
        lines = [f"{len(self.collisions)} collision(s) detected:"]
        lines.extend(f"  - {c.message}" for c in self.collisions)
        super().__init__("\n".join(lines))


class EditorError(ListMoveError):
    """The external editor could not be started"""

    pass
