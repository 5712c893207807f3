"""
scan_files.py - Catalog Building Module

Expands the positional paths (wildcards included) into the ordered entry
catalog the listing is built from.
"""

from pathlib import Path
from typing import List, Optional, Set
import glob
import logging
import os
import stat

from .errors import ScanError
from .models_fs import Catalog, Entry, EntryKind, MoveOptions
from .path_text import absolute, ensure_utf8, is_hidden, normalize, trim_trailing_separators
from .sort_rules import sort_entries, sort_naturally


logger = logging.getLogger(__name__)


def expand_patterns(patterns: List[str], base_dir: Optional[Path] = None) -> List[str]:
    """
    Expand wildcard patterns into path texts

    Args:
        patterns: Paths or wildcard patterns
        base_dir: Directory relative patterns are resolved against

    Returns:
        Normalized path texts, each pattern's matches ordered by real path
    """
    base_dir = Path(base_dir or Path.cwd())
    paths: List[str] = []
    for pattern in patterns:
        try:
            if os.path.isabs(pattern):
                matched = glob.glob(pattern)
            else:
                matched = glob.glob(pattern, root_dir=str(base_dir))
        except (OSError, ValueError) as e:
            raise ScanError(f"Invalid pattern {pattern}: {e}") from e

        if not matched:
            raise ScanError(f"Failed to access {pattern}")

        matched.sort(key=lambda m: os.path.realpath(absolute(m, base_dir)))
        paths.extend(normalize(m) for m in matched)
    return paths


class CatalogBuilder:
    """Collects entries while enforcing catalog invariants"""

    def __init__(self, options: MoveOptions):
        self.options = options
        self.base_dir = Path(options.base_dir)
        self.entries: List[Entry] = []
        self._seen: Set[Path] = set()

    def add(self, path_text: str) -> bool:
        """
        Add one path to the catalog

        Args:
            path_text: Path as listed

        Returns:
            Whether the entry was added (False when filtered out)
        """
        abs_path = absolute(path_text, self.base_dir)
        if abs_path.parent == abs_path:
            raise ScanError(f"Source should not be the root directory: {path_text}")

        if not self.options.with_hidden and is_hidden(abs_path):
            logger.debug("Skipping hidden entry %s", abs_path)
            return False

        text = str(abs_path) if self.options.absolute else path_text
        text = ensure_utf8(trim_trailing_separators(text))

        pattern = self.options.exclude_pattern
        if pattern is not None and pattern.search(text):
            logger.debug("Excluding %s", text)
            return False

        if abs_path in self._seen:
            raise ScanError(f"Duplicated source: {abs_path}")

        try:
            st = os.lstat(abs_path)
        except OSError as e:
            raise ScanError(f"Failed to access {path_text}: {e}") from e

        kind = EntryKind.DIRECTORY if stat.S_ISDIR(st.st_mode) else EntryKind.FILE
        self._seen.add(abs_path)
        self.entries.append(Entry(index=len(self.entries), original_path=text,
                                  kind=kind, abs_path=abs_path))
        return True

    def add_children(self, path_text: str) -> int:
        """Add the contents of a directory, naturally sorted by name"""
        directory = absolute(path_text, self.base_dir)
        try:
            names = os.listdir(directory)
        except OSError as e:
            raise ScanError(f"Failed to list files of directory {path_text}: {e}") from e

        added = 0
        for name in sort_naturally(names):
            child = name if path_text in (".", "") else os.path.join(path_text, name)
            if self.add(child):
                added += 1
        return added

    def build(self) -> Catalog:
        entries = self.entries
        if self.options.sort:
            entries = sort_entries(entries)
        reindexed = tuple(
            Entry(index=i, original_path=e.original_path, kind=e.kind, abs_path=e.abs_path)
            for i, e in enumerate(entries)
        )
        return Catalog(entries=reindexed, base_dir=self.base_dir)


def build_catalog(options: MoveOptions) -> Catalog:
    """
    Build the entry catalog from run options

    Args:
        options: Run options (paths, hidden/exclude filters, sort, ...)

    Returns:
        Immutable catalog

    Raises:
        ScanError: Path missing, root directory, duplicate or empty directory
        EncodingError: Path not representable as UTF-8
    """
    builder = CatalogBuilder(options)
    patterns = options.paths or ["."]

    for path_text in expand_patterns(patterns, options.base_dir):
        path_text = trim_trailing_separators(path_text)
        abs_path = absolute(path_text, options.base_dir)
        try:
            st = os.lstat(abs_path)
        except OSError as e:
            raise ScanError(f"Failed to access {path_text}: {e}") from e

        if options.directory or not stat.S_ISDIR(st.st_mode):
            builder.add(path_text)
            continue

        if builder.add_children(path_text) == 0:
            raise ScanError(
                f"Directory is empty: {path_text}\n"
                f"Use --directory for the directory itself."
            )

    catalog = builder.build()
    logger.debug("Catalog built with %d entries", len(catalog))
    return catalog
