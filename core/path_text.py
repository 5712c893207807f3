"""
path_text.py - Path Text Tools

Lexical path handling shared by the catalog, codec and reconciler.
Nothing here touches the filesystem except is_hidden().
"""

from pathlib import Path
from typing import Tuple
import os
import stat

from .errors import EncodingError


SEPARATORS = tuple(s for s in (os.sep, os.altsep) if s)


def to_native(text: str) -> str:
    """Convert forward slashes to the platform separator"""
    if os.altsep:
        return text.replace(os.altsep, os.sep)
    return text


def split_trailing_separator(text: str) -> Tuple[str, bool]:
    """
    Trim trailing path separators

    Args:
        text: Path text

    Returns:
        (trimmed text, whether a separator was trimmed)
    """
    trimmed = text.rstrip("".join(SEPARATORS))
    if not trimmed:
        # Root stays root
        return text[:1], len(text) > 1
    return trimmed, trimmed != text


def trim_trailing_separators(text: str) -> str:
    return split_trailing_separator(text)[0]


def normalize(text: str) -> str:
    """Lexically normalize path text ('..', '.', doubled separators)"""
    if not text:
        return text
    return os.path.normpath(to_native(text))


def absolute(path, base_dir: Path) -> Path:
    """Absolute, lexically normalized path (symlinks are not resolved)"""
    p = Path(path)
    if not p.is_absolute():
        p = Path(base_dir) / p
    return Path(os.path.normpath(str(p)))


def is_within(path: Path, ancestor: Path) -> bool:
    """Whether path lies strictly inside ancestor"""
    return path != ancestor and ancestor in path.parents


def ensure_utf8(text: str) -> str:
    """Raise EncodingError if text cannot be encoded as UTF-8"""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodingError(text.encode("utf-8", "backslashreplace").decode("utf-8")) from e
    return text


def is_hidden(path: Path) -> bool:
    """Hidden entry check (dot prefix, or hidden attribute on Windows)"""
    if os.name == "nt":
        attrs = getattr(os.lstat(path), "st_file_attributes", 0)
        return bool(attrs & stat.FILE_ATTRIBUTE_HIDDEN)
    return Path(path).name.startswith(".")
