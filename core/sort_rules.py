"""
sort_rules.py - Sorting Rules Module

Natural ordering for listings: digit runs compare numerically,
so "file2" sorts before "file10".
"""

from typing import List, Callable, Tuple, Union
import re

from .models_fs import Entry


_CHUNK_RE = re.compile(r"(\d+)")


def natural_key(text: str) -> Tuple[Tuple[int, Union[int, str]], ...]:
    """
    Get natural sort key for text

    Args:
        text: Text to sort

    Returns:
        Key tuple (numbers before text at the same position)
    """
    key = []
    for chunk in _CHUNK_RE.split(text):
        if not chunk:
            continue
        if chunk.isdigit():
            key.append((0, int(chunk)))
        else:
            key.append((1, chunk.casefold()))
    # Exact text breaks ties between e.g. "a" and "A"
    key.append((2, text))
    return tuple(key)


def sort_naturally(items: List[str], reverse: bool = False) -> List[str]:
    """Sort strings in natural order (new list)"""
    return sorted(items, key=natural_key, reverse=reverse)


def get_sort_key() -> Callable[[Entry], tuple]:
    """Sort key function for catalog entries"""
    return lambda e: natural_key(e.original_path)


def sort_entries(entries: List[Entry], reverse: bool = False) -> List[Entry]:
    """
    Sort entries by display text in natural order

    Args:
        entries: Entry list
        reverse: Whether to sort in reverse

    Returns:
        Sorted entry list (new list, indices untouched)
    """
    return sorted(entries, key=get_sort_key(), reverse=reverse)
