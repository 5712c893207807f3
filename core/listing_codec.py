"""
listing_codec.py - Listing Text Codec

Converts the catalog to editable text and parses edited text back into
line records. Pure text transforms.
"""

from typing import List

from .models_fs import Catalog, LineRecord
from .path_text import ensure_utf8, split_trailing_separator


DELETION_MARKER = "//"


def encode(catalog: Catalog) -> str:
    """
    Render the catalog as editable text

    Args:
        catalog: Entry catalog

    Returns:
        One line per entry in catalog order, no header, no blank lines

    Raises:
        EncodingError: An entry path is not valid UTF-8
    """
    return "\n".join(ensure_utf8(entry.display_text()) for entry in catalog)


def decode(text: str) -> List[LineRecord]:
    """
    Parse edited text into line records

    Blank lines are elided before indexing. A line starting with the
    deletion marker is marked for deletion whatever follows it.

    Args:
        text: Edited listing text

    Returns:
        Line records in order of appearance
    """
    records: List[LineRecord] = []
    for line_number, line in enumerate(text.split("\n"), start=1):
        line = line.rstrip()
        if not line:
            continue

        if line.startswith(DELETION_MARKER):
            records.append(LineRecord(
                index=len(records),
                raw_text=line[len(DELETION_MARKER):],
                marked_for_deletion=True,
                line_number=line_number,
            ))
            continue

        raw_text, trailing = split_trailing_separator(line)
        records.append(LineRecord(
            index=len(records),
            raw_text=raw_text,
            trailing_separator=trailing,
            line_number=line_number,
        ))
    return records
