import os
from pathlib import Path

import pytest

from core import Catalog, Entry, EntryKind, EncodingError, decode, encode


def test_encode_one_line_per_entry_with_directory_cue(make_catalog):
    catalog, _ = make_catalog("1")
    text = encode(catalog)
    assert text.split("\n") == ["1/1.txt", "1/11" + os.sep, "1/12" + os.sep]


def test_round_trip_yields_unmarked_records(make_catalog):
    catalog, _ = make_catalog("1", "2")
    records = decode(encode(catalog))
    assert len(records) == len(catalog)
    for entry, record in zip(catalog, records):
        assert record.index == entry.index
        assert record.raw_text == entry.original_path
        assert not record.marked_for_deletion


def test_blank_lines_are_elided():
    records = decode("a.txt\n\n   \nb.txt\n\t\nc.txt\n")
    assert [r.raw_text for r in records] == ["a.txt", "b.txt", "c.txt"]
    assert [r.index for r in records] == [0, 1, 2]
    assert [r.line_number for r in records] == [1, 4, 6]


def test_deletion_marker_ignores_trailing_text():
    (record,) = decode("// keep-this.txt   (trailing edit)")
    assert record.marked_for_deletion
    assert record.raw_text == " keep-this.txt   (trailing edit)"


def test_deletion_marker_only_checked_at_line_start():
    records = decode("a//b.txt\n///x\n /not-marked")
    assert [r.marked_for_deletion for r in records] == [False, True, False]
    assert records[1].raw_text == "/x"
    assert records[2].raw_text == " /not-marked"


def test_trailing_whitespace_and_separators_trimmed():
    records = decode("dir/  \r\nfile.txt\r\n")
    assert records[0].raw_text == "dir"
    assert records[0].trailing_separator
    assert records[1].raw_text == "file.txt"
    assert not records[1].trailing_separator


def test_encode_rejects_non_utf8_path(tmp_path):
    bad = "bad\udcff.txt"
    entry = Entry(index=0, original_path=bad, kind=EntryKind.FILE, abs_path=tmp_path / "x")
    with pytest.raises(EncodingError):
        encode(Catalog(entries=(entry,), base_dir=tmp_path))


@pytest.mark.parametrize("bad", ["café/\udcff.txt", "日本/\ud800"])
def test_encode_rejects_non_utf8_path_with_other_non_ascii(tmp_path, bad):
    entry = Entry(index=0, original_path=bad, kind=EntryKind.FILE, abs_path=tmp_path / "x")
    with pytest.raises(EncodingError) as excinfo:
        encode(Catalog(entries=(entry,), base_dir=tmp_path))
    assert bad.split("/")[0] in excinfo.value.path
    assert "\\ud" in excinfo.value.path
