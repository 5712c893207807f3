import sys

import pytest

from core import EditorError, ExternalEditor, find_editor
from core import editor_launch


def test_visual_takes_precedence():
    assert find_editor({"VISUAL": "code -w", "EDITOR": "vim"}) == ["code", "-w"]


def test_editor_variable_is_shell_split():
    assert find_editor({"EDITOR": "'my editor' --wait"}) == ["my editor", "--wait"]


def test_blank_variables_ignored(monkeypatch):
    monkeypatch.setattr(editor_launch.shutil, "which", lambda name: "/usr/bin/" + name if name == "vim" else None)
    monkeypatch.setattr(editor_launch, "EDITOR_CANDIDATES", ["nano", "vim"])
    assert find_editor({"VISUAL": "  ", "EDITOR": ""}) == ["vim"]


def test_no_editor_found(monkeypatch):
    monkeypatch.setattr(editor_launch.shutil, "which", lambda name: None)
    monkeypatch.setattr(editor_launch.sys, "platform", "linux")
    with pytest.raises(EditorError):
        find_editor({})


def test_platform_opener_on_macos(monkeypatch):
    monkeypatch.setattr(editor_launch.shutil, "which", lambda name: None)
    monkeypatch.setattr(editor_launch.sys, "platform", "darwin")
    assert find_editor({}) == ["open", "-W", "-n", "-t"]


def python_editor(code):
    return [sys.executable, "-c", code]


def test_external_editor_returns_edited_text():
    script = (
        "import sys, pathlib; p = pathlib.Path(sys.argv[1]); "
        "p.write_text(p.read_text(encoding='utf-8').upper(), encoding='utf-8')"
    )
    assert ExternalEditor(python_editor(script)).edit("a.txt\nb/\n") == "A.TXT\nB/\n"


def test_external_editor_failure_is_cancel():
    assert ExternalEditor(python_editor("raise SystemExit(1)")).edit("a.txt") is None


def test_external_editor_invalid_utf8():
    script = "import sys; open(sys.argv[1], 'wb').write(b'\\xff\\xfe')"
    with pytest.raises(EditorError):
        ExternalEditor(python_editor(script)).edit("a.txt")


def test_missing_editor_binary():
    with pytest.raises(EditorError):
        ExternalEditor(["definitely-not-an-editor-binary"]).edit("a.txt")
