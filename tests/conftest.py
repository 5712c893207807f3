import os

import pytest

from core import MoveOptions, build_catalog


TREE_DIRS = ["1", "1/11", "1/12", "2", "2/21", "2/21/211", "2/22"]


@pytest.fixture
def sandbox(tmp_path, monkeypatch):
    """
    Create the following tree and chdir into it::

        1/
        ├─1.txt
        ├─11/11.txt
        └─12/12.txt
        2/
        ├─2.txt
        ├─21/21.txt
        ├─21/211/211.txt
        └─22/22.txt
    """
    for d in TREE_DIRS:
        directory = tmp_path / d
        directory.mkdir(parents=True, exist_ok=True)
        name = os.path.basename(d)
        (directory / f"{name}.txt").write_text(f"content of {name}\n")
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def make_catalog(sandbox):
    def _make(*paths, **overrides):
        options = MoveOptions(paths=list(paths), base_dir=sandbox, **overrides)
        return build_catalog(options), options
    return _make
