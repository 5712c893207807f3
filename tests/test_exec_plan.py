from core import (
    ActionKind, LocalFileSystem, decode, execute_actions, reconcile, schedule_plan,
)
from core.plan_actions import Action


def run(make_catalog, paths, edited, **overrides):
    catalog, options = make_catalog(*paths, **overrides)
    plan = reconcile(catalog, decode("\n".join(edited)), options)
    return execute_actions(schedule_plan(plan))


def test_rename_file(make_catalog, sandbox):
    result = run(make_catalog, ["1/11/11.txt"], ["1/11/renamed-11.txt"])
    assert result.ok
    assert (sandbox / "1" / "11" / "renamed-11.txt").is_file()
    assert not (sandbox / "1" / "11" / "11.txt").exists()


def test_rename_dir_with_sub_dirs(make_catalog, sandbox):
    result = run(make_catalog, ["2"], ["renamed-2"], directory=True)
    assert result.ok
    assert (sandbox / "renamed-2" / "21" / "211" / "211.txt").is_file()
    assert not (sandbox / "2").exists()


def test_move_and_rename_into_new_directory(make_catalog, sandbox):
    result = run(make_catalog, ["2/21/211/211.txt"], ["1/3/renamed-211.txt"])
    assert result.ok
    assert (sandbox / "1" / "3" / "renamed-211.txt").is_file()
    assert result.processed_count == 1


def test_copy_keeps_source(make_catalog, sandbox):
    result = run(make_catalog, ["1/11", "1/1.txt"], ["copied-11", "1/copied.txt"],
                 directory=True, copy=True)
    assert result.ok
    assert (sandbox / "copied-11" / "11.txt").is_file()
    assert (sandbox / "1" / "11" / "11.txt").is_file()
    assert (sandbox / "1" / "copied.txt").read_text() == "content of 1\n"
    assert (sandbox / "1" / "1.txt").is_file()


def test_delete_file_and_directory(make_catalog, sandbox):
    result = run(make_catalog, ["1/1.txt", "2/21"], ["//", "// gone"], directory=True)
    assert result.ok
    assert not (sandbox / "1" / "1.txt").exists()
    assert not (sandbox / "2" / "21").exists()
    assert (sandbox / "2" / "22").exists()


def test_stops_at_first_failure(sandbox):
    missing = sandbox / "missing.txt"
    actions = [
        Action(kind=ActionKind.MOVE, source=sandbox / "1" / "1.txt", target=sandbox / "1" / "a.txt"),
        Action(kind=ActionKind.MOVE, source=missing, target=sandbox / "1" / "b.txt"),
        Action(kind=ActionKind.MOVE, source=sandbox / "2" / "2.txt", target=sandbox / "2" / "c.txt"),
    ]
    result = execute_actions(actions)
    assert not result.ok
    assert result.completed == actions[:1]
    assert result.failed[0] is actions[1]
    assert "missing.txt" in result.failed[1]
    assert result.not_attempted == actions[2:]
    # No rollback of the completed action, nothing after the failure
    assert (sandbox / "1" / "a.txt").exists()
    assert (sandbox / "2" / "2.txt").exists()
    assert "Not attempted: 1" in result.summary()


def test_move_never_overwrites_without_flag(sandbox):
    fs = LocalFileSystem()
    action = Action(kind=ActionKind.MOVE, source=sandbox / "1" / "1.txt", target=sandbox / "2" / "2.txt")
    result = execute_actions([action], fs)
    assert not result.ok
    assert (sandbox / "2" / "2.txt").read_text() == "content of 2\n"
