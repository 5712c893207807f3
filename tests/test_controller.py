import pytest

from core import (
    CollisionDetected, CollisionKind, Decision, EditorLauncher, LineCountMismatch,
    LocalFileSystem, Prompter, Reporter, RunController, RunState, encode,
    render_actions,
)


class ScriptedEditor(EditorLauncher):
    """Returns prepared edits in order, recording what it was shown"""

    def __init__(self, *edits):
        self.edits = list(edits)
        self.shown = []

    def edit(self, text):
        self.shown.append(text)
        edit = self.edits.pop(0)
        return edit(text) if callable(edit) else edit


class ScriptedPrompter(Prompter):
    def __init__(self, redo=(), proceed=()):
        self.redo = list(redo)
        self.proceed = list(proceed)
        self.asked = []

    def ask_redo(self, message):
        self.asked.append(message)
        return self.redo.pop(0)

    def ask_proceed(self, collisions):
        self.asked.append(collisions)
        return self.proceed.pop(0)


class RecordingReporter(Reporter):
    def __init__(self):
        self.errors = []
        self.reported = []
        self.dry_run_lines = None
        self.done = []

    def error(self, message):
        self.errors.append(message)

    def collisions(self, collisions):
        self.reported.extend(collisions)

    def dry_run(self, lines):
        self.dry_run_lines = lines

    def action_done(self, action):
        self.done.append(action)


class FailingFileSystem(LocalFileSystem):
    def __init__(self, fail_on):
        self.fail_on = fail_on

    def move(self, src, dst, overwrite=False):
        if dst.name == self.fail_on:
            raise PermissionError(f"Permission denied: {dst}")
        super().move(src, dst, overwrite)


def controller(make_catalog, paths, editor, prompter=None, reporter=None, fs=None, **overrides):
    catalog, options = make_catalog(*paths, **overrides)
    return RunController(catalog, options, editor, prompter=prompter,
                         reporter=reporter or RecordingReporter(), fs=fs)


def test_empty_catalog_skips_editor(sandbox):
    from core import Catalog, MoveOptions
    editor = ScriptedEditor()
    outcome = RunController(Catalog(entries=(), base_dir=sandbox), MoveOptions(), editor).run()
    assert outcome.state is RunState.DONE
    assert editor.shown == []


def test_editor_cancel_aborts(make_catalog, sandbox):
    outcome = controller(make_catalog, ["1/1.txt"], ScriptedEditor(None)).run()
    assert outcome.state is RunState.ABORTED
    assert outcome.user_aborted
    assert outcome.exit_code == 0
    assert (sandbox / "1" / "1.txt").exists()


def test_unchanged_listing_aborts(make_catalog):
    editor = ScriptedEditor(lambda text: text)
    outcome = controller(make_catalog, ["1/1.txt"], editor).run()
    assert outcome.state is RunState.ABORTED
    assert outcome.exit_code == 0


def test_successful_run(make_catalog, sandbox):
    reporter = RecordingReporter()
    outcome = controller(make_catalog, ["1/1.txt", "2/2.txt"],
                         ScriptedEditor("1/a.txt\n2/b.txt\n"), reporter=reporter).run()
    assert outcome.state is RunState.DONE
    assert outcome.processed == 2
    assert outcome.exit_code == 0
    assert len(reporter.done) == 2
    assert (sandbox / "1" / "a.txt").exists()
    assert (sandbox / "2" / "b.txt").exists()


def test_redo_presents_the_failed_text(make_catalog, sandbox):
    broken = "1/a.txt\n"
    editor = ScriptedEditor(broken, "1/a.txt\n2/b.txt\n")
    prompter = ScriptedPrompter(redo=[True])
    reporter = RecordingReporter()
    outcome = controller(make_catalog, ["1/1.txt", "2/2.txt"], editor,
                         prompter=prompter, reporter=reporter).run()
    assert outcome.state is RunState.DONE
    assert editor.shown[1] == broken
    assert "does not match" in reporter.errors[0]


def test_abort_after_validation_failure_exits_nonzero(make_catalog, sandbox):
    prompter = ScriptedPrompter(redo=[False])
    outcome = controller(make_catalog, ["1/1.txt", "2/2.txt"], ScriptedEditor("1/a.txt\n"),
                         prompter=prompter).run()
    assert outcome.state is RunState.ABORTED
    assert isinstance(outcome.error, LineCountMismatch)
    assert outcome.exit_code == 2
    assert (sandbox / "1" / "1.txt").exists()


def test_oops_aborts_without_prompting(make_catalog, sandbox):
    prompter = ScriptedPrompter()
    outcome = controller(make_catalog, ["1/1.txt", "2/2.txt"], ScriptedEditor("x.txt\nx.txt\n"),
                         prompter=prompter, oops=True).run()
    assert outcome.state is RunState.ABORTED
    assert isinstance(outcome.error, CollisionDetected)
    assert outcome.exit_code == 2
    assert prompter.asked == []
    assert not (sandbox / "x.txt").exists()


def test_non_interactive_aborts_on_error(make_catalog):
    outcome = controller(make_catalog, ["1/1.txt", "2/2.txt"], ScriptedEditor("x.txt\nx.txt\n"),
                         prompter=ScriptedPrompter(), interactive=False).run()
    assert outcome.state is RunState.ABORTED
    assert outcome.exit_code == 2


def test_duplicate_destination_reported(make_catalog, sandbox):
    reporter = RecordingReporter()
    outcome = controller(make_catalog, ["1/1.txt", "2/2.txt"], ScriptedEditor("x.txt\nx.txt\n"),
                         prompter=ScriptedPrompter(redo=[False]), reporter=reporter).run()
    assert [c.kind for c in reporter.reported] == [CollisionKind.DUPLICATE_DESTINATION]
    assert outcome.state is RunState.ABORTED
    assert (sandbox / "1" / "1.txt").exists()
    assert (sandbox / "2" / "2.txt").exists()


def test_existing_destination_proceed_overwrites(make_catalog, sandbox):
    prompter = ScriptedPrompter(proceed=[Decision.PROCEED])
    outcome = controller(make_catalog, ["1/1.txt"], ScriptedEditor("2/2.txt\n"),
                         prompter=prompter).run()
    assert outcome.state is RunState.DONE
    assert (sandbox / "2" / "2.txt").read_text() == "content of 1\n"


def test_existing_destination_abort(make_catalog, sandbox):
    prompter = ScriptedPrompter(proceed=[Decision.ABORT])
    outcome = controller(make_catalog, ["1/1.txt"], ScriptedEditor("2/2.txt\n"),
                         prompter=prompter).run()
    assert outcome.state is RunState.ABORTED
    assert outcome.exit_code == 0
    assert (sandbox / "2" / "2.txt").read_text() == "content of 2\n"


def test_existing_destination_edit_again(make_catalog, sandbox):
    prompter = ScriptedPrompter(proceed=[Decision.EDIT])
    editor = ScriptedEditor("2/2.txt\n", "1/fresh.txt\n")
    outcome = controller(make_catalog, ["1/1.txt"], editor, prompter=prompter).run()
    assert outcome.state is RunState.DONE
    assert editor.shown[1] == "2/2.txt\n"
    assert (sandbox / "1" / "fresh.txt").exists()
    assert (sandbox / "2" / "2.txt").read_text() == "content of 2\n"


def test_existing_destination_with_oops(make_catalog, sandbox):
    outcome = controller(make_catalog, ["1/1.txt"], ScriptedEditor("2/2.txt\n"),
                         prompter=ScriptedPrompter(), oops=True).run()
    assert outcome.state is RunState.ABORTED
    assert outcome.exit_code == 2
    assert (sandbox / "1" / "1.txt").exists()


def test_dry_run_touches_nothing(make_catalog, sandbox):
    before = sorted(p.relative_to(sandbox) for p in sandbox.rglob("*"))
    reporter = RecordingReporter()
    outcome = controller(make_catalog, ["1/1.txt", "1/11", "2/2.txt"],
                         ScriptedEditor("new/1.txt\n//\n2/renamed.txt\n"),
                         reporter=reporter, dry_run=True, directory=True).run()
    assert outcome.state is RunState.DONE
    assert reporter.dry_run_lines == render_actions(outcome.actions)
    assert len(reporter.dry_run_lines) == 4
    assert sorted(p.relative_to(sandbox) for p in sandbox.rglob("*")) == before


def test_execution_failure(make_catalog, sandbox):
    fs = FailingFileSystem("b.txt")
    outcome = controller(make_catalog, ["1/1.txt", "2/2.txt", "1/11/11.txt"],
                         ScriptedEditor("1/a.txt\n2/b.txt\n1/11/c.txt\n"), fs=fs).run()
    assert outcome.state is RunState.FAILED
    assert outcome.exit_code == 2
    assert outcome.processed == 1
    assert len(outcome.result.not_attempted) == 1
    assert (sandbox / "1" / "a.txt").exists()
    assert (sandbox / "1" / "11" / "11.txt").exists()


def test_noop_edit_is_done(make_catalog):
    text = encode(make_catalog("1/1.txt")[0])
    outcome = controller(make_catalog, ["1/1.txt"], ScriptedEditor(text + "\n\n")).run()
    assert outcome.state is RunState.DONE
    assert outcome.processed == 0


def test_unchanged_text_after_overwrite_edit_asks_again(make_catalog, sandbox):
    prompter = ScriptedPrompter(proceed=[Decision.EDIT, Decision.PROCEED])
    editor = ScriptedEditor("2/2.txt\n", lambda text: text)
    outcome = controller(make_catalog, ["1/1.txt"], editor, prompter=prompter).run()
    assert outcome.state is RunState.DONE
    assert len(prompter.asked) == 2
    assert (sandbox / "2" / "2.txt").read_text() == "content of 1\n"


def test_deleted_parent_of_destination_keeps_files(make_catalog, sandbox):
    outcome = controller(make_catalog, ["1/1.txt", "2/22"], ScriptedEditor("2/22/kept.txt\n//\n"),
                         prompter=ScriptedPrompter(redo=[False]), directory=True).run()
    assert outcome.state is RunState.ABORTED
    assert outcome.exit_code == 2
    assert (sandbox / "1" / "1.txt").exists()
    assert (sandbox / "2" / "22" / "22.txt").exists()
