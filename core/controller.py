"""
controller.py - Edit / Validate / Execute Loop

Drives one run: present the listing in the editor, reconcile the result,
let the user re-edit or abort on problems, then execute the plan.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
import logging

from .editor_launch import EditorLauncher
from .errors import ReconciliationError, CollisionDetected
from .exec_plan import ExecutionResult, execute_actions
from .fs_ops import FileSystem, LocalFileSystem
from .listing_codec import decode, encode
from .models_fs import Catalog, Collision, MoveOptions, Plan
from .plan_actions import Action, render_actions, schedule_plan
from .reconcile import reconcile


logger = logging.getLogger(__name__)


class RunState(Enum):
    EDITING = "editing"
    VALIDATING = "validating"
    REPORTING = "reporting"
    CONFIRMING = "confirming"
    EXECUTING = "executing"
    DONE = "done"
    FAILED = "failed"
    ABORTED = "aborted"


class Decision(Enum):
    """Answer to the existing-destination prompt"""
    PROCEED = "proceed"
    EDIT = "edit"
    ABORT = "abort"


class Prompter:
    """Capability: interactive questions"""

    def ask_redo(self, message: str) -> bool:
        """Return True to edit again, False to abort"""
        raise NotImplementedError

    def ask_proceed(self, collisions: List[Collision]) -> Decision:
        raise NotImplementedError


class Reporter:
    """Notifications from the controller (no-op by default)"""

    def error(self, message: str) -> None:
        pass

    def collisions(self, collisions: List[Collision]) -> None:
        pass

    def dry_run(self, lines: List[str]) -> None:
        pass

    def action_done(self, action: Action) -> None:
        pass

    def result(self, result: ExecutionResult) -> None:
        pass


@dataclass
class RunOutcome:
    """Terminal state of a run"""
    state: RunState
    plan: Optional[Plan] = None
    actions: List[Action] = field(default_factory=list)
    result: Optional[ExecutionResult] = None
    error: Optional[Exception] = None      # Unresolved validation error
    user_aborted: bool = False

    @property
    def processed(self) -> int:
        return self.result.processed_count if self.result else 0

    @property
    def exit_code(self) -> int:
        if self.state is RunState.DONE:
            return 0
        if self.state is RunState.ABORTED and self.error is None:
            return 0
        return 2


class RunController:
    """State machine for a single run"""

    def __init__(
        self,
        catalog: Catalog,
        options: MoveOptions,
        launcher: EditorLauncher,
        prompter: Optional[Prompter] = None,
        reporter: Optional[Reporter] = None,
        fs: Optional[FileSystem] = None,
    ):
        self.catalog = catalog
        self.options = options
        self.launcher = launcher
        self.prompter = prompter
        self.reporter = reporter or Reporter()
        self.fs = fs or LocalFileSystem()
        self.state = RunState.EDITING

    def _can_prompt(self) -> bool:
        return self.prompter is not None and self.options.may_prompt

    def _report(self, error: Exception) -> RunState:
        """Reporting state: offer re-edit or abort"""
        self.state = RunState.REPORTING
        if isinstance(error, CollisionDetected):
            self.reporter.collisions(error.collisions)
        else:
            self.reporter.error(str(error))

        if self._can_prompt() and self.prompter.ask_redo(str(error)):
            return RunState.EDITING
        return RunState.ABORTED

    def run(self) -> RunOutcome:
        """Run the loop until a terminal state"""
        if len(self.catalog) == 0:
            return RunOutcome(state=RunState.DONE)

        text = encode(self.catalog)
        plan: Optional[Plan] = None
        error: Optional[Exception] = None
        # Set after EDIT at the overwrite prompt: saving the same text asks again
        reconfirm = False

        while True:
            # Editing
            self.state = RunState.EDITING
            edited = self.launcher.edit(text)
            if edited is None or (edited == text and not reconfirm):
                logger.debug("Editor cancelled or listing unchanged")
                return RunOutcome(state=RunState.ABORTED, plan=plan, error=error, user_aborted=True)
            text = edited
            reconfirm = False

            # Validating
            self.state = RunState.VALIDATING
            try:
                plan = reconcile(self.catalog, decode(text), self.options, self.fs)
                plan.raise_for_collisions()
            except ReconciliationError as e:
                error = e
                if self._report(e) is RunState.EDITING:
                    continue
                return RunOutcome(state=RunState.ABORTED, plan=plan, error=e,
                                  user_aborted=self._can_prompt())
            error = None

            # Confirming
            self.state = RunState.CONFIRMING
            warnings = plan.warnings
            if warnings:
                self.reporter.collisions(warnings)
                if not self._can_prompt():
                    return RunOutcome(state=RunState.ABORTED, plan=plan,
                                      error=CollisionDetected(warnings))
                decision = self.prompter.ask_proceed(warnings)
                if decision is Decision.EDIT:
                    reconfirm = True
                    continue
                if decision is Decision.ABORT:
                    return RunOutcome(state=RunState.ABORTED, plan=plan, user_aborted=True)

            return self._execute(plan)

    def _execute(self, plan: Plan) -> RunOutcome:
        """Executing state"""
        self.state = RunState.EXECUTING
        if plan.is_noop:
            self.state = RunState.DONE
            return RunOutcome(state=RunState.DONE, plan=plan)

        actions = schedule_plan(plan, self.fs)
        if self.options.dry_run:
            self.reporter.dry_run(render_actions(actions))
            self.state = RunState.DONE
            return RunOutcome(state=RunState.DONE, plan=plan, actions=actions)

        result = execute_actions(
            actions, self.fs,
            progress_callback=lambda current, total, action: self.reporter.action_done(action),
        )
        self.reporter.result(result)
        self.state = RunState.DONE if result.ok else RunState.FAILED
        return RunOutcome(state=self.state, plan=plan, actions=actions, result=result)
