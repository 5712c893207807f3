"""
cli_interactive.py - Console Prompts and Output

Console implementations of the controller's Prompter and Reporter
"""

from typing import List, Optional
import sys

from core import (
    Action, ActionKind, Collision, Decision, ExecutionResult,
    MoveOptions, Prompter, Reporter,
)


def input_choice(prompt: str, choices: List[str], default: Optional[str] = None) -> Optional[str]:
    """
    Ask until the answer matches a choice (prefix of a word or its first letter)

    Args:
        prompt: Question text
        choices: Accepted words, e.g. ["edit", "abort"]
        default: Choice used for an empty answer

    Returns:
        Selected choice, or None on end of input
    """
    while True:
        try:
            value = input(prompt).strip().lower()
        except EOFError:
            return None
        if not value and default:
            return default
        for choice in choices:
            if value and choice.startswith(value):
                return choice
        print(f"Invalid choice, please enter: {'/'.join(choices)}")


class ConsolePrompter(Prompter):
    """Prompt on stdin/stdout"""

    def ask_redo(self, message: str) -> bool:
        answer = input_choice("[E]dit or [A]bort? > ", ["edit", "abort"], default="edit")
        return answer == "edit"

    def ask_proceed(self, collisions: List[Collision]) -> Decision:
        print(f"{len(collisions)} destination(s) already exist and will be overwritten.")
        answer = input_choice("[P]roceed, [E]dit or [A]bort? > ",
                              ["proceed", "edit", "abort"], default="edit")
        if answer == "proceed":
            return Decision.PROCEED
        if answer == "edit":
            return Decision.EDIT
        return Decision.ABORT


class ConsoleReporter(Reporter):
    """Print controller notifications (silent in quiet mode)"""

    def __init__(self, options: MoveOptions):
        self.options = options

    def _print(self, text: str = "", err: bool = False) -> None:
        if self.options.quiet:
            return
        print(text, file=sys.stderr if err else sys.stdout)

    def info(self, message: str) -> None:
        self._print(message)

    def error(self, message: str) -> None:
        self._print(f"Error: {message}", err=True)

    def collisions(self, collisions: List[Collision]) -> None:
        for c in collisions:
            label = "Error" if c.fatal else "Warning"
            self._print(f"{label}: {c.message}", err=True)

    def dry_run(self, lines: List[str]) -> None:
        self._print(f"[Preview mode] Will perform {len(lines)} actions:")
        self._print("-" * 70)
        for line in lines:
            self._print(f"  {line}")
        self._print("-" * 70)

    def action_done(self, action: Action) -> None:
        if action.kind in (ActionKind.CREATE_DIR, ActionKind.STAGE):
            if self.options.verbose:
                self._print(f"  {action.describe()}")
            return
        self._print(action.describe())

    def result(self, result: ExecutionResult) -> None:
        if not result.ok:
            self._print(result.summary(), err=True)
        elif self.options.verbose:
            self._print(result.summary())
