"""
editor_launch.py - External Editor Invocation

Writes the listing to a temporary file, opens it in the user's editor,
blocks until the editor exits and reads the result back.
"""

from pathlib import Path
from typing import List, Mapping, Optional
import logging
import os
import shlex
import shutil
import subprocess
import sys
import tempfile

from .errors import EditorError


logger = logging.getLogger(__name__)

if os.name == "nt":
    EDITOR_CANDIDATES = ["code.cmd -n -w", "notepad++.exe -multiInst -nosession", "notepad.exe"]
else:
    EDITOR_CANDIDATES = ["nano", "pico", "vim", "nvim", "vi", "emacs"]


class EditorLauncher:
    """Capability: given text, return edited text or None on cancellation"""

    def edit(self, text: str) -> Optional[str]:
        raise NotImplementedError


def find_editor(environ: Optional[Mapping[str, str]] = None) -> List[str]:
    """
    Resolve the editor command

    Precedence: VISUAL, EDITOR, first installed candidate, platform opener.

    Args:
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Command argument list (file path not included)

    Raises:
        EditorError: No editor could be found
    """
    environ = os.environ if environ is None else environ
    for var in ("VISUAL", "EDITOR"):
        value = environ.get(var, "").strip()
        if value:
            return shlex.split(value, posix=os.name != "nt")

    for candidate in EDITOR_CANDIDATES:
        command = candidate.split()
        if shutil.which(command[0]):
            return command

    if sys.platform == "darwin":
        return ["open", "-W", "-n", "-t"]

    raise EditorError("No editor found. Set the VISUAL or EDITOR environment variable.")


class ExternalEditor(EditorLauncher):
    """Edit text in an external editor process"""

    def __init__(self, command: Optional[List[str]] = None, suffix: str = ".txt"):
        self.command = command
        self.suffix = suffix

    def edit(self, text: str) -> Optional[str]:
        """
        Open text in the editor and wait for it to exit

        Args:
            text: Listing text

        Returns:
            Edited text, or None if the editor exited with an error status
        """
        command = self.command or find_editor()
        fd, name = tempfile.mkstemp(prefix="listmove-", suffix=self.suffix, text=True)
        path = Path(name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                f.write(text)

            logger.debug("Launching editor: %s %s", " ".join(command), path)
            try:
                completed = subprocess.run([*command, str(path)])
            except OSError as e:
                raise EditorError(f"Failed to launch editor {command[0]}: {e}") from e

            if completed.returncode != 0:
                logger.debug("Editor exited with status %d", completed.returncode)
                return None

            try:
                return path.read_text(encoding="utf-8")
            except UnicodeDecodeError as e:
                raise EditorError(f"Edited listing is not valid UTF-8: {e}") from e
        finally:
            try:
                path.unlink()
            except OSError:
                logger.debug("Could not remove temporary file %s", path)
