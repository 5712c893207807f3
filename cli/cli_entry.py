"""
cli_entry.py - CLI Entry Point

Builds run options from LISTMOVE_OPTIONS and the command line, builds the
catalog and runs the edit/validate/execute loop.
"""

import argparse
import logging
import os
import re
import shlex
import sys
from pathlib import Path
from typing import List, Mapping, Optional

from core import (
    ExternalEditor, ListMoveError, MoveOptions, RunController, RunState,
    build_catalog,
)
from .cli_interactive import ConsolePrompter, ConsoleReporter


__version__ = "1.0.0"

OPTIONS_ENV = "LISTMOVE_OPTIONS"


def _regex(value: str):
    try:
        return re.compile(value)
    except re.error as e:
        raise argparse.ArgumentTypeError(f"invalid regular expression {value!r}: {e}")


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser"""
    parser = argparse.ArgumentParser(
        prog="listmove",
        description="Move, rename, copy or delete files by editing their listing in a text editor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Lines starting with // delete the corresponding entry.
Default options can be set in the {OPTIONS_ENV} environment variable.

Examples:
  # Edit the contents of the current directory
  listmove

  # Edit matching files, sorted naturally
  listmove -s "photos/*.jpg"

  # Preview only
  listmove --dry-run src
"""
    )

    parser.add_argument("paths", nargs="*", help="Paths or wildcard patterns to move")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--sort", "-s", action="store_true", help="Sort in natural order")
    parser.add_argument("--absolute", "-a", action="store_true", help="Treat as absolute paths")
    parser.add_argument("--directory", "-d", action="store_true",
                        help="Directories themselves, not their contents")
    parser.add_argument("--with-hidden", "-w", action="store_true", help="Include hidden files")
    parser.add_argument("--exclude-pattern", "-e", type=_regex, metavar="PATTERN",
                        help="Exclude regular expression pattern")
    parser.add_argument("--copy", "-c", action="store_true", help="Copy without moving")
    parser.add_argument("--dry-run", "-u", action="store_true", help="Preview only, do not execute")
    parser.add_argument("--oops", "-o", action="store_true",
                        help="Abort in case of collision (prompt as default)")
    parser.add_argument("--quiet", "-q", action="store_true",
                        help="No output to stdout/stderr even if error")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def build_options(
    argv: Optional[List[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
    interactive: Optional[bool] = None,
) -> MoveOptions:
    """
    Assemble run options once from environment and command line

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])
        environ: Environment (defaults to os.environ)
        interactive: Override terminal detection

    Returns:
        Run options
    """
    argv = sys.argv[1:] if argv is None else list(argv)
    environ = os.environ if environ is None else environ

    defaults = shlex.split(environ.get(OPTIONS_ENV, ""))
    args = create_parser().parse_args(defaults + argv)

    if interactive is None:
        interactive = sys.stdin.isatty()

    return MoveOptions(
        paths=args.paths,
        verbose=args.verbose,
        sort=args.sort,
        absolute=args.absolute,
        directory=args.directory,
        with_hidden=args.with_hidden,
        exclude_pattern=args.exclude_pattern,
        copy=args.copy,
        dry_run=args.dry_run,
        oops=args.oops,
        quiet=args.quiet,
        interactive=interactive and not args.quiet,
        base_dir=Path.cwd(),
    )


def configure_logging(options: MoveOptions) -> None:
    """Configure root logger once per process"""
    if options.quiet:
        logging.disable(logging.CRITICAL)
        return
    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        format="%(levelname)s: %(name)s: %(message)s",
    )


def main(argv: Optional[List[str]] = None, launcher=None) -> int:
    """Main entry point"""
    options = build_options(argv)
    configure_logging(options)
    reporter = ConsoleReporter(options)

    try:
        catalog = build_catalog(options)
        controller = RunController(
            catalog,
            options,
            launcher or ExternalEditor(),
            prompter=ConsolePrompter(),
            reporter=reporter,
        )
        outcome = controller.run()
    except ListMoveError as e:
        reporter.error(str(e))
        return 2

    if outcome.state is RunState.ABORTED:
        if outcome.error is not None:
            reporter.error("Aborted")
        else:
            reporter.info("Aborted")
    elif outcome.state is RunState.DONE and not options.dry_run:
        if outcome.processed == 0:
            reporter.info("Info: Nothing to do")
        else:
            reporter.info(f"Success: Processed total {outcome.processed}")

    return outcome.exit_code


if __name__ == "__main__":
    sys.exit(main())
