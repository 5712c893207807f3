"""
cli - Command Line Interface for listmove
"""

from .cli_entry import main, build_options, create_parser
from .cli_interactive import ConsolePrompter, ConsoleReporter

__all__ = ["main", "build_options", "create_parser", "ConsolePrompter", "ConsoleReporter"]
