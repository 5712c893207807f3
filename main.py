#!/usr/bin/env python3
"""
listmove - Main Entry

Supports:
- CLI mode (default): edit the listing in your text editor
- GUI mode (--gui or -g parameter)

Usage:
    python main.py                    # CLI, current directory
    python main.py -s "*.jpg"         # CLI, natural-sorted wildcard
    python main.py --gui              # GUI mode
    python main.py -g ./photos        # GUI mode, preset path
"""

import sys


def main():
    """Main entry point"""
    # Check if GUI should be started
    if "--gui" in sys.argv or "-g" in sys.argv:
        # Remove --gui parameter
        sys.argv = [arg for arg in sys.argv if arg not in ("--gui", "-g")]

        try:
            from gui import main as gui_main
        except ImportError as e:
            print(f"Error: Unable to start GUI, please ensure PySide6 is installed")
            print(f"Detailed error: {e}")
            print("\nInstall command: pip install PySide6")
            return 1
        return gui_main()

    # Default to CLI
    from cli import main as cli_main
    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
