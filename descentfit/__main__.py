"""
Main Entry Point for descentfit
===============================

Entry point when descentfit is called as a module:
    python -m descentfit DATA [args...]
"""

import sys


def main() -> int:
    """
    Main entry point for module execution.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    from descentfit.cli.main import main as cli_main

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
