"""
Main entry point for the viewfmt CLI when run as a module.

This allows the CLI to be executed using:
    python -m viewfmt.cli

or the equivalent console script entry point.
"""

from . import main

if __name__ == '__main__':
    main()
