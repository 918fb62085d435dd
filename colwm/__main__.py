"""
Main entry point for running colwm as a module.

Usage:
    python -m colwm
"""

from .tilewm import main

if __name__ == "__main__":
    import sys

    sys.exit(main())
