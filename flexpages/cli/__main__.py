"""
Main entry point for the flexpages CLI when run as a module.

    python -m flexpages.cli
"""

from . import main

if __name__ == '__main__':
    main()
