"""Entry point for running effectport as a module.

This allows running: python -m effectport
"""

from .cli import main

if __name__ == "__main__":
    # No try/except here: main() is the CLI boundary and already catches
    # startup failures, logs them, and exits with the appropriate code.
    main()
