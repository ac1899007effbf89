"""
Entry point for running the setup-lekko CLI as a module.

Usage: python -m lekkosetup.cli [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
