"""
Entry point for running setup-lekko as a module.

Usage: python -m lekkosetup [options]
"""

from lekkosetup.cli.parser import main

if __name__ == "__main__":
    main()
