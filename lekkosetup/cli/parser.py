"""
setup-lekko CLI argument parser.

This module implements the command-line interface using argparse and is
the single place where failures are turned into an exit status.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, MutableMapping, Optional

from lekkosetup.core.exceptions import SetupError
from lekkosetup.core.workflow import set_failed

try:
    from importlib.metadata import version

    __version__ = version("setup-lekko")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """setup-lekko command-line interface."""

    def __init__(self, environ: Optional[MutableMapping[str, str]] = None):
        """
        Initialize CLI.

        Args:
            environ: Environment to read inputs from and extend PATH in
                (default: os.environ)
        """
        self.environ = os.environ if environ is None else environ
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="setup-lekko",
            description="Install the Lekko CLI and add it to PATH",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument(
            "--version", action="version", version=f"setup-lekko {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to a YAML configuration file",
        )
        parser.add_argument(
            "--lekko-version",
            dest="lekko_version",
            metavar="VERSION",
            help='Lekko version to install, "latest" or e.g. 0.2.15 (default: latest)',
        )
        parser.add_argument(
            "--github-token",
            metavar="TOKEN",
            help="Access token for the release registry and download",
        )
        parser.add_argument(
            "--apikey",
            metavar="KEY",
            help="Lekko API key, exchanged for an access token (overrides --github-token)",
        )
        parser.add_argument(
            "--cache-dir",
            type=Path,
            metavar="DIR",
            help="Tool cache directory (default: $RUNNER_TOOL_CACHE or ~/.lekkosetup/toolcache)",
        )
        parser.add_argument(
            "--no-verify-version",
            action="store_true",
            help="Do not run 'lekko --version' after installing",
        )

        return parser

    def parse_args(self, args: Optional[List[str]] = None):
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        try:
            self._run_setup(parsed_args)
            return 0
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130
        except SetupError as e:
            logger.error(f"Error: {e}")
            set_failed(str(e))
            return 1
        except Exception as e:
            # Anything unexpected still fails the step explicitly.
            logger.error(f"Internal error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            set_failed("Internal error")
            return 1

    def _run_setup(self, args):
        from lekkosetup.cli.commands import setup
        from lekkosetup.cli.config import load_settings

        overrides = {
            "version": args.lekko_version,
            "github_token": args.github_token,
            "apikey": args.apikey,
            "cache_dir": args.cache_dir,
        }
        if args.no_verify_version:
            overrides["verify_version"] = False

        settings = load_settings(self.environ, args.config, overrides)
        setup.run(settings, self.environ)

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        RUNNER_DEBUG=1 enables verbose output as well.
        """
        if args.verbose or self.environ.get("RUNNER_DEBUG") == "1":
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,
        )


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
