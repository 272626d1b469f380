"""
OneDB installer CLI argument parser.

This module implements the command-line interface using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from onedb_installer.core.platform import parse_runtime_version

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("onedb-installer")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


def runtime_version_arg(value: str):
    """argparse type for --runtime-version (e.g. '12.3' or 'v12.3.1')."""
    parsed = parse_runtime_version(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"invalid runtime version: {value!r}")
    return parsed


class CLI:
    """OneDB installer command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="onedb-install",
            description="Install the OneDB/Informix ODBC binding for node.js",
            epilog='Use "onedb-install COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"onedb-installer {__version__}"
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
            help="Path to configuration file (default: ./onedb-install.yaml)",
        )
        parser.add_argument(
            "--project-root",
            type=Path,
            metavar="PATH",
            default=Path.cwd(),
            help="Package directory to install into (default: current directory)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_install_command(subparsers)
        self._add_info_command(subparsers)

        return parser

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Build or install the ODBC binding",
            description=(
                "Locate or download the Client SDK, build the binding with "
                "node-gyp and fall back to a precompiled binding on failure"
            ),
        )
        parser.add_argument(
            "--runtime-version",
            type=runtime_version_arg,
            metavar="X.Y",
            help="node.js version to install for (default: ask node)",
        )
        parser.add_argument(
            "--archive",
            type=Path,
            metavar="PATH",
            help="Use a local Client SDK archive instead of downloading",
        )

    def _add_info_command(self, subparsers):
        """Add 'info' subcommand."""
        parser = subparsers.add_parser(
            "info",
            help="Show what install would do",
            description=(
                "Show the detected platform, compatibility verdict, SDK "
                "location, download URL and precompiled binding without "
                "changing anything"
            ),
        )
        parser.add_argument(
            "--runtime-version",
            type=runtime_version_arg,
            metavar="X.Y",
            help="node.js version to report for (default: ask node)",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
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

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
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
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "install": "onedb_installer.cli.commands.install",
            "info": "onedb_installer.cli.commands.info",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
