"""
Install command implementation.

Builds the ODBC binding, or installs a precompiled one when the build fails.
"""

import logging

from onedb_installer.cli.utils import load_environment
from onedb_installer.core.exceptions import ConfigError
from onedb_installer.installer.pipeline import Installer

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 for any failed install)
    """
    try:
        env = load_environment(args)
    except ConfigError as e:
        logger.error(f"Error: {e}")
        return 1

    logger.debug(f"Installing for {env.platform} into {env.project_root}")

    outcome = Installer(env).run()
    logger.debug(f"Install finished: {outcome.status.value}")
    return outcome.exit_code
