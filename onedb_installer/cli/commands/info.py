"""
Info command implementation.

Reports what an install would do on this host without touching the network
or the filesystem.
"""

import logging

from onedb_installer.cli.utils import load_environment
from onedb_installer.core.compatibility import check_compatibility
from onedb_installer.core.exceptions import ConfigError, InstallerError
from onedb_installer.installer.artifacts import select_artifact
from onedb_installer.installer.fallback import select_binary_variant
from onedb_installer.installer.sdk import locate_sdk

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the info command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 if the host is supported, 1 otherwise)
    """
    try:
        env = load_environment(args)
        minimum = env.config.minimum_runtime
    except ConfigError as e:
        logger.error(f"Error: {e}")
        return 1

    platform = env.platform
    result = check_compatibility(platform, minimum)

    print(f"Platform:        {platform.platform_string()}")
    print(f"node.js:         {platform.runtime_version_string()}")
    print(f"Supported:       {'yes' if result.valid else 'no'}")
    if not result.valid:
        print(f"  {result.message}")
        return 1

    location = locate_sdk(env)
    if location is not None:
        print(f"Client SDK:      {location.path} ({location.origin.value})")
    else:
        try:
            artifact = select_artifact(env)
        except InstallerError as e:
            print(f"Client SDK:      not found, {e}")
        else:
            source = artifact.url or artifact.local_path
            print(f"Client SDK:      not found, would fetch {source}")

    try:
        variant = select_binary_variant(platform.os, platform.runtime_version)
    except InstallerError as e:
        print(f"Fallback binary: {e}")
    else:
        print(f"Fallback binary: {variant.entry_path}")

    return 0
