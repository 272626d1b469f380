"""
Shared utilities for CLI commands.
"""

import logging
from pathlib import Path

from onedb_installer.core.config import DEFAULT_CONFIG_NAME, load_config
from onedb_installer.core.environment import InstallEnvironment, probe_environment

logger = logging.getLogger(__name__)


def load_environment(args) -> InstallEnvironment:
    """
    Load configuration and probe the host for a CLI invocation.

    An explicit --config must exist; the default onedb-install.yaml in the
    project root is optional.

    Raises:
        ConfigError: If the configuration file is missing or invalid
    """
    project_root = Path(args.project_root).resolve()

    if getattr(args, "config", None):
        config = load_config(Path(args.config), required=True)
    else:
        config = load_config(project_root / DEFAULT_CONFIG_NAME)

    return probe_environment(
        project_root,
        config=config,
        runtime_version=getattr(args, "runtime_version", None),
        sdk_archive=getattr(args, "archive", None),
    )
