"""
Entry point for running the installer CLI as a module.

Usage: python -m onedb_installer [command] [options]
"""

from onedb_installer.cli.parser import main

if __name__ == "__main__":
    main()
