"""
Cross-platform file system utilities for the OneDB installer.

This module provides the file operations the install steps rely on:
- Symlink creation for SDK directory layout shims
- Archive extraction (zip, tar.gz) with directory traversal protection
- Single-member extraction from a zip archive
- Safe deletion of build output directories and transient files
"""

import os
import shutil
import sys
import tarfile
import zipfile
from pathlib import Path
from typing import Optional, Union

# Platform detection
IS_WINDOWS = os.name == "nt"


# ============================================================================
# Error Handling
# ============================================================================


class FilesystemError(Exception):
    """Base exception for filesystem operations."""

    pass


class LinkCreationError(FilesystemError):
    """Failed to create a symbolic link."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


class UnsupportedArchiveFormat(ArchiveExtractionError):
    """Archive format is not supported."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


class ArchiveMemberNotFound(ArchiveExtractionError):
    """Requested member is not present in the archive."""

    pass


# ============================================================================
# Links
# ============================================================================


def create_link(source: Union[str, Path], target: Union[str, Path]) -> None:
    """
    Create a symbolic link at ``target`` pointing to ``source``.

    Args:
        source: Path to the actual directory/file (link target)
        target: Path where the link should be created

    Raises:
        LinkCreationError: If the target already exists or the OS refuses

    Example:
        >>> create_link('/opt/onedb/lib64', '/opt/onedb/lib')
    """
    source = Path(source)
    target = Path(target)

    if target.exists() or target.is_symlink():
        raise LinkCreationError(f"Target path already exists: {target}")

    try:
        os.symlink(source, target, target_is_directory=source.is_dir())
    except OSError as e:
        raise LinkCreationError(
            f"Failed to link {target} -> {source}: {e}"
        ) from e


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Prevents directory traversal attacks (e.g., paths containing '../').

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not member_path.is_relative_to(destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def extract_archive(
    archive_path: Union[str, Path],
    destination: Union[str, Path],
    archive_format: Optional[str] = None,
) -> None:
    """
    Extract an archive to a destination directory.

    Supported formats:
    - .zip
    - .tar.gz, .tgz

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to
        archive_format: "zip" or "targz"; detected from the file name when None

    Raises:
        UnsupportedArchiveFormat: If archive format is not recognized
        ArchiveExtractionError: If extraction fails
        InsecureArchiveError: If archive contains malicious paths

    Example:
        >>> extract_archive('OneDB-Linux64-ODBC-Driver.tar.gz', 'installer')
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)

    if archive_format is None:
        archive_format = _detect_format(archive_path)

    try:
        if archive_format == "zip":
            _extract_zip(archive_path, destination)
        elif archive_format == "targz":
            _extract_tar(archive_path, destination, "r:gz")
        else:
            raise UnsupportedArchiveFormat(
                f"Unsupported archive format: {archive_format or archive_path.suffix}. "
                "Supported: .zip, .tar.gz"
            )
    except (InsecureArchiveError, UnsupportedArchiveFormat):
        raise
    except Exception as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}")


def _detect_format(archive_path: Path) -> Optional[str]:
    name = archive_path.name.lower()
    if name.endswith(".zip"):
        return "zip"
    if name.endswith((".tar.gz", ".tgz")):
        return "targz"
    return None


def _extract_zip(archive_path: Path, destination: Path) -> None:
    """Extract a ZIP archive."""
    with zipfile.ZipFile(archive_path, "r") as zf:
        members = zf.namelist()

        # Validate all paths first
        for member in members:
            _validate_archive_path(member, destination)

        for member in members:
            zf.extract(member, destination)


def _extract_tar(archive_path: Path, destination: Path, mode: str) -> None:
    """Extract a tar archive with specified compression."""
    with tarfile.open(archive_path, mode) as tar:
        for member in tar.getmembers():
            _validate_archive_path(member.name, destination)

        # Extract with filter for security (Python 3.12+)
        if sys.version_info >= (3, 12):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)


def extract_member(
    archive_path: Union[str, Path], member: str, output_path: Union[str, Path]
) -> Path:
    """
    Extract exactly one member of a zip archive to ``output_path``.

    Every other member is skipped without being written. The output file is
    written under its new name, not the member's.

    Args:
        archive_path: Path to the zip archive
        member: Archive-internal path of the member to extract
        output_path: File path to write the member's contents to

    Returns:
        The written output path

    Raises:
        ArchiveMemberNotFound: If the member is not in the archive
        ArchiveExtractionError: If the archive cannot be read
    """
    archive_path = Path(archive_path)
    output_path = Path(output_path)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    try:
        with zipfile.ZipFile(archive_path, "r") as zf:
            for info in zf.infolist():
                if info.is_dir() or info.filename != member:
                    continue

                output_path.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(info) as src, open(output_path, "wb") as dst:
                    shutil.copyfileobj(src, dst)
                return output_path
    except (zipfile.BadZipFile, OSError) as e:
        output_path.unlink(missing_ok=True)
        raise ArchiveExtractionError(f"Failed to read {archive_path}: {e}") from e

    raise ArchiveMemberNotFound(f"'{member}' not found in {archive_path}")


# ============================================================================
# Deletion
# ============================================================================


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Safely remove a directory tree with safeguards.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        FilesystemError: If deletion fails

    Example:
        >>> safe_rmtree('/work/node-informixdb/build', require_prefix='/work')
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not path.is_relative_to(require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        # Handle read-only files on Windows
        if IS_WINDOWS:

            def handle_remove_readonly(func, path, exc):
                """Error handler for Windows read-only files."""
                if not os.access(path, os.W_OK):
                    os.chmod(path, 0o777)
                    func(path)
                else:
                    raise

            shutil.rmtree(path, onerror=handle_remove_readonly)
        else:
            shutil.rmtree(path)

    except Exception as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}")


def remove_file(path: Union[str, Path]) -> bool:
    """
    Remove a file if it exists.

    Returns:
        True if a file was removed
    """
    path = Path(path)
    if not path.is_file():
        return False
    try:
        path.unlink()
    except OSError as e:
        raise FilesystemError(f"Failed to remove file '{path}': {e}")
    return True
