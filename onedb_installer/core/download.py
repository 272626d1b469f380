"""
Network download with progress tracking.

Streams a remote file to disk and reports progress after every chunk. Failed
downloads are not retried; the caller decides whether a fallback applies.
"""

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int  # 0 when the server sent no content-length
    percentage: float

    def __str__(self) -> str:
        """Format progress for display."""
        return format_progress(self)


class DownloadError(Exception):
    """Exception raised when download fails."""

    pass


def compute_percentage(received: int, total: int) -> float:
    """
    Percentage complete, truncated to two decimal places.

    Returns 0 when the total size is unknown.

    Example:
        >>> compute_percentage(1, 3)
        33.33
    """
    if total <= 0:
        return 0.0
    return math.floor(received * 10000 / total) / 100


def download_file(
    url: str,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: int = 30,
) -> Path:
    """
    Download file from URL to destination.

    Args:
        url: URL to download from
        destination: Local path to save file
        progress_callback: Optional callback invoked after every chunk
        timeout: Socket timeout in seconds

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If the request or the transfer fails
        ValueError: If URL or destination is invalid

    Example:
        >>> def on_progress(progress):
        ...     print(f"Downloaded {progress.percentage}%")
        >>>
        >>> download_file(
        ...     "https://example.com/OneDB-Linux64-ODBC-Driver.tar.gz",
        ...     Path("installer/OneDB-Linux64-ODBC-Driver.tar.gz"),
        ...     progress_callback=on_progress,
        ... )
    """
    if not url:
        raise ValueError("URL cannot be empty")

    if not destination:
        raise ValueError("Destination path cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    logger.info(f"Downloading from {url}")

    try:
        response = requests.get(
            url, stream=True, timeout=timeout, allow_redirects=True
        )
        response.raise_for_status()
    except RequestException as e:
        raise DownloadError(f"Failed to download {url}: {e}") from e

    try:
        total_size = int(response.headers.get("content-length") or 0)
    except ValueError:
        total_size = 0

    downloaded = 0
    try:
        with open(destination, "wb") as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if not chunk:
                    continue
                f.write(chunk)
                downloaded += len(chunk)

                if progress_callback:
                    progress_callback(
                        DownloadProgress(
                            bytes_downloaded=downloaded,
                            total_bytes=total_size,
                            percentage=compute_percentage(downloaded, total_size),
                        )
                    )
    except RequestException as e:
        logger.error(f"Error during download: {e}")
        destination.unlink(missing_ok=True)
        raise DownloadError(f"Download of {url} was interrupted: {e}") from e
    finally:
        response.close()

    logger.info(f"Download complete: {destination}")
    return destination


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> format_progress(DownloadProgress(52428800, 104857600, 50.0))
        'Downloading... 50.0% (50.0/100.0 MB)'
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024

    if progress.total_bytes > 0:
        mb_total = progress.total_bytes / 1024 / 1024
        return (
            f"Downloading... {progress.percentage}% "
            f"({mb_downloaded:.1f}/{mb_total:.1f} MB)"
        )
    # Unknown total size
    return f"Downloading... {mb_downloaded:.1f} MB"
