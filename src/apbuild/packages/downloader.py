"""Release asset downloader with progress tracking.

This module identifies prebuilt release archives and downloads them over
HTTP. There is deliberately no checksum step: integrity rests on the pinned
release tag and the transport.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import requests
from tqdm import tqdm

logger = logging.getLogger(__name__)

GITHUB_HOST = "github.com"
GITHUB_REPO_OWNER = "wuurrd"
GITHUB_REPO_NAME = "webrtc-audio-processing"
RELEASE_TAG = "v0.1.0"
ASSET_NAME = "webrtc-Windows.zip"


class DownloadError(Exception):
    """Raised when download fails."""

    def __init__(self, url: str, status: Optional[int] = None, reason: str = ""):
        self.url = url
        self.status = status
        if status is not None:
            message = f"Failed to download the asset: {status}"
        else:
            message = f"Failed to download the asset: {reason}"
        super().__init__(f"{message} ({url})")


@dataclass(frozen=True)
class ReleaseAsset:
    """Identity of a downloadable prebuilt archive on a GitHub release."""

    owner: str
    repo: str
    tag: str
    asset: str
    host: str = GITHUB_HOST

    @classmethod
    def default(cls) -> "ReleaseAsset":
        """The pinned Windows build of the native library."""
        return cls(GITHUB_REPO_OWNER, GITHUB_REPO_NAME, RELEASE_TAG, ASSET_NAME)

    @property
    def url(self) -> str:
        return (
            f"https://{self.host}/{self.owner}/{self.repo}"
            f"/releases/download/{self.tag}/{self.asset}"
        )


class PackageDownloader:
    """Downloads release assets with progress tracking."""

    def __init__(self, chunk_size: int = 8192, show_progress: bool = True):
        """Initialize downloader.

        Args:
            chunk_size: Size of chunks streamed to disk
            show_progress: Whether to show a progress bar
        """
        self.chunk_size = chunk_size
        self.show_progress = show_progress

    def download(self, url: str, dest_path: Path) -> Path:
        """Download a file from a URL, byte for byte.

        Performs a single blocking GET. Anything other than HTTP 200 is fatal
        and leaves no file behind.

        Args:
            url: URL to download from
            dest_path: Destination file path

        Returns:
            Path to the downloaded file

        Raises:
            DownloadError: If the request fails or the status is not 200
        """
        dest_path = Path(dest_path)
        temp_file = dest_path.with_suffix(dest_path.suffix + ".tmp")

        logger.info(f"Downloading {url}")
        try:
            response = requests.get(url, stream=True)
        except requests.RequestException as e:
            raise DownloadError(url, reason=str(e)) from e

        try:
            if response.status_code != 200:
                raise DownloadError(url, status=response.status_code)

            dest_path.parent.mkdir(parents=True, exist_ok=True)
            total_size = int(response.headers.get("content-length", 0) or 0)

            progress_bar = None
            if self.show_progress and total_size > 0:
                progress_bar = tqdm(
                    total=total_size,
                    unit="B",
                    unit_scale=True,
                    unit_divisor=1024,
                    desc=f"Downloading {dest_path.name}",
                )

            try:
                with open(temp_file, "wb") as f:
                    for chunk in response.iter_content(chunk_size=self.chunk_size):
                        if chunk:
                            f.write(chunk)
                            if progress_bar:
                                progress_bar.update(len(chunk))
            finally:
                if progress_bar:
                    progress_bar.close()

            temp_file.replace(dest_path)
            logger.info(f"Saved {dest_path} ({dest_path.stat().st_size} bytes)")
            return dest_path

        except requests.RequestException as e:
            temp_file.unlink(missing_ok=True)
            raise DownloadError(url, reason=str(e)) from e

        except Exception:
            temp_file.unlink(missing_ok=True)
            raise

        finally:
            response.close()
