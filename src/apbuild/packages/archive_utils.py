"""Archive Extraction Utilities.

This module downloads prebuilt release archives and extracts only the link
artifacts from them. Headers, metadata and documentation stored next to the
libraries are skipped; the headers come from the bundled source tree instead.
"""

import logging
import shutil
import zipfile
from pathlib import Path
from typing import List, Optional, Tuple

from .downloader import PackageDownloader, ReleaseAsset

logger = logging.getLogger(__name__)

# Static libraries and their debug symbols.
RECOGNIZED_EXTENSIONS: Tuple[str, ...] = (".a", ".pdb")


class ArchiveError(Exception):
    """Raised when an archive cannot be opened or an entry cannot be extracted."""

    pass


def is_recognized_entry(name: str) -> bool:
    """Check whether an archive entry name is a link artifact worth keeping."""
    return name.endswith(RECOGNIZED_EXTENSIONS)


def entry_destination(destination_root: Path, name: str) -> Path:
    """Join an archive entry name onto the destination root.

    Both '/' and '\\' are accepted as separators, since archives built on
    Windows frequently store backslashes.

    Raises:
        ArchiveError: If the entry would land outside destination_root
    """
    normalized = name.replace("\\", "/")
    parts = [part for part in normalized.split("/") if part not in ("", ".")]
    if (
        normalized.startswith("/")
        or ".." in parts
        or (parts and parts[0].endswith(":"))
    ):
        raise ArchiveError(f"Refusing to extract entry outside destination: {name}")
    if not parts:
        raise ArchiveError(f"Archive entry has an empty name: {name!r}")
    return destination_root.joinpath(*parts)


class SelectiveExtractor:
    """Extracts recognized entries from a zip archive.

    Unlike a plain extractall, the stored relative paths are preserved as-is
    beneath the destination root, so the on-disk layout mirrors the archive.
    """

    def __init__(self, show_progress: bool = True):
        self.show_progress = show_progress

    def extract(self, archive_path: Path, destination_root: Path) -> List[Path]:
        """Extract recognized entries of archive_path into destination_root.

        Args:
            archive_path: Path to the .zip archive
            destination_root: Directory the stored paths are resolved against

        Returns:
            Paths of created files and directories, in archive order

        Raises:
            ArchiveError: If the archive cannot be read or an entry cannot be written
        """
        created: List[Path] = []
        try:
            with zipfile.ZipFile(archive_path, "r") as archive:
                for info in archive.infolist():
                    if not is_recognized_entry(info.filename):
                        logger.debug(f"Skipping {info.filename}")
                        continue

                    outpath = entry_destination(destination_root, info.filename)

                    if info.is_dir():
                        outpath.mkdir(parents=True, exist_ok=True)
                    else:
                        outpath.parent.mkdir(parents=True, exist_ok=True)
                        if self.show_progress:
                            print(f"Creating file: {outpath}")
                        with archive.open(info) as src, open(outpath, "wb") as dst:
                            shutil.copyfileobj(src, dst)
                    created.append(outpath)

        except ArchiveError:
            raise
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, RuntimeError) as e:
            raise ArchiveError(f"Failed to extract {archive_path}: {e}") from e

        return created


class AssetFetcher:
    """Downloads a release archive and extracts its link artifacts."""

    def __init__(
        self,
        download_dir: Path,
        show_progress: bool = True,
        downloader: Optional[PackageDownloader] = None,
        extractor: Optional[SelectiveExtractor] = None,
    ):
        """Initialize asset fetcher.

        Args:
            download_dir: Directory the downloaded archive is saved into
            show_progress: Whether to show download/extraction progress
            downloader: Downloader to use (default: PackageDownloader)
            extractor: Extractor to use (default: SelectiveExtractor)
        """
        self.download_dir = Path(download_dir)
        self.show_progress = show_progress
        self.downloader = downloader or PackageDownloader(show_progress=show_progress)
        self.extractor = extractor or SelectiveExtractor(show_progress=show_progress)

    def fetch_and_extract(self, release: ReleaseAsset, destination_root: Path) -> List[Path]:
        """Download release and extract recognized entries below destination_root.

        The archive is kept in download_dir after a successful extraction and
        deleted when extraction fails, so a broken archive is never reused.

        Raises:
            DownloadError: If the download does not return HTTP 200
            ArchiveError: If extraction fails
        """
        archive_path = self.download_dir / release.asset

        if self.show_progress:
            print(f"Downloading {release.url}")
        self.downloader.download(release.url, archive_path)

        if self.show_progress:
            print(f"Extracting {release.asset} into {destination_root}")
        try:
            return self.extractor.extract(archive_path, Path(destination_root))
        except ArchiveError:
            logger.error(f"Extraction failed, removing {archive_path}")
            archive_path.unlink(missing_ok=True)
            raise
