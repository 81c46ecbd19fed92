"""Package management for apbuild.

This module handles obtaining the native library: copying the bundled source
tree, and downloading and extracting prebuilt release archives.
"""

from .archive_utils import ArchiveError, AssetFetcher, SelectiveExtractor
from .downloader import DownloadError, PackageDownloader, ReleaseAsset
from .platform_utils import PlatformDetector, PlatformError
from .source import EmptySourceError, SourceCopyError, SourceProvisioner

__all__ = [
    "ArchiveError",
    "AssetFetcher",
    "SelectiveExtractor",
    "DownloadError",
    "PackageDownloader",
    "ReleaseAsset",
    "PlatformDetector",
    "PlatformError",
    "EmptySourceError",
    "SourceCopyError",
    "SourceProvisioner",
]
