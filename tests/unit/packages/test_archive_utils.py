"""Unit tests for selective archive extraction and asset fetching."""

import zipfile
from pathlib import Path
from unittest.mock import Mock

import pytest

from apbuild.packages.archive_utils import (
    ArchiveError,
    AssetFetcher,
    SelectiveExtractor,
    entry_destination,
    is_recognized_entry,
)
from apbuild.packages.downloader import DownloadError, ReleaseAsset

ENTRIES = {
    "webrtc/modules/audio_processing/libwebrtc_audio_processing.a": b"!<arch>\nlib",
    "webrtc/modules/audio_processing/webrtc_audio_processing.pdb": b"pdbdata",
    "webrtc/modules/audio_processing/include/audio_processing.h": b"// header",
    "README.md": b"docs",
    "meta/build.json": b"{}",
}


def write_zip(path: Path, entries: dict) -> Path:
    with zipfile.ZipFile(path, "w") as zf:
        for name, data in entries.items():
            if data is None:
                zf.writestr(zipfile.ZipInfo(name), b"")
            else:
                zf.writestr(name, data)
    return path


def all_files(root: Path):
    return sorted(p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file())


class TestEntryHelpers:
    """Test cases for entry filtering and path joining."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("lib/foo.a", True),
            ("foo.pdb", True),
            ("foo.h", False),
            ("foo.a.txt", False),
            ("foo.lib", False),
            ("dir/", False),
        ],
    )
    def test_is_recognized_entry(self, name, expected):
        assert is_recognized_entry(name) is expected

    def test_forward_slashes(self, tmp_path):
        assert entry_destination(tmp_path, "a/b/c.a") == tmp_path / "a" / "b" / "c.a"

    def test_backslashes(self, tmp_path):
        assert entry_destination(tmp_path, "a\\b\\c.a") == tmp_path / "a" / "b" / "c.a"

    @pytest.mark.parametrize("name", ["../evil.a", "a/../../evil.a", "/abs/evil.a", "C:\\evil.a"])
    def test_escaping_entries_rejected(self, tmp_path, name):
        with pytest.raises(ArchiveError):
            entry_destination(tmp_path, name)


class TestSelectiveExtractor:
    """Test cases for SelectiveExtractor."""

    def test_only_recognized_entries_extracted(self, tmp_path):
        archive = write_zip(tmp_path / "asset.zip", ENTRIES)
        dest = tmp_path / "lib"

        created = SelectiveExtractor(show_progress=False).extract(archive, dest)

        assert all_files(dest) == [
            "webrtc/modules/audio_processing/libwebrtc_audio_processing.a",
            "webrtc/modules/audio_processing/webrtc_audio_processing.pdb",
        ]
        assert len(created) == 2
        assert not (dest / "README.md").exists()
        assert not (dest / "meta").exists()
        assert not (dest / "webrtc" / "modules" / "audio_processing" / "include").exists()

    def test_extracted_bytes_match(self, tmp_path):
        archive = write_zip(tmp_path / "asset.zip", ENTRIES)
        dest = tmp_path / "lib"

        SelectiveExtractor(show_progress=False).extract(archive, dest)

        for name in ENTRIES:
            if is_recognized_entry(name):
                assert (dest / name).read_bytes() == ENTRIES[name]

    def test_backslash_entry_names(self, tmp_path):
        archive = write_zip(tmp_path / "asset.zip", {"webrtc\\modules\\libx.a": b"x"})
        dest = tmp_path / "lib"

        SelectiveExtractor(show_progress=False).extract(archive, dest)

        assert (dest / "webrtc" / "modules" / "libx.a").read_bytes() == b"x"

    def test_nothing_recognized(self, tmp_path):
        archive = write_zip(tmp_path / "asset.zip", {"a.h": b"", "docs/": None})
        dest = tmp_path / "lib"
        dest.mkdir()

        created = SelectiveExtractor(show_progress=False).extract(archive, dest)

        assert created == []
        assert list(dest.iterdir()) == []

    def test_not_a_zip(self, tmp_path):
        bogus = tmp_path / "asset.zip"
        bogus.write_bytes(b"<html>not found</html>")

        with pytest.raises(ArchiveError):
            SelectiveExtractor(show_progress=False).extract(bogus, tmp_path / "lib")

    def test_missing_archive(self, tmp_path):
        with pytest.raises(ArchiveError):
            SelectiveExtractor(show_progress=False).extract(tmp_path / "nope.zip", tmp_path / "lib")


class TestAssetFetcher:
    """Test cases for AssetFetcher."""

    @pytest.fixture
    def release(self):
        return ReleaseAsset("owner", "repo", "v1", "asset.zip")

    def test_fetch_and_extract(self, tmp_path, release):
        def fake_download(url, dest):
            write_zip(dest, ENTRIES)
            return dest

        downloader = Mock()
        downloader.download = Mock(side_effect=fake_download)
        fetcher = AssetFetcher(tmp_path, show_progress=False, downloader=downloader)
        dest = tmp_path / "lib"

        fetcher.fetch_and_extract(release, dest)

        downloader.download.assert_called_once_with(release.url, tmp_path / "asset.zip")
        assert all_files(dest) == [
            "webrtc/modules/audio_processing/libwebrtc_audio_processing.a",
            "webrtc/modules/audio_processing/webrtc_audio_processing.pdb",
        ]
        # The archive is kept after a successful extraction.
        assert (tmp_path / "asset.zip").exists()

    def test_download_failure_skips_extraction(self, tmp_path, release):
        downloader = Mock()
        downloader.download = Mock(side_effect=DownloadError(release.url, status=404))
        extractor = Mock()
        fetcher = AssetFetcher(tmp_path, show_progress=False, downloader=downloader, extractor=extractor)
        dest = tmp_path / "lib"

        with pytest.raises(DownloadError):
            fetcher.fetch_and_extract(release, dest)

        extractor.extract.assert_not_called()
        assert not dest.exists()

    def test_extraction_failure_removes_archive(self, tmp_path, release):
        def fake_download(url, dest):
            dest.write_bytes(b"garbage")
            return dest

        downloader = Mock()
        downloader.download = Mock(side_effect=fake_download)
        fetcher = AssetFetcher(tmp_path, show_progress=False, downloader=downloader)

        with pytest.raises(ArchiveError):
            fetcher.fetch_and_extract(release, tmp_path / "lib")

        assert not (tmp_path / "asset.zip").exists()
