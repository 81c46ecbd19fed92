"""Unit tests for OutputDirLock."""

import os
from unittest.mock import patch

import pytest

from apbuild.build.output_lock import LOCK_FILE_NAME, OutputDirBusyError, OutputDirLock


class TestOutputDirLock:
    """Test cases for OutputDirLock."""

    def test_acquire_and_release(self, tmp_path):
        out_dir = tmp_path / "out"

        with OutputDirLock(out_dir) as lock:
            assert lock.pid_file == out_dir / LOCK_FILE_NAME
            assert lock.pid_file.read_text() == str(os.getpid())

        assert not (out_dir / LOCK_FILE_NAME).exists()

    def test_reacquire_own_lock(self, tmp_path):
        (tmp_path / LOCK_FILE_NAME).write_text(str(os.getpid()))

        with OutputDirLock(tmp_path):
            pass

    @patch("apbuild.build.output_lock.psutil.pid_exists", return_value=True)
    def test_live_owner_is_busy(self, mock_exists, tmp_path):
        (tmp_path / LOCK_FILE_NAME).write_text("424242")

        with pytest.raises(OutputDirBusyError) as exc_info:
            OutputDirLock(tmp_path).acquire()

        assert exc_info.value.pid == 424242
        mock_exists.assert_called_once_with(424242)
        assert (tmp_path / LOCK_FILE_NAME).read_text() == "424242"

    @patch("apbuild.build.output_lock.psutil.pid_exists", return_value=False)
    def test_stale_lock_taken_over(self, mock_exists, tmp_path):
        (tmp_path / LOCK_FILE_NAME).write_text("424242")

        lock = OutputDirLock(tmp_path)
        lock.acquire()

        assert lock.pid_file.read_text() == str(os.getpid())
        lock.release()

    def test_corrupted_lock_taken_over(self, tmp_path):
        (tmp_path / LOCK_FILE_NAME).write_text("not a pid")

        with OutputDirLock(tmp_path) as lock:
            assert lock.pid_file.read_text() == str(os.getpid())

    def test_release_without_acquire(self, tmp_path):
        (tmp_path / LOCK_FILE_NAME).write_text("424242")

        OutputDirLock(tmp_path).release()

        assert (tmp_path / LOCK_FILE_NAME).exists()

    def test_second_lock_in_same_process_is_busy(self, tmp_path):
        first = OutputDirLock(tmp_path)
        second = OutputDirLock(tmp_path)
        first.acquire()

        with pytest.raises(OutputDirBusyError) as exc_info:
            second.acquire()

        assert exc_info.value.pid == os.getpid()
        first.release()
        assert not first.pid_file.exists()

    def test_directory_free_again_after_release(self, tmp_path):
        with OutputDirLock(tmp_path):
            pass

        with OutputDirLock(tmp_path) as lock:
            assert lock.pid_file.exists()
