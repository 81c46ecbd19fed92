"""Unit tests for BuildStamp."""

from apbuild.build.build_stamp import STAMP_FILE_NAME, BuildStamp


def make_tree(root):
    (root / "sub").mkdir(parents=True)
    (root / "a.txt").write_text("alpha")
    (root / "sub" / "b.txt").write_text("beta")
    return root


class TestBuildStamp:
    """Test cases for BuildStamp."""

    def test_compute_is_location_independent(self, tmp_path):
        stamp = BuildStamp(tmp_path)
        one = make_tree(tmp_path / "one")
        two = make_tree(tmp_path / "two")

        assert stamp.compute(one, "x") == stamp.compute(two, "x")

    def test_compute_tracks_content_and_names(self, tmp_path):
        stamp = BuildStamp(tmp_path)
        tree = make_tree(tmp_path / "tree")
        before = stamp.compute(tree, "x")

        (tree / "a.txt").write_text("changed")
        after_edit = stamp.compute(tree, "x")
        (tree / "a.txt").rename(tree / "c.txt")
        after_rename = stamp.compute(tree, "x")

        assert len({before, after_edit, after_rename}) == 3

    def test_compute_tracks_description(self, tmp_path):
        stamp = BuildStamp(tmp_path)
        tree = make_tree(tmp_path / "tree")

        assert stamp.compute(tree, "source-build") != stamp.compute(tree, "prebuilt")

    def test_write_read_clear(self, tmp_path):
        stamp = BuildStamp(tmp_path / "out")

        assert stamp.read() == ""
        stamp.write("abc123")

        assert (tmp_path / "out" / STAMP_FILE_NAME).exists()
        assert stamp.read() == "abc123"
        assert stamp.is_current("abc123")
        assert not stamp.is_current("other")

        stamp.clear()
        assert stamp.read() == ""

    def test_empty_fingerprint_never_current(self, tmp_path):
        stamp = BuildStamp(tmp_path)
        stamp.path.write_text("\n")

        assert not stamp.is_current("")
