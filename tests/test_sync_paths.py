"""Tests for the relative path model."""

import pytest

from adbsink.sync.paths import ROOT, RelativePath, compare, join, to_relative


class TestParse:
    """Tests for RelativePath.parse normalization."""

    def test_strips_leading_and_trailing_separators(self):
        assert RelativePath.parse("/a//b/").parts == ("a", "b")

    def test_accepts_backslashes(self):
        assert RelativePath.parse("a\\b\\c.txt").parts == ("a", "b", "c.txt")

    def test_drops_current_dir_segments(self):
        assert RelativePath.parse("./a/./b").parts == ("a", "b")

    def test_empty_string_is_root(self):
        assert RelativePath.parse("") == ROOT
        assert RelativePath.parse("/") == ROOT

    def test_rejects_parent_references(self):
        with pytest.raises(ValueError, match="Parent references"):
            RelativePath.parse("a/../b")

    def test_rejects_invalid_segments(self):
        with pytest.raises(ValueError):
            RelativePath(("a/b",))
        with pytest.raises(ValueError):
            RelativePath(("",))

    def test_to_relative_accepts_both_forms(self):
        path = RelativePath(("a", "b"))
        assert to_relative(path) is path
        assert to_relative("a/b") == path


class TestOrdering:
    """Tests for the total order used by listings and the merge."""

    def test_parent_sorts_before_children(self):
        parent = RelativePath.parse("a")
        child = RelativePath.parse("a/x.txt")
        assert parent < child
        assert compare(parent, child) == -1
        assert compare(child, parent) == 1

    def test_equal_paths(self):
        assert compare(RelativePath.parse("a/b"), RelativePath.parse("a//b")) == 0

    def test_segments_compare_individually(self):
        # As plain strings "a-b" < "a/x.txt" because '-' < '/'; segment-wise
        # the whole subtree of "a" comes first.
        paths = [
            RelativePath.parse(p)
            for p in ["b.txt", "a-b", "a/x.txt", "a.txt", "a", "a/sub/y"]
        ]
        assert [p.as_posix() for p in sorted(paths)] == [
            "a",
            "a/sub/y",
            "a/x.txt",
            "a-b",
            "a.txt",
            "b.txt",
        ]

    def test_sorted_listing_is_pre_order(self):
        paths = sorted(
            RelativePath.parse(p) for p in ["z/1", "z", "m/n/o", "m/n", "m"]
        )
        for index, path in enumerate(paths):
            for earlier in paths[:index]:
                assert not earlier.is_descendant_of(path)


class TestHelpers:
    """Tests for join and the navigation helpers."""

    def test_join(self):
        assert join("/sdcard", RelativePath.parse("a/b.txt")) == "/sdcard/a/b.txt"
        assert join("/sdcard/", "a") == "/sdcard/a"

    def test_join_root(self):
        assert join("/sdcard/DCIM", ROOT) == "/sdcard/DCIM"

    def test_name_parent_child(self):
        path = RelativePath.parse("a/b/c.txt")
        assert path.name == "c.txt"
        assert path.parent == RelativePath.parse("a/b")
        assert path.parent.child("d") == RelativePath.parse("a/b/d")
        assert path.depth == 3
        assert ROOT.parent == ROOT
        assert ROOT.name == ""

    def test_is_descendant_of(self):
        a = RelativePath.parse("a")
        assert RelativePath.parse("a/b").is_descendant_of(a)
        assert RelativePath.parse("a/b/c").is_descendant_of(a)
        assert not a.is_descendant_of(a)
        assert not RelativePath.parse("ab").is_descendant_of(a)
        assert a.is_descendant_of(ROOT)

    def test_str(self):
        assert str(RelativePath.parse("a/b")) == "a/b"
        assert str(ROOT) == "."
