"""
Unit tests for the duplicate resolver and its link fallback.
"""

import os
from unittest.mock import patch

import pytest

from reclaim.dedupe import SymlinkVerificationError, remove_duplicates, replace_with_link, run
from reclaim.registry import scan


class TestRemoveDuplicates:
    """Test cases for remove_duplicates with the default (delete) disposition."""

    def test_duplicate_removed(self, make_ctx, tree, out_lines):
        root = tree({"src/a": "hello", "dst/b": "hello", "dst/keep": "other"})
        ctx = make_ctx()
        stats = run(ctx, [str(root / "src")], [str(root / "dst")])
        assert not (root / "dst" / "b").exists()
        assert (root / "dst" / "keep").exists()
        assert (root / "src" / "a").exists()
        assert out_lines(ctx) == [str(root / "dst" / "b")]
        assert stats.duplicates_found == 1
        assert stats.files_removed == 1
        assert stats.bytes_reclaimed == 5
        assert stats.target_files == 2

    def test_same_file_never_removed(self, make_ctx, tree):
        root = tree({"src/a": "hello"})
        os.link(root / "src" / "a", root / "alias")
        ctx = make_ctx()
        run(ctx, [str(root / "src")], [str(root / "alias"), str(root / "src")])
        assert (root / "alias").exists()
        assert (root / "src" / "a").exists()
        assert ctx.counters.duplicates_found == 0

    def test_target_symlink_is_not_a_candidate(self, make_ctx, tree):
        root = tree({"src/a": "hello", "other": "hello"})
        (root / "dst").mkdir()
        (root / "dst" / "link").symlink_to(root / "other")
        ctx = make_ctx()
        run(ctx, [str(root / "src")], [str(root / "dst")])
        assert os.path.islink(root / "dst" / "link")
        assert (root / "other").exists()

    def test_first_match_in_bucket_wins(self, make_ctx, tree, out_lines):
        root = tree({"src/a": "hello", "src/b": "world", "dst/t": "world"})
        ctx = make_ctx(verbose=True)
        run(ctx, [str(root / "src")], [str(root / "dst" / "t")])
        assert out_lines(ctx) == [
            f"removing {root / 'dst' / 't'} (duplicate of {root / 'src' / 'b'})"
        ]

    def test_dry_run(self, make_ctx, tree, out_lines):
        root = tree({"src/a": "hello", "dst/b": "hello"})
        ctx = make_ctx(dry_run=True, verbose=True)
        run(ctx, [str(root / "src")], [str(root / "dst" / "b")])
        assert (root / "dst" / "b").exists()
        assert out_lines(ctx) == [
            f"would remove {root / 'dst' / 'b'} (duplicate of {root / 'src' / 'a'})"
        ]
        assert ctx.counters.files_removed == 0

    def test_emptied_directory_reclaimed(self, make_ctx, tree):
        root = tree({"src/a": "hello", "dst/sub/b": "hello", "dst/e": ""})
        run(make_ctx(), [str(root / "src")], [str(root / "dst")])
        assert not (root / "dst").exists()

    def test_keep_empties(self, make_ctx, tree):
        root = tree({"src/a": "hello", "dst/sub/b": "hello", "dst/e": ""})
        run(make_ctx(remove_empties=False), [str(root / "src")], [str(root / "dst")])
        assert not (root / "dst" / "sub" / "b").exists()
        assert (root / "dst" / "sub").is_dir()
        assert (root / "dst" / "e").exists()

    def test_unlink_failure_warns_and_continues(self, make_ctx, tree, err_lines):
        root = tree({"src/a": "hello", "src/c": "again", "dst/b": "hello", "dst/d": "again"})
        ctx = make_ctx(remove_empties=False)
        real_unlink = os.unlink

        def flaky_unlink(path, *args, **kwargs):
            if str(path).endswith("b"):
                raise PermissionError("denied")
            return real_unlink(path, *args, **kwargs)

        with patch("reclaim.dedupe.os.unlink", side_effect=flaky_unlink):
            run(ctx, [str(root / "src")], [str(root / "dst")])
        assert (root / "dst" / "b").exists()
        assert not (root / "dst" / "d").exists()
        assert err_lines(ctx) == [f"[WARN] cannot remove {root / 'dst' / 'b'}: denied"]

    def test_comparison_error_is_warned(self, make_ctx, tree, err_lines):
        root = tree({"src/a": "hello", "dst/b": "hello"})
        ctx = make_ctx()
        registry = scan(ctx, [str(root / "src")])
        with patch("reclaim.compare.same_content", side_effect=OSError("io failure")):
            remove_duplicates(ctx, registry, [str(root / "dst" / "b")])
        assert (root / "dst" / "b").exists()
        assert "io failure" in err_lines(ctx)[0]

    def test_dry_run_reports_each_reclaimable_path_once(self, make_ctx, tree, out_lines):
        """Nested passes over the same subtree do not repeat a dry-run report."""
        root = tree({"src/a": "hello", "dst/keep": "data", "dst/sub/e": ""})
        dst = root / "dst"
        (dst / "dangling").symlink_to(root / "nowhere")
        ctx = make_ctx(dry_run=True)
        stats = run(ctx, [str(root / "src")], [str(dst)])
        assert out_lines(ctx) == [
            str(dst / "dangling"),
            str(dst / "sub" / "e"),
            str(dst / "sub"),
        ]
        assert stats.broken_links_removed == 1
        assert stats.empty_files_removed == 1
        assert stats.empty_dirs_removed == 1
        assert os.path.lexists(dst / "dangling")
        assert (dst / "sub" / "e").exists()

    def test_dry_run_previews_emptied_directory(self, make_ctx, tree, out_lines):
        """A directory that only held duplicates is reported as it would be in a real run."""
        root = tree({"src/a": "hello", "dst/b": "hello"})
        dst = root / "dst"
        ctx = make_ctx(dry_run=True)
        run(ctx, [str(root / "src")], [str(dst)])
        assert out_lines(ctx) == [str(dst / "b"), str(dst)]
        assert (dst / "b").exists()
        assert ctx.counters.empty_dirs_removed == 1

        real = make_ctx()
        run(real, [str(root / "src")], [str(dst)])
        assert out_lines(real) == out_lines(ctx)
        assert not dst.exists()

    def test_idempotent(self, make_ctx, tree):
        root = tree({"src/a": "hello", "dst/b": "hello", "dst/c": "unique"})
        run(make_ctx(), [str(root / "src")], [str(root / "dst")])
        second = make_ctx()
        run(second, [str(root / "src")], [str(root / "dst")])
        assert second.counters.duplicates_found == 0
        assert second.counters.files_removed == 0


class TestLinkDisposition:
    """Test cases for hard link and symlink replacement."""

    def test_hard_link(self, make_ctx, tree):
        root = tree({"src/a": "hello", "dst/b": "hello"})
        ctx = make_ctx(hard_link_duplicates=True)
        run(ctx, [str(root / "src")], [str(root / "dst")])
        a = os.stat(root / "src" / "a")
        b = os.lstat(root / "dst" / "b")
        assert (a.st_dev, a.st_ino) == (b.st_dev, b.st_ino)
        assert ctx.counters.hard_links == 1

    def test_hard_link_run_is_idempotent(self, make_ctx, tree):
        root = tree({"src/a": "hello", "dst/b": "hello"})
        run(make_ctx(hard_link_duplicates=True), [str(root / "src")], [str(root / "dst")])
        second = make_ctx(hard_link_duplicates=True)
        run(second, [str(root / "src")], [str(root / "dst")])
        assert second.counters.duplicates_found == 0

    def test_symlink(self, make_ctx, tree):
        root = tree({"src/a": "hello", "dst/sub/b": "hello"})
        ctx = make_ctx(symlink_only=True)
        run(ctx, [str(root / "src")], [str(root / "dst")])
        b = root / "dst" / "sub" / "b"
        assert b.is_symlink()
        assert os.readlink(b) == os.path.join("..", "..", "src", "a")
        assert b.read_text() == "hello"
        assert ctx.counters.symlinks == 1

    def test_symlink_only_beats_hard_link(self, make_ctx, tree):
        root = tree({"src/a": "hello", "dst/b": "hello"})
        ctx = make_ctx(hard_link_duplicates=True, symlink_only=True)
        run(ctx, [str(root / "src")], [str(root / "dst")])
        assert (root / "dst" / "b").is_symlink()
        assert ctx.counters.hard_links == 0

    def test_hard_link_failure_falls_back(self, make_ctx, tree, err_lines):
        root = tree({"src/a": "hello", "dst/b": "hello"})
        ctx = make_ctx(hard_link_duplicates=True, verbose=True)
        with patch("reclaim.dedupe.os.link", side_effect=OSError(18, "Invalid cross-device link")):
            run(ctx, [str(root / "src")], [str(root / "dst")])
        assert (root / "dst" / "b").is_symlink()
        assert (root / "dst" / "b").read_text() == "hello"
        assert ctx.counters.hard_link_fallbacks == 1
        assert any("using a symlink" in line for line in err_lines(ctx))

    def test_links_skip_reclamation(self, make_ctx, tree):
        root = tree({"src/a": "hello", "dst/b": "hello", "dst/e": ""})
        run(make_ctx(symlink_only=True), [str(root / "src")], [str(root / "dst")])
        assert (root / "dst" / "e").exists()

    def test_symlink_failure_is_fatal(self, make_ctx, tree):
        root = tree({"src/a": "hello", "dst/b": "hello", "dst/c": "hello"})
        ctx = make_ctx(symlink_only=True)
        with patch("reclaim.dedupe.os.symlink", side_effect=OSError("read-only")):
            with pytest.raises(SymlinkVerificationError):
                run(ctx, [str(root / "src")], [str(root / "dst")])
        # the run stops at the first failure
        assert not (root / "dst" / "b").exists()
        assert (root / "dst" / "c").exists()

    def test_unresolvable_symlink_is_fatal(self, make_ctx, tree):
        root = tree({"src/a": "hello", "dst": None})
        target = str(root / "dst" / "b")
        with patch("reclaim.dedupe.os.path.exists", return_value=False):
            with pytest.raises(SymlinkVerificationError, match="does not resolve"):
                replace_with_link(make_ctx(symlink_only=True), target, str(root / "src" / "a"))
