"""
Filesystem and git source tests
"""

import pytest

from codegraph_depgraph.exceptions import SourceError
from codegraph_depgraph.sources import GitHistorySource, walk_directory

EXTENSIONS = (".ts", ".java")
IGNORED = ("node_modules", "dist", "build", ".git")


class TestWalkDirectory:
    def test_sorted_relative_posix_paths(self, tmp_path):
        (tmp_path / "src" / "b").mkdir(parents=True)
        (tmp_path / "src" / "b" / "z.ts").write_text("class Z {}")
        (tmp_path / "src" / "a.ts").write_text("class A {}")
        (tmp_path / "Main.java").write_text("class Main {}")
        (tmp_path / "notes.txt").write_text("ignored")

        files = walk_directory(tmp_path, EXTENSIONS, IGNORED)

        assert [f.path for f in files] == ["Main.java", "src/a.ts", "src/b/z.ts"]
        assert files[1].content == "class A {}"

    def test_ignored_directories(self, tmp_path):
        for ignored in ("node_modules/pkg", "dist", "build"):
            (tmp_path / ignored).mkdir(parents=True)
            (tmp_path / ignored / "x.ts").write_text("class X {}")
        (tmp_path / "keep.ts").write_text("class Keep {}")

        files = walk_directory(tmp_path, EXTENSIONS, IGNORED)

        assert [f.path for f in files] == ["keep.ts"]

    def test_undecodable_file_skipped(self, tmp_path):
        (tmp_path / "bad.ts").write_bytes(b"\xff\xfe\x00class")
        (tmp_path / "good.ts").write_text("class Good {}")

        assert [f.path for f in walk_directory(tmp_path, EXTENSIONS)] == ["good.ts"]

    def test_missing_directory(self, tmp_path):
        with pytest.raises(SourceError):
            walk_directory(tmp_path / "nope", EXTENSIONS)


class TestGitHistorySource:
    def test_files_at_revision(self, workspace):
        workspace.write("src/a.ts", "class A {}\n")
        first = workspace.commit("first")
        workspace.write("src/a.ts", "class A2 {}\n")
        workspace.write("src/b.ts", "class B {}\n")
        workspace.commit("second")

        source = GitHistorySource(workspace.root)

        assert source.resolve_commit("HEAD~1") == first
        old = source.files_at("HEAD~1", EXTENSIONS, IGNORED)
        assert [(f.path, f.content) for f in old] == [("src/a.ts", "class A {}\n")]
        assert [f.path for f in source.files_at("HEAD", EXTENSIONS, IGNORED)] == ["src/a.ts", "src/b.ts"]

    def test_paths_relative_to_subdirectory(self, workspace):
        workspace.write("services/api/src/a.ts", "class A {}\n")
        workspace.write("services/web/b.ts", "class B {}\n")
        workspace.commit("init")

        source = GitHistorySource(workspace.root / "services" / "api")

        assert [f.path for f in source.files_at("HEAD", EXTENSIONS, IGNORED)] == ["src/a.ts"]

    def test_ignored_directories_at_revision(self, workspace):
        workspace.write("node_modules/lib/x.ts", "class X {}\n")
        workspace.write("y.ts", "class Y {}\n")
        workspace.commit("init")

        files = GitHistorySource(workspace.root).files_at("HEAD", EXTENSIONS, IGNORED)

        assert [f.path for f in files] == ["y.ts"]

    def test_missing_revision(self, workspace):
        workspace.write("a.ts", "class A {}\n")
        workspace.commit("only commit")

        source = GitHistorySource(workspace.root)

        assert source.resolve_commit("HEAD~1") is None
        assert source.files_at("HEAD~1", EXTENSIONS) == []
        assert source.files_at("no-such-branch", EXTENSIONS) == []

    def test_head_sha(self, workspace):
        workspace.write("a.ts", "class A {}\n")
        sha = workspace.commit("init")

        assert GitHistorySource(workspace.root).head_sha() == sha

    def test_empty_repository(self, workspace):
        source = GitHistorySource(workspace.root)

        assert source.is_repository
        assert source.head_sha() is None
        assert source.files_at("HEAD", EXTENSIONS) == []

    def test_not_a_repository(self, tmp_path):
        source = GitHistorySource(tmp_path)

        assert not source.is_repository
        assert source.head_sha() is None
        assert source.files_at("HEAD", EXTENSIONS) == []
