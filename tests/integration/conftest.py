"""
Integration fixtures: throwaway git repositories built with GitPython.
"""

from pathlib import Path

import pytest
from git import Actor, Repo

AUTHOR = Actor("Depgraph Tests", "tests@example.com")


class GitWorkspace:
    """A temporary repository with helpers to write files and commit."""

    def __init__(self, root: Path):
        self.root = root
        self.repo = Repo.init(root)

    def write(self, relative: str, content: str) -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def remove(self, relative: str) -> None:
        (self.root / relative).unlink()

    def commit(self, message: str) -> str:
        self.repo.git.add(A=True)
        commit = self.repo.index.commit(message, author=AUTHOR, committer=AUTHOR)
        return commit.hexsha


@pytest.fixture
def workspace(tmp_path) -> GitWorkspace:
    return GitWorkspace(tmp_path / "repo")
