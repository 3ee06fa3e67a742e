"""
Git History Source

Reads source files as they existed at a revision, using GitPython.

Paths are relative to the scanned directory (not the repository root), so a
revision scan and a working-tree scan of the same directory line up.

A directory outside any repository, an empty repository or an unknown
revision is not an error: it yields no commit and no files.
"""

from collections.abc import Iterable
from pathlib import Path

from git import Repo
from git.exc import BadName, BadObject, GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from codegraph_depgraph.exceptions import SourceError
from codegraph_depgraph.logging import get_logger
from codegraph_depgraph.sources.filesystem import SourceFile, has_extension, is_ignored

logger = get_logger(__name__)

_MISSING_REVISION_ERRORS = (BadName, BadObject, GitCommandError, ValueError)


class GitHistorySource:
    """
    Files of one directory at any revision of its enclosing repository.

    Example:
        source = GitHistorySource("services/api")
        files = source.files_at("HEAD~1", [".ts"], ["node_modules"])
    """

    def __init__(self, repo_dir: str | Path):
        self.directory = Path(repo_dir).resolve()
        self.repo: Repo | None = None
        self.prefix = ""

        try:
            self.repo = Repo(self.directory, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError):
            logger.debug("not_a_git_repository", path=str(self.directory))
            return

        if self.repo.working_tree_dir is None:
            raise SourceError("Bare repositories cannot be scanned", {"path": str(self.directory)})

        root = Path(self.repo.working_tree_dir).resolve()
        relative = self.directory.relative_to(root).as_posix()
        self.prefix = "" if relative == "." else relative + "/"

    @property
    def is_repository(self) -> bool:
        return self.repo is not None

    def resolve_commit(self, ref: str) -> str | None:
        """
        Resolve a revision to its full commit sha.

        Returns:
            Hex sha, or None if there is no repository or the revision does not exist
        """
        if self.repo is None:
            return None
        try:
            return self.repo.commit(ref).hexsha
        except _MISSING_REVISION_ERRORS as e:
            logger.debug("revision_not_found", ref=ref, error=str(e))
            return None

    def head_sha(self) -> str | None:
        """Sha of HEAD, used to stamp working-tree scans."""
        return self.resolve_commit("HEAD")

    def files_at(
        self,
        ref: str,
        extensions: Iterable[str],
        ignored_dirs: Iterable[str] = (),
    ) -> list[SourceFile]:
        """
        Read the scanned directory's files as of a revision.

        Args:
            ref: Any revision git understands (sha, branch, HEAD~1)
            extensions: File suffixes to keep
            ignored_dirs: Directory names to skip

        Returns:
            SourceFiles sorted by path; empty if the revision does not exist
        """
        if self.repo is None:
            return []

        try:
            commit = self.repo.commit(ref)
        except _MISSING_REVISION_ERRORS as e:
            logger.info("revision_not_found", ref=ref, error=str(e))
            return []

        extensions = tuple(extensions)
        ignored_dirs = tuple(ignored_dirs)
        files: list[SourceFile] = []

        for item in commit.tree.traverse():
            if item.type != "blob":
                continue

            path = item.path
            if not path.startswith(self.prefix):
                continue

            relative = path[len(self.prefix) :]
            if not has_extension(relative, extensions) or is_ignored(relative, ignored_dirs):
                continue

            try:
                content = item.data_stream.read().decode("utf-8")
            except UnicodeDecodeError:
                logger.warning("file_read_failed", file=relative, ref=ref, error="not utf-8 text")
                continue

            files.append(SourceFile(path=relative, content=content))

        files.sort(key=lambda f: f.path)
        logger.debug("revision_files_loaded", ref=ref, commit=commit.hexsha, files=len(files))
        return files
