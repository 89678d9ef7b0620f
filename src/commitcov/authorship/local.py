"""Local authorship via pygit2 blame."""

from __future__ import annotations

from pathlib import Path, PurePosixPath

import pygit2
import structlog

from commitcov.authorship.errors import AuthorshipError, FileNotTrackedError, NotARepositoryError
from commitcov.authorship.models import AuthorshipMap

logger = structlog.get_logger()

# libgit2 message for paths missing from the blamed tree
_NOT_IN_TREE = "does not exist in the given tree"


def _none_if_empty(value: str | None) -> str | None:
    return value or None


def set_owner_validation(enabled: bool) -> None:
    """Toggle libgit2's repository owner check.

    CI checkouts (e.g. $GITHUB_WORKSPACE in a container) are frequently owned
    by a different uid, which libgit2 rejects like ``git`` rejects a directory
    missing from ``safe.directory``.
    """
    pygit2.option(pygit2.enums.Option.SET_OWNER_VALIDATION, 1 if enabled else 0)


class GitAuthorshipProvider:
    """Blames files in a local repository checkout."""

    def __init__(
        self,
        repo_path: Path | str,
        *,
        ref: str | None = None,
        disable_owner_validation: bool = False,
    ) -> None:
        if disable_owner_validation:
            set_owner_validation(False)

        discovered = pygit2.discover_repository(str(repo_path))
        if discovered is None:
            raise NotARepositoryError(str(repo_path))
        try:
            self._repo = pygit2.Repository(discovered)
        except pygit2.GitError as e:
            raise NotARepositoryError(str(repo_path)) from e

        if self._repo.is_bare or self._repo.workdir is None:
            raise NotARepositoryError(str(repo_path))
        if self._repo.head_is_unborn:
            raise AuthorshipError(f"Repository has no commits: {repo_path}")

        self._workdir = Path(self._repo.workdir).resolve()
        self._newest_commit = self._resolve_ref(ref) if ref else None
        self._authors: dict[pygit2.Oid, tuple[str | None, str | None]] = {}

    @property
    def name(self) -> str:
        return "local"

    @property
    def workdir(self) -> Path:
        return self._workdir

    def _resolve_ref(self, ref: str) -> pygit2.Oid:
        try:
            commit = self._repo.revparse_single(ref).peel(pygit2.Commit)
        except (KeyError, ValueError, pygit2.GitError) as e:
            raise AuthorshipError(f"Reference not found: {ref}") from e
        return commit.id

    def normalize_path(self, path: str) -> str:
        """Map a coverage report path onto a workdir-relative POSIX path."""
        candidate = Path(path.replace("\\", "/"))
        if candidate.is_absolute():
            try:
                candidate = candidate.resolve().relative_to(self._workdir)
            except ValueError:
                return candidate.as_posix()
        return PurePosixPath(candidate.as_posix()).as_posix()

    def get_authorship(self, path: str) -> AuthorshipMap:
        relative = self.normalize_path(path)
        blame = self._blame(path, relative)

        authorship = AuthorshipMap(path=path)
        for hunk in blame:
            commit_id = hunk.final_commit_id
            email, name = self._author_of(commit_id)
            start = hunk.final_start_line_number
            for line in range(start, start + hunk.lines_in_hunk):
                authorship.add_line(line, str(commit_id), email, name)

        logger.debug("local_blame_loaded", path=relative, lines=len(authorship))
        return authorship

    def _blame(self, path: str, relative: str) -> pygit2.Blame:
        kwargs: dict[str, pygit2.Oid] = {}
        if self._newest_commit is not None:
            kwargs["newest_commit"] = self._newest_commit
        try:
            return self._repo.blame(relative, **kwargs)  # type: ignore[arg-type]
        except KeyError as e:
            raise FileNotTrackedError(path, str(e)) from e
        except pygit2.GitError as e:
            if _NOT_IN_TREE in str(e):
                raise FileNotTrackedError(path, str(e)) from e
            raise AuthorshipError(f"Failed to get blame: {e}", path=path) from e
        except (ValueError, OSError) as e:
            raise AuthorshipError(f"Failed to get blame: {e}", path=path) from e

    def _author_of(self, commit_id: pygit2.Oid) -> tuple[str | None, str | None]:
        """Return (email, name) of a commit's author, cached per commit."""
        if commit_id in self._authors:
            return self._authors[commit_id]

        commit = self._repo.get(commit_id)
        if isinstance(commit, pygit2.Commit):
            author = commit.author
            result = (_none_if_empty(author.email), _none_if_empty(author.name))
        else:
            logger.debug("blame_commit_unresolved", commit=str(commit_id))
            result = (None, None)

        self._authors[commit_id] = result
        return result
