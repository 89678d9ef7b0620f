"""Test fixtures for authorship providers."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pygit2
import pytest

CommitFn = Callable[..., pygit2.Oid]


@pytest.fixture
def temp_repo(tmp_path: Path) -> pygit2.Repository:
    """Create an empty temporary git repository."""
    repo_path = tmp_path / "repo"
    repo_path.mkdir()
    repo = pygit2.init_repository(str(repo_path), initial_head="main")
    repo.config["user.name"] = "Test User"
    repo.config["user.email"] = "test@example.com"
    return repo


@pytest.fixture
def commit_file(temp_repo: pygit2.Repository) -> CommitFn:
    """Write a file and commit it as the given author."""

    def _commit(path: str, content: str, *, name: str, email: str) -> pygit2.Oid:
        workdir = Path(temp_repo.workdir)
        target = workdir / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)

        temp_repo.index.add(path)
        temp_repo.index.write()
        tree = temp_repo.index.write_tree()

        author = pygit2.Signature(name, email)
        committer = pygit2.Signature("CI Bot", "ci@example.com")
        parents = [] if temp_repo.head_is_unborn else [temp_repo.head.target]
        return temp_repo.create_commit("HEAD", author, committer, f"Update {path}", tree, parents)

    return _commit
