"""Fixtures for CLI tests: a small repository with a matching coverage report."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pygit2
import pytest
import structlog

COVERAGE_XML = """<?xml version="1.0" ?>
<coverage version="7.4.0" lines-valid="5" lines-covered="3" line-rate="0.6" branch-rate="0" complexity="0">
	<packages>
		<package name="src" line-rate="0.6" branch-rate="0" complexity="0">
			<classes>
				<class name="app.py" filename="src/app.py" complexity="0" line-rate="0.75" branch-rate="0">
					<lines>
						<line number="1" hits="1"/>
						<line number="2" hits="0"/>
						<line number="3" hits="1"/>
						<line number="4" hits="1"/>
					</lines>
				</class>
				<class name="generated.py" filename="src/generated.py" complexity="0" line-rate="0" branch-rate="0">
					<lines>
						<line number="1" hits="0"/>
					</lines>
				</class>
			</classes>
		</package>
	</packages>
</coverage>
"""


def _commit(repo: pygit2.Repository, path: str, content: str, name: str, email: str) -> None:
    target = Path(repo.workdir) / path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content)
    repo.index.add(path)
    repo.index.write()
    tree = repo.index.write_tree()
    sig = pygit2.Signature(name, email)
    parents = [] if repo.head_is_unborn else [repo.head.target]
    repo.create_commit("HEAD", sig, sig, f"Update {path}", tree, parents)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Repository where Alice wrote lines 1, 3, 4 of src/app.py and Bob line 2.

    coverage.xml sits untracked in the repository root and also lists
    src/generated.py, which is not committed.
    """
    repo_path = tmp_path / "project"
    repo_path.mkdir()
    repo = pygit2.init_repository(str(repo_path), initial_head="main")

    _commit(repo, "src/app.py", "a = 1\nb = 2\nc = 3\nd = 4\n", "Alice", "alice@example.com")
    _commit(repo, "src/app.py", "a = 1\nb = 20\nc = 3\nd = 4\n", "Bob", "bob@example.com")

    (repo_path / "coverage.xml").write_text(COVERAGE_XML)
    (repo_path / "src" / "generated.py").write_text("x = 1\n")
    return repo_path


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """The CLI configures logging on streams that CliRunner closes afterwards."""
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()
