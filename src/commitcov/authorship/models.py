"""Per-line authorship data models."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class BlameLine:
    """The commit and author last responsible for one line.

    Email or name is None when the source could not resolve it (for example
    synthetic merge commits). Keep None here; "unknown" is a display value.
    """

    line: int
    commit_id: str
    email: str | None = None
    name: str | None = None

    @property
    def display_email(self) -> str:
        return self.email or UNKNOWN

    @property
    def display_name(self) -> str:
        return self.name or UNKNOWN

    def __str__(self) -> str:
        return f"{self.line}: {self.commit_id} ({self.name or ''} <{self.email or ''}>)"


@dataclass(slots=True)
class AuthorshipMap:
    """Blame for one file, keyed by 1-based line number."""

    path: str
    lines: dict[int, BlameLine] = field(default_factory=dict)

    def add_line(
        self,
        line: int,
        commit_id: str,
        email: str | None,
        name: str | None,
    ) -> None:
        self.lines[line] = BlameLine(line, commit_id, email, name)

    @classmethod
    def from_lines(cls, path: str, lines: Iterable[BlameLine]) -> AuthorshipMap:
        return cls(path=path, lines={bl.line: bl for bl in lines})

    @property
    def authors(self) -> set[str | None]:
        """Distinct author emails (None included when present)."""
        return {bl.email for bl in self.lines.values()}

    def __len__(self) -> int:
        return len(self.lines)
