"""Modelli per il report gerarchico progetto -> branch -> commit."""

import datetime
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .commit_info import CommitInfo

PRIMARY_BRANCHES = ('main', 'master')


@dataclass(frozen=True)
class BranchLog:
    """Commit qualificanti di un branch locale, dal più recente."""
    name: str
    commits: Tuple[CommitInfo, ...] = ()

    def latest_timestamp(self) -> Optional[datetime.datetime]:
        if not self.commits:
            return None
        return self.commits[0].timestamp

    @property
    def is_primary(self) -> bool:
        return self.name in PRIMARY_BRANCHES


@dataclass(frozen=True)
class ProjectLog:
    """
    Risultato della raccolta per un repository.

    Un commit raggiungibile da più branch compare sotto ognuno di essi, ma
    total_commits() lo conta una sola volta.
    """
    project: str
    path: str
    branches: Tuple[BranchLog, ...] = field(default_factory=tuple)
    origin: Optional[str] = None

    def total_commits(self) -> int:
        return len(self.commit_hashes())

    def commit_hashes(self) -> set:
        return {commit.hash for branch in self.branches for commit in branch.commits}

    def latest_timestamp(self) -> Optional[datetime.datetime]:
        timestamps = [ts for ts in (b.latest_timestamp() for b in self.branches) if ts is not None]
        return max(timestamps) if timestamps else None

    def sort_key(self):
        return (self.project.lower(), self.path)
