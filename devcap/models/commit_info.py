"""Modello per un singolo commit raccolto da un branch."""

import datetime
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CommitInfo:
    """Commit non-merge con il tipo conventional-commit già calcolato."""
    hash: str
    message: str
    timestamp: datetime.datetime  # committer date, timezone-aware
    author: str = ""
    commit_type: Optional[str] = None

    @property
    def short_hash(self) -> str:
        return self.hash[:7]

    def sort_key(self):
        """Chiave per ordinare newest-first con tie-break deterministico sull'hash."""
        return (-self.timestamp.timestamp(), self.hash)
