from __future__ import annotations

import datetime as dt
import itertools
import logging
from pathlib import Path

import pytest
from git import Actor, Repo

JANE = Actor("Jane Doe", "jane@example.com")
JOHN = Actor("John Smith", "john@example.com")

# Wednesday, fixed so that "today", "yesterday" and "week" are deterministic
NOW = dt.datetime(2024, 5, 15, 12, 0, 0).astimezone()


def git_date(moment: dt.datetime) -> str:
    return f"{int(moment.timestamp())} +0000"


class RepoBuilder:
    """Creates commits with explicit dates on a real repository."""

    _counter = itertools.count()

    def __init__(self, path: Path, branch: str = "main") -> None:
        path.mkdir(parents=True, exist_ok=True)
        self.path = path
        self.repo = Repo.init(path)
        self.repo.git.symbolic_ref("HEAD", f"refs/heads/{branch}")

    def commit(self, message: str, when: dt.datetime, author: Actor = JANE, parents=None, head: bool = True,
               committed: dt.datetime = None):
        """`when` is the author date; `committed` defaults to it (a rebase sets it later)."""
        name = f"file{next(self._counter)}.txt"
        (self.path / name).write_text(message + "\n")
        self.repo.index.add([name])
        date = git_date(when)
        return self.repo.index.commit(
            message,
            parent_commits=parents,
            head=head,
            author=author,
            committer=author,
            author_date=date,
            commit_date=git_date(committed or when),
        )

    def branch(self, name: str, start):
        return self.repo.create_head(name, start)

    def commit_on(self, branch_name: str, message: str, when: dt.datetime, author: Actor = JANE):
        head = self.repo.heads[branch_name]
        commit = self.commit(message, when, author=author, parents=[head.commit], head=False)
        head.commit = commit
        return commit

    def merge(self, message: str, when: dt.datetime, other):
        return self.commit(message, when, parents=[self.repo.head.commit, other])


@pytest.fixture
def make_repo(tmp_path: Path):
    repos: list[RepoBuilder] = []

    def _make(relative: str, branch: str = "main") -> RepoBuilder:
        builder = RepoBuilder(tmp_path / relative, branch)
        repos.append(builder)
        return builder

    yield _make

    for builder in repos:
        builder.repo.close()


@pytest.fixture(autouse=True)
def _isolate_config_and_logging(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DEVCAP_CONFIG", str(tmp_path / "no-such-config.json"))
    yield
    logging.disable(logging.NOTSET)
