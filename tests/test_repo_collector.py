from __future__ import annotations

import datetime as dt
from pathlib import Path

from git import GitCommandError

from devcap.analyzers.repo_collector import RepoCommitCollector, collect_project_log, order_branches, order_commits
from devcap.models import BranchLog, CommitInfo, Period, TimeRange
from devcap.utils.period_resolver import resolve_period

from conftest import NOW

HOUR = dt.timedelta(hours=1)
RANGE = TimeRange(NOW - 24 * HOUR, NOW)


def _commit(hash_: str, hours_ago: float, message: str = "msg") -> CommitInfo:
    return CommitInfo(hash=hash_, message=message, timestamp=NOW - dt.timedelta(hours=hours_ago))


class FakeGit:
    """In-memory git manager: {branch: [CommitInfo] or Exception}."""

    def __init__(self, branches, list_error=None):
        self.branches = branches
        self.list_error = list_error

    def list_branches(self, repo_path):
        if self.list_error:
            raise self.list_error
        return list(self.branches)

    def list_commits(self, repo_path, branch, time_range, author=None):
        result = self.branches[branch]
        if isinstance(result, Exception):
            raise result
        return list(result)


def test_order_commits_newest_first_with_hash_tiebreak() -> None:
    commits = [_commit("b", 2), _commit("c", 1), _commit("a", 2)]
    assert [c.hash for c in order_commits(commits)] == ["c", "a", "b"]


def test_order_branches_primary_first() -> None:
    branches = [BranchLog("develop"), BranchLog("master"), BranchLog("alpha"), BranchLog("main")]
    assert [b.name for b in order_branches(branches)] == ["main", "master", "alpha", "develop"]


def test_collect_real_repository_lists_shared_commit_under_each_branch(make_repo) -> None:
    builder = make_repo("my-project")
    shared = builder.commit("feat: shared work", NOW - 3 * HOUR)
    builder.branch("feature", shared)
    builder.commit_on("feature", "fix: feature only", NOW - 2 * HOUR)
    builder.commit("docs: main only", NOW - HOUR)

    project = RepoCommitCollector().collect(builder.path, RANGE)

    assert project is not None
    assert project.project == "my-project"
    assert Path(project.path).is_absolute()
    assert project.origin is None
    assert [b.name for b in project.branches] == ["main", "feature"]

    main, feature = project.branches
    assert [c.message for c in main.commits] == ["docs: main only", "feat: shared work"]
    assert [c.message for c in feature.commits] == ["fix: feature only", "feat: shared work"]
    assert main.commits[-1].hash == feature.commits[-1].hash == shared.hexsha
    assert project.total_commits() == 3


def test_collect_returns_none_without_qualifying_commits(make_repo) -> None:
    builder = make_repo("old")
    builder.commit("ancient", NOW - 30 * 24 * HOUR)
    assert collect_project_log(builder.path, RANGE) is None


def test_branches_without_commits_are_omitted() -> None:
    fake = FakeGit({"main": [_commit("a", 1)], "stale": []})
    project = RepoCommitCollector(fake).collect("/tmp/repo", RANGE)
    assert [b.name for b in project.branches] == ["main"]
    assert all(b.commits for b in project.branches)


def test_failing_branch_is_skipped() -> None:
    error = GitCommandError(["git", "log"], 128, b"fatal: bad object")
    fake = FakeGit({"broken": error, "main": [_commit("a", 1)]})
    project = RepoCommitCollector(fake).collect("/tmp/repo", RANGE)
    assert project is not None
    assert [b.name for b in project.branches] == ["main"]


def test_repository_is_skipped_when_every_branch_fails() -> None:
    error = GitCommandError(["git", "log"], 128, b"fatal")
    fake = FakeGit({"main": error, "dev": error})
    assert RepoCommitCollector(fake).collect("/tmp/repo", RANGE) is None


def test_repository_is_skipped_when_branches_cannot_be_listed() -> None:
    fake = FakeGit({}, list_error=OSError("permission denied"))
    assert RepoCommitCollector(fake).collect("/tmp/repo", RANGE) is None


def test_repository_without_branches_is_skipped() -> None:
    assert RepoCommitCollector(FakeGit({})).collect("/tmp/repo", RANGE) is None


def test_project_name_is_directory_basename() -> None:
    fake = FakeGit({"main": [_commit("a", 1)]})
    project = RepoCommitCollector(fake).collect("/tmp/work/Client-API", RANGE)
    assert project.project == "Client-API"
    assert project.path == str(Path("/tmp/work/Client-API"))


def test_rebased_commit_is_reported_on_the_day_it_was_committed(make_repo) -> None:
    builder = make_repo("rebased")
    builder.commit("refactor: moved onto main", NOW - 20 * HOUR, committed=NOW - 2 * HOUR)

    today = collect_project_log(builder.path, resolve_period(Period.today(), NOW))
    yesterday = collect_project_log(builder.path, resolve_period(Period.yesterday(), NOW))

    assert today is not None
    assert [c.message for c in today.branches[0].commits] == ["refactor: moved onto main"]
    assert yesterday is None
