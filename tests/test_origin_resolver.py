from __future__ import annotations

import pytest
from git import GitCommandError

from devcap.utils.origin_resolver import (
    BITBUCKET,
    BITBUCKET_SERVER,
    GITHUB,
    GITHUB_ENTERPRISE,
    GITLAB,
    GITLAB_SELF_HOSTED,
    OriginResolver,
    classify_remote_url,
    split_remote_url,
)

from conftest import NOW


@pytest.mark.parametrize(
    "url,expected",
    [
        ("git@github.com:user/repo.git", GITHUB),
        ("https://github.com/user/repo.git", GITHUB),
        ("https://www.github.com/user/repo", GITHUB),
        ("ssh://git@github.com/user/repo.git", GITHUB),
        ("git@gitlab.com:group/sub/repo.git", GITLAB),
        ("https://gitlab.com/group/repo", GITLAB),
        ("git@bitbucket.org:team/repo.git", BITBUCKET),
        ("https://user@bitbucket.org/team/repo.git", BITBUCKET),
        ("git@gitlab.mycompany.io:team/repo.git", GITLAB_SELF_HOSTED),
        ("https://github.acme.corp/org/repo.git", GITHUB_ENTERPRISE),
        ("https://bitbucket.internal.net/scm/proj/repo.git", BITBUCKET_SERVER),
        ("ssh://git@scm.example.net:7999/scm/proj/repo.git", BITBUCKET_SERVER),
        ("git@git.example.com:team/repo.git", "git.example.com"),
        ("https://Code.Example.ORG/team/repo", "code.example.org"),
    ],
)
def test_classify_remote_url(url: str, expected: str) -> None:
    assert classify_remote_url(url) == expected


@pytest.mark.parametrize("url", ["", "   ", "not a url", "file:///tmp/repo.git", "/local/path/repo.git", "https:///no-host"])
def test_malformed_or_local_urls_have_no_origin(url: str) -> None:
    assert classify_remote_url(url) is None


def test_lookalike_domain_is_not_public_host() -> None:
    assert classify_remote_url("https://notgithub.com/u/r") == GITHUB_ENTERPRISE
    assert classify_remote_url("https://gitlab.com.evil.io/u/r") == GITLAB_SELF_HOSTED


def test_split_remote_url() -> None:
    assert split_remote_url("git@GitHub.com:user/repo.git") == ("github.com", "user/repo.git")
    assert split_remote_url("https://host.example/a/b") == ("host.example", "/a/b")


class _FakeGit:
    def __init__(self, url=None, error=None):
        self.url = url
        self.error = error

    def get_remote_url(self, repo_path):
        if self.error:
            raise self.error
        return self.url


def test_resolver_uses_git_manager() -> None:
    assert OriginResolver(_FakeGit("git@github.com:a/b.git")).resolve("/x") == GITHUB
    assert OriginResolver(_FakeGit(None)).resolve("/x") is None
    assert OriginResolver(_FakeGit("??")).resolve("/x") is None


def test_resolver_query_error_is_absent_origin() -> None:
    error = GitCommandError(["git", "remote"], 128, b"fatal")
    assert OriginResolver(_FakeGit(error=error)).resolve("/x") is None
    assert OriginResolver(_FakeGit(error=OSError("gone"))).resolve("/x") is None


def test_resolver_on_real_repository(make_repo) -> None:
    builder = make_repo("proj")
    builder.commit("init", NOW)
    assert OriginResolver().resolve(builder.path) is None

    builder.repo.create_remote("origin", "https://gitlab.com/team/proj.git")
    assert OriginResolver().resolve(builder.path) == GITLAB
