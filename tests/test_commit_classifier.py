from __future__ import annotations

import pytest

from devcap.utils.commit_classifier import COMMIT_TYPES, CommitClassifier, classify_commit


@pytest.mark.parametrize(
    "message,expected",
    [
        ("feat: add login page", "feat"),
        ("fix(auth): handle expired token", "fix"),
        ("refactor!: drop legacy API", "refactor"),
        ("chore(deps)!: bump everything", "chore"),
        ("FEAT: shouting works too", "feat"),
        ("  docs: leading spaces", "docs"),
        ("perf(db):no space after colon", "perf"),
        ("ci: run on push\n\nLonger body with fix: inside", "ci"),
    ],
)
def test_classify_conventional_messages(message: str, expected: str) -> None:
    assert CommitClassifier.classify(message) == expected


@pytest.mark.parametrize(
    "message",
    [
        "Merge branch 'develop' into main",
        "update readme",
        "feature: not a known type",
        "fix missing colon",
        "fix(unclosed: scope",
        "",
        "\n\nfeat: only on a later line",
    ],
)
def test_classify_unrecognised_messages(message: str) -> None:
    assert classify_commit(message) is None


def test_every_known_type_is_recognised() -> None:
    for commit_type in COMMIT_TYPES:
        assert classify_commit(f"{commit_type}: something") == commit_type


def test_strip_type_prefix() -> None:
    assert CommitClassifier.strip_type_prefix("fix(auth): handle expired token") == "handle expired token"
    assert CommitClassifier.strip_type_prefix("feat!: breaking") == "breaking"
    assert CommitClassifier.strip_type_prefix("plain message\nbody") == "plain message"
