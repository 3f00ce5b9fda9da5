"""Shared pytest fixtures for the test suite."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from semver import Version

from gitsemver.branch import Branch
from gitsemver.calculator import VersionCalculatorConfig
from gitsemver.errors import Ok, Result
from gitsemver.matching import BranchMatchingRule


def make_tag(name: str, commit_sha: str = "default_sha") -> MagicMock:
    """Create a mock tag object with the given name.

    This is a shared helper for creating mock GitHub tag objects
    used across multiple test modules.

    Args:
        name: The tag name (e.g., 'v1.2.0').
        commit_sha: The SHA of the commit the tag points to.
    """
    tag = MagicMock()
    tag.name = name
    tag.commit = MagicMock()
    tag.commit.sha = commit_sha
    return tag


def make_commit(sha: str) -> MagicMock:
    """Create a mock commit object with the given SHA.

    This is a shared helper for creating mock GitHub commit objects
    used across multiple test modules.
    """
    commit = MagicMock()
    commit.sha = sha
    return commit


class FakeContextProvider:
    """In-memory collaborator with fixed branch versions and commit count."""

    def __init__(
        self,
        current: Branch,
        branch_versions: dict[Branch, Version],
        commits_since_branch_point: int = 2,
    ) -> None:
        self._current = current
        self._branch_versions = branch_versions
        self._commits = commits_since_branch_point
        self.version_lookups: list[tuple[Branch, Branch]] = []
        self.count_lookups: list[tuple[Branch, Branch]] = []

    def current_branch(self) -> Branch:
        return self._current

    def branch_version(self, current: Branch, target: Branch) -> Result[Version | None]:
        self.version_lookups.append((current, target))
        return Ok(self._branch_versions.get(target))

    def commits_since_branch_point(self, current: Branch, target: Branch) -> Result[int]:
        self.count_lookups.append((current, target))
        return Ok(self._commits)


def build_config(rules: list[BranchMatchingRule], **kwargs: object) -> VersionCalculatorConfig:
    """Calculator config with the test suite's tag prefix and initial version."""
    return VersionCalculatorConfig(
        "v",
        initial_version=Version(0, 0, 1),
        branch_matching=rules,
        **kwargs,  # type: ignore[arg-type]
    )


@pytest.fixture
def mock_github_api() -> MagicMock:
    """Create a mock GitHubAPI instance for unit tests."""
    mock_api = MagicMock()
    mock_api.list_tags.return_value = []
    mock_api.iter_branch_commits.return_value = iter([])
    mock_api.commits_ahead.return_value = 0
    return mock_api


@pytest.fixture
def mock_github_env(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock GitHub environment variables."""
    env_vars = {
        "GITHUB_ACTIONS": "true",
        "GITHUB_EVENT_NAME": "push",
        "GITHUB_REF_NAME": "feature/login",
        "GITHUB_REF_TYPE": "branch",
        "GITHUB_SHA": "abc123def456",
        "GITHUB_REPOSITORY": "owner/repo",
        "GITHUB_OUTPUT": "/dev/null",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv("GITHUB_HEAD_REF", raising=False)
    return env_vars


@pytest.fixture
def sample_tags() -> list[str]:
    """Sample tag data for testing."""
    return [
        "v1.0.0-rc.1",
        "v1.0.0",
        "v1.0.1",
        "v1.1.0-beta",
        "latest",
        "v2",
        "release-2024",
    ]


@pytest.fixture
def sample_branches() -> dict[str, list[str]]:
    """Sample branch names for testing."""
    return {
        "main": ["main", "master"],
        "develop": ["develop"],
        "feature": ["feature/login", "feature/a/b"],
        "hotfix": ["hotfix/1.2.4", "hotfix/urgent"],
        "generic": ["rc/1.2", "someuser/sc-1/x", "bugfix", "features", "maintenance"],
    }
