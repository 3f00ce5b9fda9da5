# Copyright (c) 2026 Mark Ferrell. MIT License.
"""GitHub API wrapper for the read-only repository queries of a calculation.

References:
    - GitHub REST API: https://docs.github.com/en/rest
    - PyGithub Documentation: https://pygithub.readthedocs.io/
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from typing import TYPE_CHECKING

from github import Github

if TYPE_CHECKING:
    from github.Commit import Commit
    from github.Tag import Tag


class GitHubAPI:
    """Wrapper around PyGithub for tag and commit history lookups.

    Handles authentication via token input, defaulting to GITHUB_TOKEN
    environment variable if not provided.

    References:
        - Authentication: https://docs.github.com/en/rest/authentication
        - GITHUB_TOKEN: https://docs.github.com/en/actions/security-for-github-actions/security-guides/automatic-token-authentication
    """

    def __init__(self, token: str | None = None, repository: str | None = None) -> None:
        """Initialize the GitHub API client.

        Args:
            token: GitHub token for authentication. Defaults to GITHUB_TOKEN env var.
            repository: Repository in 'owner/repo' format. Defaults to GITHUB_REPOSITORY env var.

        References:
            - Get a repository: https://docs.github.com/en/rest/repos/repos#get-a-repository
        """
        self._token = token or os.environ.get("GITHUB_TOKEN", "")
        self._repository = repository or os.environ.get("GITHUB_REPOSITORY", "")

        if not self._token:
            raise ValueError("GitHub token is required. Set GITHUB_TOKEN or pass token parameter.")
        if not self._repository:
            raise ValueError("Repository is required. Set GITHUB_REPOSITORY or pass repository parameter.")

        self._github = Github(self._token)
        self._repo = self._github.get_repo(self._repository)

    def list_tags(self) -> list[Tag]:
        """List all tags in the repository.

        Returns:
            List of Tag objects from the repository.

        References:
            - List repository tags: https://docs.github.com/en/rest/repos/repos#list-repository-tags
        """
        return list(self._repo.get_tags())

    def iter_branch_commits(self, branch_name: str) -> Iterator[Commit]:
        """Iterate the commits reachable from a branch, newest first.

        Pages are fetched lazily, so callers that stop early avoid walking
        the whole history.

        Args:
            branch_name: Name of the branch (e.g., 'develop').

        Raises:
            GithubException: If branch doesn't exist or access fails.

        References:
            - List commits: https://docs.github.com/en/rest/commits/commits#list-commits
        """
        return iter(self._repo.get_commits(sha=branch_name))

    def commits_ahead(self, base: str, head: str) -> int:
        """Count the commits on ``head`` that are not reachable from ``base``.

        Args:
            base: Branch the head diverged from.
            head: Branch being measured.

        Returns:
            Number of commits ``head`` is ahead of their merge base.

        Raises:
            GithubException: If either ref doesn't exist or access fails.

        References:
            - Compare two commits: https://docs.github.com/en/rest/commits/commits#compare-two-commits
        """
        return self._repo.compare(base, head).ahead_by
