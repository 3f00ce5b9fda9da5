# Copyright (c) 2026 Mark Ferrell. MIT License.
"""GitHub-backed repository collaborator and CI environment detection.

References:
    - GitHub Actions Environment Variables:
      https://docs.github.com/en/actions/writing-workflows/choosing-what-your-workflow-does/store-information-in-variables#default-environment-variables
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from github.GithubException import GithubException
from semver import Version

from gitsemver.branch import Branch, classify
from gitsemver.errors import Err, ErrorKind, Ok, Result, SemverError
from gitsemver.tags import latest_version_on_branch, versions_by_commit
from gitsemver.tags import tag_map as build_tag_map

if TYPE_CHECKING:
    from gitsemver.github_api import GitHubAPI

logger = logging.getLogger(__name__)


def github_actions_build() -> bool:
    """Return True when running inside a GitHub Actions job."""
    return os.environ.get("GITHUB_ACTIONS", "") == "true"


def pull_request_event() -> bool:
    """Return True when the triggering event is a pull request."""
    return os.environ.get("GITHUB_EVENT_NAME", "") == "pull_request"


def pull_request_head_ref() -> str | None:
    """Return the source branch of a pull request, if any."""
    return os.environ.get("GITHUB_HEAD_REF") or None


def detect_branch_name() -> str:
    """Name of the branch being built according to the CI environment.

    Pull request builds run on a merge ref, so the head ref names the branch.
    """
    if github_actions_build() and pull_request_event():
        head_ref = pull_request_head_ref()
        if head_ref:
            return head_ref
    return os.environ.get("GITHUB_REF_NAME", "")


class GitHubContextProvider:
    """Answers the calculator's repository queries through the GitHub API.

    One provider serves one calculation: tags are fetched and indexed on first
    use and reused for every later lookup.
    """

    def __init__(self, api: GitHubAPI, branch_name: str, tag_prefix: str = "v") -> None:
        self._api = api
        self._branch = classify(branch_name)
        self._tag_prefix = tag_prefix
        self._tag_map: dict[str, Version] | None = None
        self._commit_versions: dict[str, Version] = {}

    def current_branch(self) -> Branch:
        return self._branch

    def tag_map(self) -> dict[str, Version]:
        """Prefix-stripped tag name to version, fetched once per provider."""
        if self._tag_map is None:
            tags = self._api.list_tags()
            self._tag_map = build_tag_map(tags, self._tag_prefix)
            self._commit_versions = versions_by_commit(tags, self._tag_map, self._tag_prefix)
        return self._tag_map

    def branch_version(self, current: Branch, target: Branch) -> Result[Version | None]:
        """Version of the nearest tagged commit on ``target``."""
        try:
            if not self.tag_map():
                logger.debug("No '%s' version tags, skipping history of '%s'", self._tag_prefix, target)
                return Ok(None)
            version = latest_version_on_branch(self._api.iter_branch_commits(target.name), self._commit_versions)
        except GithubException as e:
            return Err(
                SemverError(
                    ErrorKind.COLLABORATOR_FAILURE,
                    f"failed to read version of '{target}' for '{current}': {e}",
                    branch=target.name,
                )
            )

        logger.debug("Latest version on '%s' (for '%s'): %s", target, current, version)
        return Ok(version)

    def commits_since_branch_point(self, current: Branch, target: Branch) -> Result[int]:
        """Commits on ``current`` that are not on ``target``."""
        try:
            count = self._api.commits_ahead(target.name, current.name)
        except GithubException as e:
            return Err(
                SemverError(
                    ErrorKind.COLLABORATOR_FAILURE,
                    f"failed to compare '{current}' with '{target}': {e}",
                    branch=current.name,
                )
            )

        return Ok(count)
