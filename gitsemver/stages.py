# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Release stage and bump scope vocabulary.

``Scope`` selects which SemVer component is incremented, ``Stage`` controls
whether and how a prerelease qualifier is attached to a computed version.

References:
    - Semantic Versioning 2.0.0, prerelease: https://semver.org/#spec-item-9
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

from semver import Version

from gitsemver.errors import Err, ErrorKind, Ok, Result, SemverError

logger = logging.getLogger(__name__)

SNAPSHOT_LABEL = "SNAPSHOT"


class Stage(Enum):
    """Release channel of a computed version."""

    ALPHA = "alpha"
    BETA = "beta"
    RC = "rc"
    FINAL = "final"
    SNAPSHOT = "snapshot"
    BRANCH = "branch"

    @property
    def qualified(self) -> bool:
        """Whether versions in this stage receive a commit count qualifier."""
        return self not in (Stage.FINAL, Stage.SNAPSHOT)


class Scope(Enum):
    """SemVer component affected by a version bump."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"

    def bump(self, version: Version) -> Version:
        """Return the next version for this scope.

        Examples:
            >>> Scope.MINOR.bump(Version(1, 2, 3))
            Version(major=1, minor=3, patch=0, prerelease=None, build=None)
        """
        if self is Scope.MAJOR:
            return version.bump_major()
        if self is Scope.MINOR:
            return version.bump_minor()
        return version.bump_patch()


def parse_stage(token: str | None, default: Stage = Stage.BRANCH) -> Result[Stage]:
    """Parse a stage token, case-insensitively.

    Args:
        token: The configured stage name, or None to use ``default``.
        default: Stage returned when no token is configured.

    Returns:
        Ok with the Stage, or Err(INVALID_STAGE) for an unknown token.

    Examples:
        >>> parse_stage("RC").value
        <Stage.RC: 'rc'>
        >>> parse_stage("nightly").is_ok
        False
    """
    if token is None:
        return Ok(default)
    try:
        return Ok(Stage(token.strip().lower()))
    except ValueError:
        valid = ", ".join(stage.value for stage in Stage)
        return Err(SemverError(ErrorKind.INVALID_STAGE, f"invalid stage '{token}', valid values: {valid}"))


def parse_scope(token: str | None) -> Result[Scope | None]:
    """Parse an optional scope token, case-insensitively.

    Returns:
        Ok(None) when no token is configured, Ok with the Scope, or
        Err(INVALID_SCOPE) for an unknown token.
    """
    if token is None:
        return Ok(None)
    try:
        return Ok(Scope(token.strip().lower()))
    except ValueError:
        valid = ", ".join(scope.value for scope in Scope)
        return Err(SemverError(ErrorKind.INVALID_SCOPE, f"invalid scope '{token}', valid values: {valid}"))


def stage_label(stage: Stage, branch_label: str) -> str | None:
    """Return the prerelease label a stage puts on a non-authoritative version.

    ``BRANCH`` uses the label resolved from the branch, ``FINAL`` has none.

    Examples:
        >>> stage_label(Stage.BRANCH, "my-feature")
        'my-feature'
        >>> stage_label(Stage.BETA, "my-feature")
        'beta'
        >>> stage_label(Stage.FINAL, "my-feature") is None
        True
    """
    if stage is Stage.FINAL:
        return None
    if stage is Stage.SNAPSHOT:
        return SNAPSHOT_LABEL
    if stage is Stage.BRANCH:
        return branch_label
    return stage.value


def qualify(stage: Stage, version: Version, commit_count: Callable[[], Result[int]]) -> Result[Version]:
    """Append the commit count to the prerelease of ``version``.

    ``commit_count`` is only invoked when the stage needs a qualifier, since
    counting may require walking repository history.

    Args:
        stage: Effective stage of the current branch.
        version: Candidate version, already carrying its prerelease label.
        commit_count: Deferred lookup of commits since the branch point.

    Returns:
        Ok with ``version`` unchanged for FINAL and SNAPSHOT, otherwise Ok with
        the prerelease rewritten to ``<prerelease>.<count>``. A failing lookup
        is returned as is.

    Examples:
        >>> qualify(Stage.RC, Version(1, 2, 4, "rc"), lambda: Ok(2)).value
        Version(major=1, minor=2, patch=4, prerelease='rc.2', build=None)
    """
    if not stage.qualified:
        return Ok(version)

    count = commit_count()
    if not count.is_ok:
        return count
    if count.value < 0:
        return Err(
            SemverError(ErrorKind.COLLABORATOR_FAILURE, f"negative commit count {count.value} reported")
        )

    logger.debug("Qualifying %s with %d commits since branch point", version, count.value)
    return Ok(version.replace(prerelease=f"{version.prerelease}.{count.value}"))
