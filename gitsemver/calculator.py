# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Version calculation from branch structure, tags and commit history.

The calculator resolves the matching rule for the current branch, looks up
the last released version of the rule's target branch, applies the rule's
version modifier and, for non-authoritative branches, qualifies the result
with ``<label>.<commits since branch point>``.

References:
    - Semantic Versioning 2.0.0: https://semver.org/
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from semver import Version

from gitsemver.branch import Branch
from gitsemver.errors import Err, ErrorKind, Ok, Result, SemverError
from gitsemver.matching import BranchMatchingRule, VersionModifier, flat_strategy, resolve_rule
from gitsemver.stages import Stage, parse_scope, parse_stage, qualify, stage_label

logger = logging.getLogger(__name__)

DEFAULT_TAG_PREFIX = "v"
DEFAULT_INITIAL_VERSION = Version(0, 1, 0)


class ContextProvider(Protocol):
    """Repository queries the calculator depends on."""

    def current_branch(self) -> Branch: ...

    def branch_version(self, current: Branch, target: Branch) -> Result[Version | None]:
        """Latest released version reachable from ``target``, or None."""
        ...

    def commits_since_branch_point(self, current: Branch, target: Branch) -> Result[int]:
        """Commits on ``current`` since it diverged from ``target``."""
        ...


@dataclass(frozen=True)
class VersionCalculatorConfig:
    """Inputs of a version calculation besides the repository itself.

    ``scope`` and ``stage`` are kept as raw configuration tokens; they are
    parsed during calculation so an unknown token is reported as a failure.
    """

    tag_prefix: str = DEFAULT_TAG_PREFIX
    initial_version: Version = DEFAULT_INITIAL_VERSION
    branch_matching: Sequence[BranchMatchingRule] = field(default_factory=flat_strategy)
    override_version: Version | None = None
    scope: str | None = None
    stage: str | None = None


def calculate_version(
    current_branch: Branch,
    config: VersionCalculatorConfig,
    ops: ContextProvider,
) -> Result[Version]:
    """Calculate the version of ``current_branch``.

    Args:
        current_branch: Branch being built.
        config: Calculation settings and branch matching rules.
        ops: Repository collaborator.

    Returns:
        Ok with the computed version, or Err describing why no version could
        be computed.

    Examples:
        >>> config = VersionCalculatorConfig(override_version=Version(2, 0, 0))
        >>> calculate_version(Branch("feature/login"), config, None).value
        Version(major=2, minor=0, patch=0, prerelease=None, build=None)
        >>> config = VersionCalculatorConfig(stage="nightly")
        >>> calculate_version(Branch("main"), config, None).error.kind
        <ErrorKind.INVALID_STAGE: 'invalid-stage'>
    """
    if config.override_version is not None:
        logger.info("Using override version %s for branch '%s'", config.override_version, current_branch)
        return Ok(config.override_version)

    stage = parse_stage(config.stage)
    if not stage.is_ok:
        return stage
    scope = parse_scope(config.scope)
    if not scope.is_ok:
        return scope

    matched = resolve_rule(current_branch.name, config.branch_matching)
    if not matched.is_ok:
        return matched
    rule = matched.value

    modifier: VersionModifier = rule.version_modifier
    if scope.value is not None:
        logger.debug("Scope forced to %s for branch '%s'", scope.value.value, current_branch)
        modifier = scope.value.bump

    target = rule.target_branch
    labels = rule.label_resolver(current_branch, ops)

    if current_branch == target:
        return _authoritative_version(current_branch, config, ops, modifier)

    base = _base_version(current_branch, target, config, ops)
    if not base.is_ok:
        return base

    candidate = modifier(base.value)
    logger.debug("Candidate version for '%s' from %s@%s: %s", current_branch, target, base.value, candidate)

    return _qualified_version(current_branch, target, candidate, labels, stage.value, ops)


def _authoritative_version(
    branch: Branch,
    config: VersionCalculatorConfig,
    ops: ContextProvider,
    modifier: VersionModifier,
) -> Result[Version]:
    """Version of a branch that is its own target; never a prerelease."""
    latest = ops.branch_version(branch, branch)
    if not latest.is_ok:
        return latest

    if latest.value is None:
        logger.warning(
            "Unable to determine last version on branch '%s', using initial version %s",
            branch,
            config.initial_version,
        )
        return Ok(config.initial_version)

    version = modifier(latest.value)
    if version.prerelease is not None:
        logger.debug("Dropping prerelease '%s' from authoritative version", version.prerelease)
        version = version.replace(prerelease=None)
    logger.info("Branch '%s' is authoritative, %s -> %s", branch, latest.value, version)
    return Ok(version)


def _base_version(
    current: Branch,
    target: Branch,
    config: VersionCalculatorConfig,
    ops: ContextProvider,
) -> Result[Version]:
    """Last released version of ``target``.

    Only a root authoritative target (one whose own rule targets itself) may
    fall back to the initial version when it has no release yet.
    """
    latest = ops.branch_version(current, target)
    if not latest.is_ok:
        return latest
    if latest.value is not None:
        return Ok(latest.value)

    target_rule = resolve_rule(target.name, config.branch_matching)
    if target_rule.is_ok and target_rule.value.target_branch == target:
        logger.warning(
            "Unable to determine last version on branch '%s', using initial version %s as base",
            target,
            config.initial_version,
        )
        return Ok(config.initial_version)

    return Err(
        SemverError(
            ErrorKind.MISSING_VERSION,
            f"no version tag found on target branch '{target}', '{current}' must branch from a released branch",
            branch=target.name,
        )
    )


def _qualified_version(
    current: Branch,
    target: Branch,
    candidate: Version,
    labels: tuple[str, str],
    stage: Stage,
    ops: ContextProvider,
) -> Result[Version]:
    prerelease_label, build = labels
    label = stage_label(stage, prerelease_label)
    if stage.qualified and not label:
        return Err(
            SemverError(
                ErrorKind.INVALID_LABEL,
                "matching rule resolved an empty prerelease label",
                branch=current.name,
            )
        )

    version = candidate.replace(prerelease=label, build=build or None)
    qualified = qualify(stage, version, lambda: ops.commits_since_branch_point(current, target))
    if qualified.is_ok:
        logger.info("Calculated version %s for branch '%s' (target '%s')", qualified.value, current, target)
    return qualified
