# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Ordered branch matching rules and the built-in strategies.

A rule pairs a branch name pattern with the target branch the version is
computed against, a label resolver for the prerelease qualifier and a version
modifier that bumps the target's version. Rules are tested in order against
the full branch name and the first match wins.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from semver import Version

from gitsemver.branch import DEVELOP, MAIN, Branch, sanitized_label
from gitsemver.errors import Err, ErrorKind, Ok, Result, SemverError
from gitsemver.stages import Scope

if TYPE_CHECKING:
    from gitsemver.calculator import ContextProvider

logger = logging.getLogger(__name__)

# (prerelease label, build metadata)
Labels = tuple[str, str]
LabelResolver = Callable[[Branch, "ContextProvider"], Labels]
VersionModifier = Callable[[Version], Version]

NO_LABELS: Labels = ("", "")


@dataclass(frozen=True)
class BranchMatchingRule:
    """One entry of a branch matching strategy."""

    pattern: str | re.Pattern[str]
    target_branch: Branch
    label_resolver: LabelResolver
    version_modifier: VersionModifier

    def matches(self, branch_name: str) -> bool:
        """Test the whole branch name against the rule pattern."""
        return re.fullmatch(self.pattern, branch_name) is not None

    def describe(self) -> str:
        pattern = self.pattern.pattern if isinstance(self.pattern, re.Pattern) else self.pattern
        return f"/{pattern}/ -> {self.target_branch}"


def no_label(current: Branch, ops: ContextProvider) -> Labels:
    """Label resolver for branches that never carry a prerelease."""
    return NO_LABELS


def branch_label(current: Branch, ops: ContextProvider) -> Labels:
    """Label resolver using the sanitised current branch name."""
    return sanitized_label(current), ""


def fixed_label(label: str, build: str = "") -> LabelResolver:
    """Build a label resolver that always returns ``label``.

    Examples:
        >>> fixed_label("beta")(Branch("develop"), None)
        ('beta', '')
        >>> fixed_label("rc", build="ci")(Branch("rc/1.2"), None)
        ('rc', 'ci')
    """

    def resolve(current: Branch, ops: ContextProvider) -> Labels:
        return label, build

    return resolve


def resolve_rule(branch_name: str, rules: Sequence[BranchMatchingRule]) -> Result[BranchMatchingRule]:
    """Return the first rule whose pattern matches the full branch name.

    Args:
        branch_name: Name of the branch being versioned.
        rules: Rules in evaluation order.

    Returns:
        Ok with the first matching rule, or Err(NO_MATCHING_BRANCH_RULE).
    """
    for index, rule in enumerate(rules):
        if rule.matches(branch_name):
            logger.debug("Branch '%s' matched rule %d %s", branch_name, index, rule.describe())
            return Ok(rule)

    return Err(
        SemverError(
            ErrorKind.NO_MATCHING_BRANCH_RULE,
            f"none of the {len(rules)} branch matching rules match",
            branch=branch_name,
        )
    )


def flat_strategy(
    version_modifier: VersionModifier = Scope.PATCH.bump,
    main_branch: Branch = MAIN,
) -> list[BranchMatchingRule]:
    """Rules for a single authoritative branch.

    The main branch versions itself; ``rc/`` branches are labelled ``rc``;
    every other branch is labelled with its own sanitised name. All of them
    target the main branch.

    Args:
        version_modifier: Bump applied to the main branch version.
        main_branch: The authoritative branch, ``main`` or ``master``.
    """
    return [
        BranchMatchingRule(re.escape(main_branch.name), main_branch, no_label, version_modifier),
        BranchMatchingRule(r"rc/.*", main_branch, fixed_label("rc"), version_modifier),
        BranchMatchingRule(r".*", main_branch, branch_label, version_modifier),
    ]


def flow_strategy(
    version_modifier: VersionModifier = Scope.PATCH.bump,
    main_branch: Branch = MAIN,
    develop_branch: Branch = DEVELOP,
) -> list[BranchMatchingRule]:
    """Rules for a main + develop branching model.

    ``develop``, ``rc/*`` and ``hotfix/*`` target main; ``feature/*`` and any
    other branch target develop.

    Args:
        version_modifier: Bump applied to the target branch version.
        main_branch: The release branch, ``main`` or ``master``.
        develop_branch: The integration branch.
    """
    return [
        BranchMatchingRule(re.escape(main_branch.name), main_branch, no_label, version_modifier),
        BranchMatchingRule(re.escape(develop_branch.name), main_branch, fixed_label("beta"), version_modifier),
        BranchMatchingRule(r"rc/.*", main_branch, fixed_label("rc"), version_modifier),
        BranchMatchingRule(r"hotfix/.*", main_branch, branch_label, version_modifier),
        BranchMatchingRule(r"feature/.*", develop_branch, branch_label, version_modifier),
        BranchMatchingRule(r".*", develop_branch, branch_label, version_modifier),
    ]
