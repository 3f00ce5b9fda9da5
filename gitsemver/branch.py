# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Branch references, role classification and label sanitisation.

Every string is a valid branch name. The role of a branch is derived from
well-known names (``main``, ``master``, ``develop``) and prefix conventions
(``feature/``, ``hotfix/``); everything else is generic.

References:
    - Semantic Versioning 2.0.0, prerelease identifiers: https://semver.org/#spec-item-9
    - git-check-ref-format: https://git-scm.com/docs/git-check-ref-format
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

MAIN_BRANCH_NAMES = ("main", "master")
DEVELOP_BRANCH_NAME = "develop"
FEATURE_PREFIX = "feature/"
HOTFIX_PREFIX = "hotfix/"

# Anything outside [0-9A-Za-z-_.] is not allowed in a prerelease identifier.
# Underscores are kept, matching how branch labels have always been rendered.
UNSAFE_LABEL_CHARS = re.compile(r"[^0-9A-Za-z_.-]")

# Characters invalid in git refs (branch names and tags)
# See: https://git-scm.com/docs/git-check-ref-format
INVALID_PREFIX_CHARS = ["..", "~", "^", ":", "\\", " ", "\t", "\n", "*", "?", "["]


class BranchRole(Enum):
    """Role a branch plays in the branching model."""

    MAIN = "main"
    DEVELOP = "develop"
    FEATURE = "feature"
    HOTFIX = "hotfix"
    GENERIC = "generic"


@dataclass(frozen=True)
class Branch:
    """A branch, identified by its name alone."""

    name: str

    @property
    def role(self) -> BranchRole:
        return classify_role(self.name)

    @property
    def sanitized_name(self) -> str:
        """Full branch name made safe for a prerelease identifier."""
        return sanitize(self.name)

    @property
    def sanitized_name_without_prefix(self) -> str:
        """Branch name with the segment before the first ``/`` removed, then sanitised.

        Examples:
            >>> Branch("feature/s_something*bla").sanitized_name_without_prefix
            's_something-bla'
            >>> Branch("someuser/sc-145300/build").sanitized_name_without_prefix
            'sc-145300-build'
        """
        _, separator, remainder = self.name.partition("/")
        return sanitize(remainder if separator and remainder else self.name)

    def __str__(self) -> str:
        return self.name


MAIN = Branch("main")
MASTER = Branch("master")
DEVELOP = Branch(DEVELOP_BRANCH_NAME)


def classify_role(name: str) -> BranchRole:
    """Infer the role of a branch from its name.

    Examples:
        >>> classify_role("master")
        <BranchRole.MAIN: 'main'>
        >>> classify_role("feature/login")
        <BranchRole.FEATURE: 'feature'>
        >>> classify_role("rc/1.2")
        <BranchRole.GENERIC: 'generic'>
    """
    if name in MAIN_BRANCH_NAMES:
        return BranchRole.MAIN
    if name == DEVELOP_BRANCH_NAME:
        return BranchRole.DEVELOP
    if name.startswith(FEATURE_PREFIX):
        return BranchRole.FEATURE
    if name.startswith(HOTFIX_PREFIX):
        return BranchRole.HOTFIX
    return BranchRole.GENERIC


def classify(name: str) -> Branch:
    """Create a Branch for ``name``; total over all strings."""
    branch = Branch(name)
    logger.debug("Classified branch '%s' as %s", name, branch.role.value)
    return branch


def sanitize(name: str) -> str:
    """Replace path separators and characters unsafe in a prerelease with ``-``.

    Examples:
        >>> sanitize("feature/my*branch")
        'feature-my-branch'
    """
    return UNSAFE_LABEL_CHARS.sub("-", name)


def sanitized_label(branch: Branch) -> str:
    """Return the default prerelease label for a branch.

    Feature-like branches (feature, hotfix and generic) lose their path prefix;
    main and develop keep their name.

    Examples:
        >>> sanitized_label(Branch("feature/my_weird_feature"))
        'my_weird_feature'
        >>> sanitized_label(Branch("develop"))
        'develop'
    """
    role = branch.role
    if role in (BranchRole.MAIN, BranchRole.DEVELOP):
        return branch.sanitized_name
    if role in (BranchRole.FEATURE, BranchRole.HOTFIX, BranchRole.GENERIC):
        return branch.sanitized_name_without_prefix
    raise AssertionError(f"unhandled branch role {role}")  # pragma: no cover


def validate_prefix(prefix: str) -> bool:
    """Validate that a tag prefix is valid for git tags.

    A valid prefix must be non-empty and must not contain characters that are
    invalid in git refs.

    Args:
        prefix: The prefix string to validate.

    Returns:
        True if the prefix is valid, False otherwise.

    Examples:
        >>> validate_prefix("v")
        True
        >>> validate_prefix("pkg-")
        True
        >>> validate_prefix("")  # Empty - invalid
        False
        >>> validate_prefix("bad..prefix")  # Contains '..' - invalid
        False

    References:
        - git-check-ref-format: https://git-scm.com/docs/git-check-ref-format
    """
    if not prefix:
        logger.warning("Empty prefix provided")
        return False

    for invalid_char in INVALID_PREFIX_CHARS:
        if invalid_char in prefix:
            logger.warning(
                "Prefix '%s' contains invalid character '%s'",
                prefix,
                repr(invalid_char),
            )
            return False

    return True
