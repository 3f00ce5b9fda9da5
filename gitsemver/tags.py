# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Version tag discovery.

Tags are named ``{prefix}{major}.{minor}.{patch}[-{prerelease}][+{build}]``.
Tags that do not parse as a prefixed SemVer are ignored: repositories
commonly carry unrelated tags.

References:
    - Semantic Versioning 2.0.0: https://semver.org/
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import TYPE_CHECKING

from semver import Version

if TYPE_CHECKING:
    from github.Commit import Commit
    from github.Tag import Tag

logger = logging.getLogger(__name__)

TAG_REF_PREFIX = "refs/tags/"


def _create_tag_pattern(tag_prefix: str) -> re.Pattern[str]:
    """Create regex pattern capturing the version part of {prefix}X.Y.Z... tags.

    Args:
        tag_prefix: The prefix for tags (e.g., 'v', 'pkg-v').

    Returns:
        Compiled regex pattern with a ``version`` group.
    """
    escaped_prefix = re.escape(tag_prefix)
    return re.compile(f"^{escaped_prefix}(?P<version>\\d.*)$")


def parse_version_tag(tag_name: str, tag_prefix: str = "v") -> Version | None:
    """Parse a tag name into the version it encodes.

    Args:
        tag_name: Tag name, optionally as a full ``refs/tags/`` ref.
        tag_prefix: The tag prefix to strip (default: 'v').

    Returns:
        The parsed Version, or None when the tag is not a prefixed SemVer.

    Examples:
        >>> parse_version_tag("v1.2.3-rc.4")
        Version(major=1, minor=2, patch=3, prerelease='rc.4', build=None)
        >>> parse_version_tag("refs/tags/v1.2.3")
        Version(major=1, minor=2, patch=3, prerelease=None, build=None)
        >>> parse_version_tag("v123") is None
        True
    """
    name = tag_name.removeprefix(TAG_REF_PREFIX)
    match = _create_tag_pattern(tag_prefix).match(name)
    if not match:
        return None

    try:
        return Version.parse(match.group("version"))
    except ValueError:
        logger.debug("Ignoring tag '%s': not a valid SemVer", tag_name)
        return None


def _tag_key(tag_name: str, tag_prefix: str) -> str:
    return tag_name.removeprefix(TAG_REF_PREFIX)[len(tag_prefix) :]


def tag_map(tags: Iterable[Tag], tag_prefix: str = "v") -> dict[str, Version]:
    """Map prefix-stripped tag names to the versions they encode.

    Args:
        tags: Repository tags.
        tag_prefix: The tag prefix to strip (default: 'v').

    Returns:
        Dict of normalized tag name to Version; unparseable tags are dropped.

    Examples:
        >>> from types import SimpleNamespace
        >>> tags = [SimpleNamespace(name=n) for n in ("v1.0.0", "v1.1.0-rc.1", "latest")]
        >>> sorted(tag_map(tags))
        ['1.0.0', '1.1.0-rc.1']
        >>> tag_map(tags)["1.1.0-rc.1"].prerelease
        'rc.1'
    """
    versions: dict[str, Version] = {}
    for tag in tags:
        version = parse_version_tag(tag.name, tag_prefix)
        if version is None:
            continue
        versions[_tag_key(tag.name, tag_prefix)] = version

    logger.debug("Found %d version tags with prefix '%s'", len(versions), tag_prefix)
    return versions


def versions_by_commit(tags: Iterable[Tag], versions: dict[str, Version], tag_prefix: str = "v") -> dict[str, Version]:
    """Index the versions of a tag map by the commit each tag points to.

    Tags missing from ``versions`` are skipped without being parsed again.
    When a commit carries several version tags, the highest version wins.

    Args:
        tags: Repository tags.
        versions: Tag map built by tag_map() from the same tags.
        tag_prefix: The tag prefix the map was built with (default: 'v').

    Returns:
        Dict of commit SHA to Version.
    """
    index: dict[str, Version] = {}
    if not versions:
        return index

    for tag in tags:
        version = versions.get(_tag_key(tag.name, tag_prefix))
        if version is None:
            continue

        sha = tag.commit.sha
        if sha not in index or version > index[sha]:
            index[sha] = version

    return index


def latest_version_on_branch(commits: Iterable[Commit], commit_versions: dict[str, Version]) -> Version | None:
    """Return the version of the nearest tagged commit in a branch history.

    An empty index returns None without consuming ``commits``.

    Args:
        commits: Branch history, newest commit first.
        commit_versions: Versions indexed by commit SHA.

    Returns:
        The version of the first tagged commit encountered, or None.
    """
    if not commit_versions:
        return None

    for depth, commit in enumerate(commits):
        version = commit_versions.get(commit.sha)
        if version is not None:
            logger.debug("Nearest version tag %s found %d commits back at %s", version, depth, commit.sha[:7])
            return version

    return None
