# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Property-based tests for the version calculator.

Uses hypothesis to generate random inputs and verify invariants hold
across all valid cases.
"""

from __future__ import annotations

from hypothesis import assume, given, settings
from hypothesis import strategies as st
from semver import Version

from gitsemver.branch import DEVELOP, MAIN, Branch, BranchRole, sanitize, sanitized_label
from gitsemver.calculator import calculate_version
from gitsemver.matching import BranchMatchingRule, fixed_label, flat_strategy, flow_strategy, resolve_rule
from gitsemver.stages import Scope
from tests.conftest import FakeContextProvider, build_config

# SemVer 2.0.0 numeric identifiers
version_number = st.integers(min_value=0, max_value=999)
commit_count = st.integers(min_value=0, max_value=10_000)
scopes = st.sampled_from(list(Scope))


@st.composite
def release_version(draw: st.DrawFn) -> Version:
    """Generate release versions without prerelease or build."""
    return Version(draw(version_number), draw(version_number), draw(version_number))


# Branch name segments, including characters that need sanitising
segment = st.text(
    alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz0123456789_-*.#"),
    min_size=1,
    max_size=12,
)


@st.composite
def branch_name(draw: st.DrawFn) -> str:
    """Generate branch names of one to three path segments."""
    return "/".join(draw(st.lists(segment, min_size=1, max_size=3)))


@st.composite
def non_authoritative_branch(draw: st.DrawFn) -> Branch:
    """Generate branches that are not main or develop."""
    name = draw(branch_name())
    assume(name not in ("main", "master", "develop"))
    return Branch(name)


class TestDeterminism:
    """For fixed inputs the computed version is always identical."""

    @settings(max_examples=100)
    @given(branch=non_authoritative_branch(), base=release_version(), count=commit_count)
    def test_repeated_calculation_is_identical(self, branch: Branch, base: Version, count: int) -> None:
        config = build_config(flat_strategy())
        first = calculate_version(branch, config, FakeContextProvider(branch, {MAIN: base}, count))
        second = calculate_version(branch, config, FakeContextProvider(branch, {MAIN: base}, count))
        assert str(first.value) == str(second.value)


class TestAuthoritativeBranch:
    """Authoritative branches never carry a prerelease."""

    @settings(max_examples=100)
    @given(base=release_version(), scope=scopes, count=commit_count)
    def test_main_has_no_prerelease(self, base: Version, scope: Scope, count: int) -> None:
        for rules in (flat_strategy(scope.bump), flow_strategy(scope.bump)):
            result = calculate_version(MAIN, build_config(rules), FakeContextProvider(MAIN, {MAIN: base}, count))
            assert result.value.prerelease is None
            assert result.value == scope.bump(base)


class TestQualifierShape:
    """Non-authoritative prereleases are exactly <label>.<count>."""

    @settings(max_examples=100)
    @given(branch=non_authoritative_branch(), base=release_version(), count=commit_count)
    def test_flat_qualifier(self, branch: Branch, base: Version, count: int) -> None:
        assume(not branch.name.startswith("rc/"))
        result = calculate_version(
            branch, build_config(flat_strategy()), FakeContextProvider(branch, {MAIN: base}, count)
        )
        assert result.value.prerelease == f"{sanitized_label(branch)}.{count}"
        assert result.value.finalize_version() == base.bump_patch()

    @settings(max_examples=100)
    @given(base=release_version(), count=commit_count)
    def test_develop_qualifier(self, base: Version, count: int) -> None:
        result = calculate_version(
            DEVELOP, build_config(flow_strategy()), FakeContextProvider(DEVELOP, {MAIN: base}, count)
        )
        assert result.value.prerelease == f"beta.{count}"


class TestFirstMatchWins:
    """The earliest matching rule determines target, label and modifier."""

    @settings(max_examples=100)
    @given(name=branch_name(), base=release_version())
    def test_earlier_rule_wins(self, name: str, base: Version) -> None:
        first = BranchMatchingRule(r".*", MAIN, fixed_label("first"), Scope.MAJOR.bump)
        second = BranchMatchingRule(r".*", DEVELOP, fixed_label("second"), Scope.PATCH.bump)
        assert resolve_rule(name, [first, second]).value is first

        branch = Branch(name)
        assume(branch != MAIN)
        result = calculate_version(branch, build_config([first, second]), FakeContextProvider(branch, {MAIN: base}))
        assert result.value.prerelease == "first.2"
        assert result.value.finalize_version() == base.bump_major()


class TestSanitization:
    """Prerelease labels never contain / or *."""

    @settings(max_examples=200)
    @given(name=branch_name())
    def test_label_has_no_unsafe_characters(self, name: str) -> None:
        label = sanitized_label(Branch(name))
        assert "/" not in label
        assert "*" not in label
        assert "#" not in label

    @settings(max_examples=200)
    @given(prefix=segment, rest=segment)
    def test_feature_prefix_removed(self, prefix: str, rest: str) -> None:
        branch = Branch(f"feature/{prefix}/{rest}")
        assert branch.role is BranchRole.FEATURE
        assert sanitized_label(branch) == sanitize(f"{prefix}/{rest}")
