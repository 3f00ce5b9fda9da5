# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Main entry point for the branch-based version calculator.

Computes the version of the branch being built and publishes it as action
outputs and on stdout.

References:
    - GitHub Actions Environment Variables:
      https://docs.github.com/en/actions/writing-workflows/choosing-what-your-workflow-does/store-information-in-variables#default-environment-variables
    - GitHub Actions Outputs:
      https://docs.github.com/en/actions/writing-workflows/choosing-what-your-workflow-does/passing-information-between-jobs#setting-an-output-parameter
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass

from semver import Version

from gitsemver.branch import Branch, classify, validate_prefix
from gitsemver.calculator import (
    DEFAULT_INITIAL_VERSION,
    ContextProvider,
    VersionCalculatorConfig,
    calculate_version,
)
from gitsemver.context import GitHubContextProvider, detect_branch_name
from gitsemver.errors import Result
from gitsemver.github_api import GitHubAPI
from gitsemver.matching import BranchMatchingRule, flat_strategy, flow_strategy

logger = logging.getLogger(__name__)

STRATEGIES = ("flat", "flow")
MAIN_BRANCHES = ("main", "master")


@dataclass
class ActionInputs:
    """Parsed action inputs from CLI arguments or environment variables."""

    token: str
    debug: bool
    branch: str
    repository: str = ""
    tag_prefix: str = "v"
    initial_version: Version = DEFAULT_INITIAL_VERSION
    strategy: str = "flat"
    main_branch: str = "main"
    scope: str | None = None
    stage: str | None = None
    override_version: Version | None = None


@dataclass
class ActionOutputs:
    """Action outputs to be written to GITHUB_OUTPUT."""

    version: str = ""
    version_tag: str = ""
    major: str = ""
    minor: str = ""
    patch: str = ""
    prerelease: str = ""

    @classmethod
    def from_version(cls, version: Version, tag_prefix: str) -> ActionOutputs:
        return cls(
            version=str(version),
            version_tag=f"{tag_prefix}{version}",
            major=str(version.major),
            minor=str(version.minor),
            patch=str(version.patch),
            prerelease=version.prerelease or "",
        )


def _parse_version_input(name: str, value: str, tag_prefix: str) -> Version:
    try:
        return Version.parse(value.removeprefix(tag_prefix))
    except ValueError:
        logger.error("Invalid %s '%s': not a semantic version", name, value)
        sys.exit(1)


def parse_inputs(args: list[str] | None = None) -> ActionInputs:
    """Parse action inputs from CLI arguments or environment variables.

    CLI arguments take precedence over environment variables.
    When run as a GitHub Action, environment variables are used.
    When run from CLI, arguments can be provided directly.

    Args:
        args: Optional list of CLI arguments. If None, uses environment
              variables only (GitHub Actions mode). Pass sys.argv[1:] for
              CLI mode.

    Returns:
        ActionInputs with parsed values.
    """
    parser = argparse.ArgumentParser(
        description="Calculate a semantic version from branches, tags and commit history",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables (used as defaults when CLI args not provided):
  INPUT_TOKEN, GITHUB_TOKEN    GitHub token for authentication
  INPUT_DEBUG                  Enable debug logging (true/false)
  INPUT_BRANCH                 Branch to version (default: detected from CI)
  INPUT_TAG_PREFIX             Prefix of version tags
  INPUT_INITIAL_VERSION        Version used before the first release
  INPUT_STRATEGY               Branch matching strategy (flat/flow)
  INPUT_MAIN_BRANCH            Authoritative branch (main/master)
  INPUT_SCOPE                  Force bump scope (major/minor/patch)
  INPUT_STAGE                  Force stage (alpha/beta/rc/final/snapshot/branch)
  INPUT_OVERRIDE_VERSION       Skip calculation and use this version

Examples:
  # Run with environment variables (GitHub Actions mode)
  python -m gitsemver.main

  # Run with CLI arguments (local testing)
  python -m gitsemver.main --token ghp_xxx --branch feature/login --debug

  # Version a git-flow repository
  python -m gitsemver.main --strategy flow --branch develop
        """,
    )

    parser.add_argument(
        "--token",
        default=os.environ.get("INPUT_TOKEN", os.environ.get("GITHUB_TOKEN", "")),
        help="GitHub token for authentication (default: from INPUT_TOKEN or GITHUB_TOKEN env)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=os.environ.get("INPUT_DEBUG", "false").lower() == "true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--repository",
        default=os.environ.get("GITHUB_REPOSITORY", ""),
        help="Repository in owner/repo format (default: from GITHUB_REPOSITORY env)",
    )
    parser.add_argument(
        "--branch",
        default=os.environ.get("INPUT_BRANCH", ""),
        help="Branch to calculate the version for (default: detected from the CI environment)",
    )
    parser.add_argument(
        "--tag-prefix",
        default=os.environ.get("INPUT_TAG_PREFIX", "v"),
        help="Prefix of version tags (default: v)",
    )
    parser.add_argument(
        "--initial-version",
        default=os.environ.get("INPUT_INITIAL_VERSION", str(DEFAULT_INITIAL_VERSION)),
        help=f"Version used when nothing has been released yet (default: {DEFAULT_INITIAL_VERSION})",
    )
    parser.add_argument(
        "--strategy",
        choices=STRATEGIES,
        default=os.environ.get("INPUT_STRATEGY", "flat"),
        help="Branch matching strategy (default: flat)",
    )
    parser.add_argument(
        "--main-branch",
        choices=MAIN_BRANCHES,
        default=os.environ.get("INPUT_MAIN_BRANCH", "main"),
        help="Authoritative release branch (default: main)",
    )
    parser.add_argument(
        "--scope",
        default=os.environ.get("INPUT_SCOPE") or None,
        help="Force the bump scope of the current branch (major/minor/patch)",
    )
    parser.add_argument(
        "--stage",
        default=os.environ.get("INPUT_STAGE") or None,
        help="Force the stage of the current branch (alpha/beta/rc/final/snapshot/branch)",
    )
    parser.add_argument(
        "--override-version",
        default=os.environ.get("INPUT_OVERRIDE_VERSION") or None,
        help="Use this version instead of calculating one",
    )

    # Use empty list for GitHub Actions mode (env vars only), or provided args for CLI
    parsed = parser.parse_args(args if args is not None else [])

    if not validate_prefix(parsed.tag_prefix):
        logger.error(
            "Invalid tag-prefix '%s': must be non-empty and not contain "
            "invalid git ref characters (.. ~ ^ : \\ space tab newline * ? [)",
            parsed.tag_prefix,
        )
        sys.exit(1)

    override_version = None
    if parsed.override_version:
        override_version = _parse_version_input("override-version", parsed.override_version, parsed.tag_prefix)

    return ActionInputs(
        token=parsed.token,
        debug=parsed.debug,
        branch=parsed.branch or detect_branch_name(),
        repository=parsed.repository,
        tag_prefix=parsed.tag_prefix,
        initial_version=_parse_version_input("initial-version", parsed.initial_version, parsed.tag_prefix),
        strategy=parsed.strategy,
        main_branch=parsed.main_branch,
        scope=parsed.scope,
        stage=parsed.stage,
        override_version=override_version,
    )


def build_rules(inputs: ActionInputs) -> list[BranchMatchingRule]:
    """Return the branch matching strategy selected by the inputs."""
    main_branch = Branch(inputs.main_branch)
    if inputs.strategy == "flow":
        return flow_strategy(main_branch=main_branch)
    return flat_strategy(main_branch=main_branch)


def build_config(inputs: ActionInputs) -> VersionCalculatorConfig:
    """Translate action inputs into a calculator configuration."""
    return VersionCalculatorConfig(
        tag_prefix=inputs.tag_prefix,
        initial_version=inputs.initial_version,
        branch_matching=build_rules(inputs),
        override_version=inputs.override_version,
        scope=inputs.scope,
        stage=inputs.stage,
    )


def set_outputs(outputs: ActionOutputs) -> None:
    """Write action outputs to GITHUB_OUTPUT file.

    Args:
        outputs: ActionOutputs to write.
    """
    output_file = os.environ.get("GITHUB_OUTPUT", "")
    if not output_file:
        logger.warning("GITHUB_OUTPUT not set, outputs will not be written")
        return

    with open(output_file, "a") as f:
        f.write(f"version={outputs.version}\n")
        f.write(f"version-tag={outputs.version_tag}\n")
        f.write(f"major={outputs.major}\n")
        f.write(f"minor={outputs.minor}\n")
        f.write(f"patch={outputs.patch}\n")
        f.write(f"prerelease={outputs.prerelease}\n")

    logger.info("Set outputs: version=%s, version-tag=%s", outputs.version, outputs.version_tag)


def configure_logging(debug: bool) -> None:
    """Configure logging based on debug flag.

    Args:
        debug: If True, enable DEBUG level logging.
    """
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def run(inputs: ActionInputs, ops: ContextProvider) -> Result[Version]:
    """Calculate the version of the branch named by the inputs."""
    branch = classify(inputs.branch) if inputs.branch else ops.current_branch()
    logger.info("Calculating %s version for branch '%s'", inputs.strategy, branch)
    return calculate_version(branch, build_config(inputs), ops)


def main() -> None:
    """Main entry point for the action."""
    inputs = parse_inputs(sys.argv[1:])
    configure_logging(inputs.debug)

    if not inputs.branch:
        logger.error("Unable to determine the current branch. Set INPUT_BRANCH or pass --branch.")
        sys.exit(1)

    if not inputs.token:
        logger.error("GitHub token is required. Set INPUT_TOKEN or GITHUB_TOKEN.")
        sys.exit(1)

    try:
        api = GitHubAPI(token=inputs.token, repository=inputs.repository)
    except ValueError as e:
        logger.error("Failed to initialize GitHub API: %s", e)
        sys.exit(1)
    ops = GitHubContextProvider(api, inputs.branch, inputs.tag_prefix)

    result = run(inputs, ops)
    if not result.is_ok:
        logger.error("Version calculation failed: %s", result.error)
        sys.exit(1)

    outputs = ActionOutputs.from_version(result.value, inputs.tag_prefix)
    set_outputs(outputs)
    print(outputs.version)


if __name__ == "__main__":  # pragma: no cover
    main()
