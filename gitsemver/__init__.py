# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Branch-based semantic version calculation - Core modules."""

from gitsemver.branch import Branch, BranchRole, classify, sanitized_label
from gitsemver.calculator import ContextProvider, VersionCalculatorConfig, calculate_version
from gitsemver.errors import Err, ErrorKind, Ok, SemverError
from gitsemver.matching import BranchMatchingRule, flat_strategy, flow_strategy, resolve_rule
from gitsemver.stages import Scope, Stage

__all__ = [
    "Branch",
    "BranchMatchingRule",
    "BranchRole",
    "ContextProvider",
    "Err",
    "ErrorKind",
    "Ok",
    "Scope",
    "SemverError",
    "Stage",
    "VersionCalculatorConfig",
    "calculate_version",
    "classify",
    "flat_strategy",
    "flow_strategy",
    "resolve_rule",
    "sanitized_label",
]
