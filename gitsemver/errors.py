# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Failure kinds and the tagged result returned by the version engine.

Every fallible step of a calculation returns either ``Ok`` or ``Err``. The
engine never raises for expected conditions: callers inspect the result and
decide how to surface a failure.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(Enum):
    """Reasons a version calculation can fail."""

    NO_MATCHING_BRANCH_RULE = "no-matching-branch-rule"
    MISSING_VERSION = "missing-version"
    INVALID_SCOPE = "invalid-scope"
    INVALID_STAGE = "invalid-stage"
    INVALID_LABEL = "invalid-label"
    COLLABORATOR_FAILURE = "collaborator-failure"


@dataclass(frozen=True)
class SemverError:
    """A typed failure carrying its kind and the branch it concerns."""

    kind: ErrorKind
    message: str
    branch: str | None = None

    def __str__(self) -> str:
        if self.branch:
            return f"{self.kind.value} [{self.branch}]: {self.message}"
        return f"{self.kind.value}: {self.message}"


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful result holding a value."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed result holding a ``SemverError``."""

    error: SemverError

    @property
    def is_ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]
