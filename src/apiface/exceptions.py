"""Exception hierarchy for apiface.

All exceptions inherit from :class:`ApifaceError`. Every error raised by the
engine is fatal for the run that raised it: no partial interface set is ever
returned alongside an exception.

Subclass hierarchy::

    ApifaceError
    +-- PolicyError                 (pre-flight, carries a PolicyErrorKind)
    +-- InvalidRetryConfiguration   (pre-flight)
    +-- NamingCollisionError        (per run, names both operations)
    +-- ConfigError                 (settings file problems)
    +-- OperationLoadError          (operation set could not be read)
"""

from __future__ import annotations

import enum
from typing import Optional


class ApifaceError(Exception):
    """Base exception for all apiface errors.

    Args:
        message: Human-readable error description.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PolicyErrorKind(str, enum.Enum):
    """Why a set of raw settings could not become a policy."""

    INVALID_COMBINATION = "InvalidCombination"
    UNKNOWN_PLACEHOLDER = "UnknownPlaceholder"
    INVALID_SETTING = "InvalidSetting"


class PolicyError(ApifaceError):
    """Raised when settings are invalid or contradict each other.

    Detected by :func:`~apiface.policy.resolve_policy` before any operation
    is processed.

    Args:
        message: Human-readable error description.
        kind: The :class:`PolicyErrorKind` classifying the failure.
    """

    def __init__(self, message: str, kind: PolicyErrorKind):
        super().__init__(message)
        self.kind = kind


class InvalidRetryConfiguration(ApifaceError):
    """Raised for out-of-range retry settings (attempts < 1, backoff <= 0)."""


class NamingCollisionError(ApifaceError):
    """Raised when two operations resolve to the same name.

    For method names the clash is scoped to one interface
    (``interface_name`` is set); for interface names it is scoped to the run
    and the operation ids are those of the first operation in each
    conflicting bucket.

    Args:
        name: The name both operations resolved to.
        first_operation_id: Id of the operation that claimed *name* first.
        second_operation_id: Id of the operation that collided with it.
        interface_name: Interface in which the method names collided, or
            ``None`` for an interface-name clash.
    """

    def __init__(
        self,
        name: str,
        first_operation_id: str,
        second_operation_id: str,
        interface_name: Optional[str] = None,
    ):
        if interface_name is None:
            message = (
                f"Interface name '{name}' is produced by both operation "
                f"'{first_operation_id}' and operation '{second_operation_id}'"
            )
        else:
            message = (
                f"Method name '{name}' in interface '{interface_name}' is produced "
                f"by both operation '{first_operation_id}' and operation "
                f"'{second_operation_id}'"
            )
        super().__init__(message)
        self.name = name
        self.first_operation_id = first_operation_id
        self.second_operation_id = second_operation_id
        self.interface_name = interface_name

    @property
    def operation_ids(self) -> tuple[str, str]:
        return (self.first_operation_id, self.second_operation_id)


class ConfigError(ApifaceError):
    """Raised for settings file problems (missing file, invalid JSON/YAML, bad values)."""


class OperationLoadError(ApifaceError):
    """Raised when a normalized operation set cannot be read or validated."""
