"""
Errors raised by the interception engine.
"""

from typing import Any


class MookError(Exception):
    """Base class for all mook errors."""


class ConflictError(MookError):
    """The reserved registry attribute is already used by something else."""

    def __init__(self, target: Any, attribute: str, reason: str):
        self.target = target
        self.attribute = attribute
        super().__init__(f"Attribute {attribute!r} of {type(target).__name__} has been used: {reason}")


class PlatformRestoreError(MookError):
    """The target refused a write needed to install or restore a member.

    The native exception is chained as ``__cause__``.
    """

    def __init__(self, target: Any, name: str, action: str, error: BaseException):
        self.target = target
        self.name = name
        self.action = action
        super().__init__(
            f"Cannot {action} member {name!r} of {type(target).__name__}: {error}"
        )
