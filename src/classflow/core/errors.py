"""Domain error taxonomy shared by the group engine and its collaborators.

Every failure the engine surfaces is a :class:`DomainError` carrying an
:class:`ErrorKind`. Callers map the kind onto their own presentation; the
engine never picks transport status codes.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Coarse classification of domain failures."""

    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    MISMATCH = "mismatch"
    INTERNAL = "internal"


class DomainError(Exception):
    """Base class for all classified failures."""

    kind: ErrorKind = ErrorKind.INTERNAL
    default_message = "internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# -- not found ---------------------------------------------------------------


class NotFoundError(DomainError):
    kind = ErrorKind.NOT_FOUND
    default_message = "not found"


class GroupNotFound(NotFoundError):
    default_message = "group not found"


class ProgramNotFound(NotFoundError):
    default_message = "program not found"


class FacultyNotFound(NotFoundError):
    default_message = "faculty not found"


class BuildingNotFound(NotFoundError):
    default_message = "building not found"


class SubjectTypeNotFound(NotFoundError):
    default_message = "type of subject not found"


class MemberNotFound(NotFoundError):
    default_message = "member not found"


class UserNotFound(NotFoundError):
    default_message = "user not found"


# -- uniqueness / once-only --------------------------------------------------


class ConflictError(DomainError):
    kind = ErrorKind.CONFLICT
    default_message = "conflict"


class GroupAlreadyExists(ConflictError):
    default_message = "group already exists with this shortname"


class AlreadyInGroup(ConflictError):
    default_message = "you are already in a group"


class AlreadyHasSchedule(ConflictError):
    default_message = "group already has schedule"


class UserAlreadyExists(ConflictError):
    default_message = "user already exists"


# -- cross-field and authorization validation --------------------------------


class MismatchError(DomainError):
    kind = ErrorKind.MISMATCH
    default_message = "validation failed"


class FacultyProgramMismatch(MismatchError):
    default_message = "faculty and program id does not match"


class WrongGroupCode(MismatchError):
    default_message = "wrong group code"


class InvalidSchedule(MismatchError):
    default_message = "schedule must contain at least one entry"


class InvalidCredentials(MismatchError):
    default_message = "wrong password"


class NotGroupOwner(MismatchError):
    """The caller does not own the group it is trying to modify."""

    default_message = "only the group leader can modify this group"


class PermissionDenied(MismatchError):
    """The caller's role does not allow the requested operation."""

    default_message = "operation not permitted for this role"


# -- internal ----------------------------------------------------------------


class InternalError(DomainError):
    kind = ErrorKind.INTERNAL
    default_message = "internal error"


class OperationCancelled(InternalError):
    default_message = "operation cancelled"


__all__ = [
    "ErrorKind",
    "DomainError",
    "NotFoundError",
    "GroupNotFound",
    "ProgramNotFound",
    "FacultyNotFound",
    "BuildingNotFound",
    "SubjectTypeNotFound",
    "MemberNotFound",
    "UserNotFound",
    "ConflictError",
    "GroupAlreadyExists",
    "AlreadyInGroup",
    "AlreadyHasSchedule",
    "UserAlreadyExists",
    "MismatchError",
    "FacultyProgramMismatch",
    "WrongGroupCode",
    "InvalidSchedule",
    "InvalidCredentials",
    "NotGroupOwner",
    "PermissionDenied",
    "InternalError",
    "OperationCancelled",
]
