"""Group lifecycle and membership engine.

The engine owns every transaction that touches groups, memberships or
schedules. Each public method opens its own session, runs inside a single
``session.begin()`` block and either commits everything or nothing.

Failures surface as :mod:`classflow.core.errors` subclasses. Store errors that
are not classified into a domain error are wrapped in
:class:`~classflow.core.errors.InternalError` with the operation name and are
never retried.
"""

from __future__ import annotations

import logging
import secrets
import threading
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import assert_never

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from classflow.core.dto import (
    GroupDetails,
    GroupFilter,
    GroupSummary,
    ParityFilter,
    Principal,
    ScheduleEntryInput,
    ScheduleEntryView,
)
from classflow.core.errors import (
    AlreadyHasSchedule,
    AlreadyInGroup,
    DomainError,
    FacultyProgramMismatch,
    GroupAlreadyExists,
    GroupNotFound,
    InternalError,
    InvalidSchedule,
    MemberNotFound,
    NotGroupOwner,
    OperationCancelled,
    PermissionDenied,
    WrongGroupCode,
)
from classflow.core.metrics import MetricsCollector
from classflow.core.settings import settings
from classflow.models.group import Group
from classflow.models.user import Role
from classflow.repositories import GroupRepository, MemberRepository, ScheduleRepository
from classflow.services.catalog import CatalogService, ReferenceDataProvider
from classflow.services.identity import IdentityProvider, IdentityService
from classflow.utils.codes import generate_join_code

__all__ = ["GroupEngine"]

logger = logging.getLogger(__name__)


class _Stores:
    """Per-transaction bundle of stores and providers sharing one session."""

    def __init__(
        self,
        session: Session,
        catalog: ReferenceDataProvider,
        identity: IdentityProvider,
    ) -> None:
        self.session = session
        self.groups = GroupRepository(session)
        self.members = MemberRepository(session)
        self.schedules = ScheduleRepository(session)
        self.catalog = catalog
        self.identity = identity


def _checkpoint(cancel: threading.Event | None, operation: str) -> None:
    if cancel is not None and cancel.is_set():
        raise OperationCancelled(f"{operation}: operation cancelled")


def _require_admin(principal: Principal, operation: str) -> None:
    match principal.role:
        case Role.ADMIN:
            return
        case Role.LEADER | Role.STUDENT:
            raise PermissionDenied(f"{operation} requires an administrator")
        case _:
            assert_never(principal.role)


class GroupEngine:
    """Authoritative implementation of group, membership and schedule rules.

    Args:
        session_factory: Produces a fresh session per operation.
        metrics: Collector that receives one outcome sample per operation.
        catalog_factory: Builds the reference data provider for a session.
        identity_factory: Builds the identity provider for a session.
        code_generator: Returns a candidate join code of the given length.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        metrics: MetricsCollector | None = None,
        catalog_factory: Callable[[Session], ReferenceDataProvider] = CatalogService,
        identity_factory: Callable[[Session], IdentityProvider] = IdentityService,
        code_generator: Callable[[int], str] = generate_join_code,
        code_length: int | None = None,
        max_code_attempts: int | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._metrics = metrics
        self._catalog_factory = catalog_factory
        self._identity_factory = identity_factory
        self._code_generator = code_generator
        self._code_length = code_length or settings.join_code_length
        self._max_code_attempts = max_code_attempts or settings.join_code_max_attempts

    # -- infrastructure ------------------------------------------------------

    def _record(self, operation: str, outcome: str) -> None:
        if self._metrics is not None:
            self._metrics.record_operation(operation, outcome)

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[_Stores]:
        session = self._session_factory()
        try:
            with session.begin():
                yield _Stores(
                    session,
                    self._catalog_factory(session),
                    self._identity_factory(session),
                )
        except OperationCancelled:
            self._record(operation, "cancelled")
            logger.info("%s cancelled, transaction rolled back", operation)
            raise
        except InternalError as exc:
            self._record(operation, "error")
            logger.error("%s failed: %s", operation, exc.message)
            raise
        except DomainError as exc:
            self._record(operation, "rejected")
            logger.debug("%s rejected: %s", operation, exc.message)
            raise
        except SQLAlchemyError as exc:
            self._record(operation, "error")
            logger.error("%s failed in the store", operation, exc_info=True)
            raise InternalError(f"{operation}: {exc.__class__.__name__}: {exc}") from exc
        else:
            self._record(operation, "ok")
        finally:
            session.close()

    # -- group lifecycle -----------------------------------------------------

    def create_group(
        self,
        principal: Principal,
        *,
        faculty_id: int,
        program_id: int,
        short_name: str,
        leader_id: int | None = None,
        cancel: threading.Event | None = None,
    ) -> int:
        """Create a group and return its id.

        An administrator may attach any eligible user as leader or none at all.
        Anyone else becomes the leader of the group they create. An attached
        leader joins as the first member and is promoted to ``Role.LEADER``.

        Raises:
            GroupAlreadyExists: ``short_name`` is taken.
            ProgramNotFound, FacultyNotFound: unknown reference ids.
            FacultyProgramMismatch: the program belongs to another faculty.
            UserNotFound: the designated leader does not exist.
            PermissionDenied: a non-admin names someone else, or the leader is an admin.
            AlreadyInGroup: the designated leader already has a membership.
        """
        match principal.role:
            case Role.ADMIN:
                pass
            case Role.LEADER | Role.STUDENT:
                if leader_id is not None and leader_id != principal.user_id:
                    raise PermissionDenied("only administrators can appoint another leader")
                leader_id = principal.user_id
            case _:
                assert_never(principal.role)

        with self._transaction("create_group") as stores:
            _checkpoint(cancel, "create_group")
            if stores.groups.short_name_exists(short_name):
                raise GroupAlreadyExists()

            program = stores.catalog.get_program(program_id)
            _checkpoint(cancel, "create_group")
            stores.catalog.get_faculty(faculty_id)
            if program.faculty_id != faculty_id:
                raise FacultyProgramMismatch()

            if leader_id is not None:
                _checkpoint(cancel, "create_group")
                leader = stores.identity.get_user(leader_id)
                if leader.role is Role.ADMIN:
                    raise PermissionDenied("administrators cannot lead a group")
                if stores.members.find(leader_id) is not None:
                    raise AlreadyInGroup()

            group = self._insert_with_unique_code(
                stores,
                faculty_id=faculty_id,
                program_id=program_id,
                short_name=short_name,
                leader_id=leader_id,
            )
            if leader_id is not None:
                stores.members.create(user_id=leader_id, group_id=group.id)
                stores.identity.update_role(leader_id, Role.LEADER)

            _checkpoint(cancel, "create_group")
            group_id = group.id

        logger.info("Created group %d (%s), leader=%s", group_id, short_name, leader_id)
        return group_id

    def _insert_with_unique_code(
        self,
        stores: _Stores,
        *,
        faculty_id: int,
        program_id: int,
        short_name: str,
        leader_id: int | None,
    ) -> Group:
        for attempt in range(1, self._max_code_attempts + 1):
            code = self._code_generator(self._code_length)
            if stores.groups.code_exists(code):
                logger.debug("Join code collision on attempt %d", attempt)
                continue
            try:
                with stores.session.begin_nested():
                    return stores.groups.insert(
                        faculty_id=faculty_id,
                        program_id=program_id,
                        short_name=short_name,
                        code=code,
                        leader_id=leader_id,
                    )
            except IntegrityError as err:
                # Lost a race with a concurrent insert: either the name or the code.
                if stores.groups.short_name_exists(short_name):
                    raise GroupAlreadyExists() from err
                logger.debug("Join code collision on insert, attempt %d", attempt)
        raise InternalError("create_group: could not allocate a unique join code")

    def delete_group(
        self,
        principal: Principal,
        group_id: int,
        *,
        cancel: threading.Event | None = None,
    ) -> None:
        """Delete a group together with its memberships and schedule.

        The leader, if any, reverts to ``Role.STUDENT``.
        """
        _require_admin(principal, "delete_group")
        with self._transaction("delete_group") as stores:
            group = stores.groups.get_for_update(group_id)
            if group is None:
                raise GroupNotFound()
            _checkpoint(cancel, "delete_group")
            if group.leader_id is not None:
                stores.identity.update_role(group.leader_id, Role.STUDENT)
            entries = stores.schedules.delete_for_group(group_id)
            members = stores.members.delete_for_group(group_id)
            stores.groups.delete(group_id)
            _checkpoint(cancel, "delete_group")

        logger.info(
            "Deleted group %d (%d members, %d schedule entries)", group_id, members, entries
        )

    def assign_leader(
        self,
        principal: Principal,
        group_id: int,
        user_id: int,
        *,
        cancel: threading.Event | None = None,
    ) -> None:
        """Make an existing member the group's leader, demoting the previous one."""
        _require_admin(principal, "assign_leader")
        with self._transaction("assign_leader") as stores:
            group = stores.groups.get_for_update(group_id)
            if group is None:
                raise GroupNotFound()
            member = stores.members.find(user_id)
            if member is None or member.group_id != group_id:
                raise MemberNotFound()
            if group.leader_id == user_id:
                return
            _checkpoint(cancel, "assign_leader")
            if group.leader_id is not None:
                stores.identity.update_role(group.leader_id, Role.STUDENT)
            stores.identity.update_role(user_id, Role.LEADER)
            stores.groups.set_leader(group_id, user_id)
            previous = group.leader_id

        logger.info("Group %d leader changed %s -> %d", group_id, previous, user_id)

    # -- membership ----------------------------------------------------------

    def join_group(
        self,
        principal: Principal,
        group_id: int,
        code: str,
        *,
        cancel: threading.Event | None = None,
    ) -> None:
        """Add the caller to a group gated by its join code.

        Raises:
            PermissionDenied: administrators cannot be members.
            AlreadyInGroup: the caller already has a membership.
            GroupNotFound: no such group.
            WrongGroupCode: ``code`` does not match.
        """
        match principal.role:
            case Role.ADMIN:
                raise PermissionDenied("administrators cannot join groups")
            case Role.LEADER | Role.STUDENT:
                pass
            case _:
                assert_never(principal.role)

        with self._transaction("join_group") as stores:
            if stores.members.find(principal.user_id) is not None:
                raise AlreadyInGroup()
            group = stores.groups.get_for_update(group_id)
            if group is None:
                raise GroupNotFound()
            if not secrets.compare_digest(group.code.encode(), code.encode()):
                raise WrongGroupCode()
            _checkpoint(cancel, "join_group")
            stores.members.create(user_id=principal.user_id, group_id=group_id)
            stores.groups.adjust_people_count(group_id, 1)

        logger.info("User %d joined group %d", principal.user_id, group_id)

    def leave_group(
        self,
        principal: Principal,
        *,
        cancel: threading.Event | None = None,
    ) -> None:
        """Remove the caller from their group.

        A leaving leader clears the group's leader reference and reverts to
        ``Role.STUDENT``.
        """
        with self._transaction("leave_group") as stores:
            member = stores.members.find(principal.user_id)
            if member is None:
                raise MemberNotFound()
            group = stores.groups.get_for_update(member.group_id)
            if group is None:
                raise GroupNotFound()
            _checkpoint(cancel, "leave_group")
            stores.members.delete(principal.user_id)
            stores.groups.adjust_people_count(group.id, -1)
            was_leader = group.leader_id == principal.user_id
            if was_leader:
                stores.groups.set_leader(group.id, None)
                stores.identity.update_role(principal.user_id, Role.STUDENT)
            group_id = group.id

        logger.info(
            "User %d left group %d%s",
            principal.user_id,
            group_id,
            " (leader stepped down)" if was_leader else "",
        )

    # -- schedule ------------------------------------------------------------

    def upload_schedule(
        self,
        principal: Principal,
        group_id: int,
        entries: Sequence[ScheduleEntryInput],
        *,
        cancel: threading.Event | None = None,
    ) -> int:
        """Store a group's timetable; accepted once per group lifetime.

        Every entry's subject type and building is validated before anything
        is written. Returns the number of stored entries.

        Raises:
            GroupNotFound: no such group.
            NotGroupOwner: the caller is neither an admin nor this group's leader.
            AlreadyHasSchedule: the group already has a timetable.
            InvalidSchedule: ``entries`` is empty.
            SubjectTypeNotFound, BuildingNotFound: first invalid reference.
        """
        with self._transaction("upload_schedule") as stores:
            group = stores.groups.get_for_update(group_id)
            if group is None:
                raise GroupNotFound()

            match principal.role:
                case Role.ADMIN:
                    pass
                case Role.LEADER:
                    if group.leader_id != principal.user_id:
                        raise NotGroupOwner()
                case Role.STUDENT:
                    raise NotGroupOwner()
                case _:
                    assert_never(principal.role)

            if group.exists_schedule:
                raise AlreadyHasSchedule()
            if not entries:
                raise InvalidSchedule()

            for entry in entries:
                _checkpoint(cancel, "upload_schedule")
                stores.catalog.get_subject_type(entry.type_id)
                stores.catalog.get_building(entry.building_id)

            written = stores.schedules.bulk_insert(group_id, entries)
            if not stores.groups.mark_schedule_exists(group_id):
                raise AlreadyHasSchedule()
            _checkpoint(cancel, "upload_schedule")

        logger.info("Uploaded %d schedule entries for group %d", written, group_id)
        return written

    def get_schedule(
        self,
        principal: Principal,
        group_id: int,
        parity: ParityFilter = ParityFilter.ANY,
    ) -> list[ScheduleEntryView]:
        """Return a group's timetable, optionally narrowed to one week parity."""
        with self._transaction("get_schedule") as stores:
            group = stores.groups.get(group_id)
            if group is None:
                raise GroupNotFound()
            short_name = group.short_name
            entries = stores.schedules.list_for_group(group_id, parity)

        if self._metrics is not None:
            self._metrics.record_schedule_request(short_name)
        logger.debug(
            "User %d read %d entries of group %d", principal.user_id, len(entries), group_id
        )
        return entries

    # -- reads ---------------------------------------------------------------

    def get_group_summaries(
        self,
        principal: Principal,
        group_filter: GroupFilter | None = None,
    ) -> list[GroupSummary]:
        with self._transaction("get_group_summaries") as stores:
            return stores.groups.summaries(group_filter or GroupFilter())

    def get_group(self, principal: Principal, group_id: int) -> GroupDetails:
        with self._transaction("get_group") as stores:
            group = stores.groups.get(group_id)
            if group is None:
                raise GroupNotFound()
            return self._details(principal, group)

    def get_current_group(self, principal: Principal) -> GroupDetails:
        """Return the caller's own group.

        Raises:
            MemberNotFound: the caller is not in a group.
        """
        with self._transaction("get_current_group") as stores:
            group_id = stores.members.lookup(principal.user_id)
            group = stores.groups.get(group_id)
            if group is None:
                raise GroupNotFound()
            return self._details(principal, group)

    @staticmethod
    def _details(principal: Principal, group: Group) -> GroupDetails:
        match principal.role:
            case Role.ADMIN:
                show_code = True
            case Role.LEADER:
                show_code = group.leader_id == principal.user_id
            case Role.STUDENT:
                show_code = False
            case _:
                assert_never(principal.role)
        return GroupDetails(
            id=group.id,
            leader_id=group.leader_id,
            faculty=group.faculty.name,
            program=group.program.name,
            short_name=group.short_name,
            people_count=group.people_count,
            exists_schedule=group.exists_schedule,
            created_at=group.created_at,
            code=group.code if show_code else None,
        )
