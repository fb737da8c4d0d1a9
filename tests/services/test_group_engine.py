# mypy: ignore-errors
"""Tests for group creation, membership and deletion in the group engine."""

import threading

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from classflow.core.dto import GroupFilter, Principal
from classflow.core.errors import (
    AlreadyInGroup,
    ErrorKind,
    FacultyNotFound,
    FacultyProgramMismatch,
    GroupAlreadyExists,
    GroupNotFound,
    InternalError,
    MemberNotFound,
    OperationCancelled,
    PermissionDenied,
    ProgramNotFound,
    UserNotFound,
    WrongGroupCode,
)
from classflow.models import Group, Member, Role, ScheduleEntry
from classflow.repositories import MemberRepository
from classflow.services.catalog import CatalogService
from classflow.services.group_engine import GroupEngine


def _group(session_factory, group_id):
    with session_factory() as db:
        return db.get(Group, group_id)


def _member_count(session_factory, group_id):
    with session_factory() as db:
        return MemberRepository(db).count(group_id)


def test_admin_creates_unowned_group(group_engine, catalog, admin, principal, session_factory):
    """An administrator can create a group without a leader; it starts empty."""
    group_id = group_engine.create_group(
        principal(admin),
        faculty_id=catalog.engineering,
        program_id=catalog.software,
        short_name="CS101",
    )
    group = _group(session_factory, group_id)
    assert group.leader_id is None
    assert group.people_count == 0
    assert group.exists_schedule is False
    assert len(group.code) == 4
    assert _member_count(session_factory, group_id) == 0


def test_student_creating_group_becomes_leader_and_first_member(
    group_engine, catalog, student, principal, role_of, session_factory
):
    """The creator auto-joins as leader and the counter starts at one."""
    group_id = group_engine.create_group(
        principal(student),
        faculty_id=catalog.engineering,
        program_id=catalog.software,
        short_name="CS101",
    )
    group = _group(session_factory, group_id)
    assert group.leader_id == student.id
    assert group.people_count == 1
    assert _member_count(session_factory, group_id) == 1
    assert role_of(student) is Role.LEADER


def test_admin_can_attach_leader(group_engine, catalog, admin, student, principal, role_of, session_factory):
    group_id = group_engine.create_group(
        principal(admin),
        faculty_id=catalog.engineering,
        program_id=catalog.software,
        short_name="CS101",
        leader_id=student.id,
    )
    assert _group(session_factory, group_id).leader_id == student.id
    assert role_of(student) is Role.LEADER


def test_student_cannot_appoint_someone_else(group_engine, catalog, student, other_student, principal):
    with pytest.raises(PermissionDenied):
        group_engine.create_group(
            principal(student),
            faculty_id=catalog.engineering,
            program_id=catalog.software,
            short_name="CS101",
            leader_id=other_student.id,
        )


def test_admin_cannot_be_leader(group_engine, catalog, admin, make_user, principal):
    other_admin = make_user(role=Role.ADMIN)
    with pytest.raises(PermissionDenied):
        group_engine.create_group(
            principal(admin),
            faculty_id=catalog.engineering,
            program_id=catalog.software,
            short_name="CS101",
            leader_id=other_admin.id,
        )


def test_unknown_leader(group_engine, catalog, admin, principal):
    with pytest.raises(UserNotFound):
        group_engine.create_group(
            principal(admin),
            faculty_id=catalog.engineering,
            program_id=catalog.software,
            short_name="CS101",
            leader_id=424242,
        )


def test_attached_leader_already_in_a_group(group_engine, catalog, admin, student, principal, session_factory):
    group_engine.create_group(principal(student), faculty_id=1, program_id=1, short_name="CS101")

    with pytest.raises(AlreadyInGroup):
        group_engine.create_group(
            principal(admin), faculty_id=1, program_id=3, short_name="ROB101", leader_id=student.id
        )
    with session_factory() as db:
        assert db.scalar(select(func.count()).select_from(Group)) == 1


def test_duplicate_short_name(group_engine, catalog, admin, principal):
    """Creating CS101 twice succeeds once and then fails."""
    group_engine.create_group(
        principal(admin), faculty_id=catalog.engineering, program_id=catalog.software, short_name="CS101"
    )
    with pytest.raises(GroupAlreadyExists) as exc_info:
        group_engine.create_group(
            principal(admin), faculty_id=catalog.engineering, program_id=catalog.software, short_name="CS101"
        )
    assert exc_info.value.kind is ErrorKind.CONFLICT
    assert exc_info.value.message == "group already exists with this shortname"


def test_program_from_other_faculty(group_engine, catalog, admin, principal, session_factory):
    """Program 7 belongs to faculty 2, so pairing it with faculty 1 fails."""
    with pytest.raises(FacultyProgramMismatch) as exc_info:
        group_engine.create_group(
            principal(admin), faculty_id=1, program_id=7, short_name="PHYS1"
        )
    assert exc_info.value.kind is ErrorKind.MISMATCH
    with session_factory() as db:
        assert db.scalar(select(func.count()).select_from(Group)) == 0


def test_unknown_program_and_faculty(group_engine, catalog, admin, principal):
    with pytest.raises(ProgramNotFound):
        group_engine.create_group(principal(admin), faculty_id=1, program_id=99, short_name="NOPE1")
    with pytest.raises(FacultyNotFound):
        group_engine.create_group(principal(admin), faculty_id=99, program_id=1, short_name="NOPE2")


def test_failed_creation_leaves_leader_untouched(
    group_engine, catalog, student, principal, role_of, session_factory
):
    with pytest.raises(FacultyProgramMismatch):
        group_engine.create_group(principal(student), faculty_id=1, program_id=7, short_name="PHYS1")
    assert role_of(student) is Role.STUDENT
    with session_factory() as db:
        assert db.scalar(select(func.count()).select_from(Member)) == 0


def test_join_with_code(group_engine, catalog, admin, student, principal, session_factory):
    group_id = group_engine.create_group(
        principal(admin), faculty_id=1, program_id=1, short_name="CS101"
    )
    code = _group(session_factory, group_id).code

    group_engine.join_group(principal(student), group_id, code)

    group = _group(session_factory, group_id)
    assert group.people_count == 1
    assert _member_count(session_factory, group_id) == 1


def test_join_wrong_code(group_engine, catalog, admin, student, principal, session_factory):
    group_id = group_engine.create_group(principal(admin), faculty_id=1, program_id=1, short_name="CS101")
    code = _group(session_factory, group_id).code
    wrong = "zzzz" if code != "zzzz" else "yyyy"

    with pytest.raises(WrongGroupCode):
        group_engine.join_group(principal(student), group_id, wrong)
    assert _group(session_factory, group_id).people_count == 0


def test_join_missing_group(group_engine, catalog, student, principal):
    with pytest.raises(GroupNotFound):
        group_engine.join_group(principal(student), 999, "abcd")


def test_join_twice_is_rejected(group_engine, catalog, admin, student, principal, session_factory):
    first = group_engine.create_group(principal(admin), faculty_id=1, program_id=1, short_name="CS101")
    second = group_engine.create_group(principal(admin), faculty_id=1, program_id=3, short_name="ROB101")
    group_engine.join_group(principal(student), first, _group(session_factory, first).code)

    with pytest.raises(AlreadyInGroup):
        group_engine.join_group(principal(student), second, _group(session_factory, second).code)
    assert _group(session_factory, second).people_count == 0


def test_admin_cannot_join(group_engine, catalog, admin, principal, session_factory):
    group_id = group_engine.create_group(principal(admin), faculty_id=1, program_id=1, short_name="CS101")
    with pytest.raises(PermissionDenied):
        group_engine.join_group(principal(admin), group_id, _group(session_factory, group_id).code)


def test_member_leaves(group_engine, catalog, admin, student, principal, session_factory):
    group_id = group_engine.create_group(principal(admin), faculty_id=1, program_id=1, short_name="CS101")
    group_engine.join_group(principal(student), group_id, _group(session_factory, group_id).code)

    group_engine.leave_group(principal(student))

    assert _group(session_factory, group_id).people_count == 0
    assert _member_count(session_factory, group_id) == 0


def test_leader_leaving_clears_leadership(
    group_engine, catalog, student, principal, role_of, session_factory
):
    """A leaving leader is demoted and a second leave reports MemberNotFound."""
    group_id = group_engine.create_group(principal(student), faculty_id=1, program_id=1, short_name="CS101")

    group_engine.leave_group(principal(student))

    group = _group(session_factory, group_id)
    assert group.leader_id is None
    assert group.people_count == 0
    assert role_of(student) is Role.STUDENT
    with pytest.raises(MemberNotFound):
        group_engine.leave_group(principal(student))


def test_leave_without_membership(group_engine, student, principal):
    with pytest.raises(MemberNotFound):
        group_engine.leave_group(principal(student))


def test_rejoin_after_leaving(group_engine, catalog, admin, student, principal, session_factory):
    first = group_engine.create_group(principal(admin), faculty_id=1, program_id=1, short_name="CS101")
    second = group_engine.create_group(principal(admin), faculty_id=1, program_id=3, short_name="ROB101")
    group_engine.join_group(principal(student), first, _group(session_factory, first).code)
    group_engine.leave_group(principal(student))

    group_engine.join_group(principal(student), second, _group(session_factory, second).code)

    assert _group(session_factory, first).people_count == 0
    assert _group(session_factory, second).people_count == 1


def test_delete_group_cascades(
    group_engine, catalog, admin, student, other_student, principal, role_of, session_factory
):
    """Deleting a group removes its members and schedule and demotes the leader."""
    group_id = group_engine.create_group(
        principal(admin), faculty_id=1, program_id=1, short_name="CS101", leader_id=student.id
    )
    group_engine.join_group(principal(other_student), group_id, _group(session_factory, group_id).code)

    group_engine.delete_group(principal(admin), group_id)

    assert _group(session_factory, group_id) is None
    assert role_of(student) is Role.STUDENT
    with session_factory() as db:
        assert db.scalar(select(func.count()).select_from(Member)) == 0
        assert db.scalar(select(func.count()).select_from(ScheduleEntry)) == 0
    with pytest.raises(MemberNotFound):
        group_engine.leave_group(principal(other_student))


def test_delete_requires_admin(group_engine, catalog, student, principal):
    group_id = group_engine.create_group(principal(student), faculty_id=1, program_id=1, short_name="CS101")
    with pytest.raises(PermissionDenied):
        group_engine.delete_group(principal(student), group_id)


def test_delete_missing_group(group_engine, admin, principal):
    with pytest.raises(GroupNotFound):
        group_engine.delete_group(principal(admin), 12345)


def test_assign_leader_transfers_role(
    group_engine, catalog, admin, student, other_student, principal, role_of, session_factory
):
    group_id = group_engine.create_group(principal(student), faculty_id=1, program_id=1, short_name="CS101")
    group_engine.join_group(principal(other_student), group_id, _group(session_factory, group_id).code)

    group_engine.assign_leader(principal(admin), group_id, other_student.id)

    assert _group(session_factory, group_id).leader_id == other_student.id
    assert role_of(other_student) is Role.LEADER
    assert role_of(student) is Role.STUDENT


def test_assign_leader_requires_membership(group_engine, catalog, admin, student, principal):
    group_id = group_engine.create_group(principal(admin), faculty_id=1, program_id=1, short_name="CS101")
    with pytest.raises(MemberNotFound):
        group_engine.assign_leader(principal(admin), group_id, student.id)


def test_assign_leader_missing_group(group_engine, admin, student, principal):
    with pytest.raises(GroupNotFound):
        group_engine.assign_leader(principal(admin), 424242, student.id)


def test_summaries_filter_by_exact_names(group_engine, catalog, admin, principal):
    group_engine.create_group(principal(admin), faculty_id=1, program_id=1, short_name="CS101")
    group_engine.create_group(principal(admin), faculty_id=1, program_id=3, short_name="ROB101")
    group_engine.create_group(principal(admin), faculty_id=2, program_id=7, short_name="PHYS1")
    viewer = principal(admin)

    everything = group_engine.get_group_summaries(viewer)
    assert [s.short_name for s in everything] == ["CS101", "ROB101", "PHYS1"]

    engineering = group_engine.get_group_summaries(viewer, GroupFilter(faculty="Engineering"))
    assert {s.short_name for s in engineering} == {"CS101", "ROB101"}

    robotics = group_engine.get_group_summaries(
        viewer, GroupFilter(faculty="Engineering", program="Robotics")
    )
    assert [s.short_name for s in robotics] == ["ROB101"]
    assert robotics[0].faculty == "Engineering"
    assert robotics[0].program == "Robotics"

    assert group_engine.get_group_summaries(viewer, GroupFilter(faculty="engineering")) == []


def test_current_group_details_redact_code(
    group_engine, catalog, student, other_student, principal, session_factory
):
    group_id = group_engine.create_group(principal(student), faculty_id=1, program_id=1, short_name="CS101")
    code = _group(session_factory, group_id).code
    group_engine.join_group(principal(other_student), group_id, code)

    as_leader = group_engine.get_current_group(principal(student))
    as_member = group_engine.get_current_group(principal(other_student))

    assert as_leader.id == group_id
    assert as_leader.code == code
    assert as_leader.faculty == "Engineering"
    assert as_leader.program == "Software Engineering"
    assert as_leader.people_count == 2
    assert as_member.code is None


def test_current_group_without_membership(group_engine, student, principal):
    with pytest.raises(MemberNotFound):
        group_engine.get_current_group(principal(student))


def test_cancelled_operation_rolls_back(group_engine, catalog, student, principal, role_of, session_factory):
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(OperationCancelled) as exc_info:
        group_engine.create_group(
            principal(student), faculty_id=1, program_id=1, short_name="CS101", cancel=cancel
        )

    assert exc_info.value.kind is ErrorKind.INTERNAL
    assert role_of(student) is Role.STUDENT
    with session_factory() as db:
        assert db.scalar(select(func.count()).select_from(Group)) == 0


class _BrokenCatalog(CatalogService):
    def get_program(self, program_id):
        raise OperationalError("SELECT programs", {}, Exception("disk I/O error"))


def test_store_failures_become_internal_errors(session_factory, catalog, admin, principal, metrics):
    engine = GroupEngine(session_factory, metrics=metrics, catalog_factory=_BrokenCatalog)

    with pytest.raises(InternalError) as exc_info:
        engine.create_group(principal(admin), faculty_id=1, program_id=1, short_name="CS101")

    assert exc_info.value.message.startswith("create_group:")
    assert isinstance(exc_info.value.__cause__, OperationalError)
    assert metrics.value(
        "group_engine_operations_total", {"operation": "create_group", "outcome": "error"}
    ) == 1.0


def test_principal_is_explicit(group_engine, catalog, student):
    """A principal built with a stale role is judged by the role it carries."""
    stale_admin = Principal(user_id=student.id, role=Role.ADMIN)
    with pytest.raises(PermissionDenied):
        group_engine.join_group(stale_admin, 1, "abcd")
