"""
Shared builders for the classwork tests.

Records are built directly from the pydantic schemas so every test exercises
the same validation the data sources use.
"""
import pytest

from classwork.schemas.classwork import (
    ClassMembership,
    ClassworkSnapshot,
    DirectAssignment,
    StreamItemRecord,
    StudentRecord,
    WorkKind,
    WorkRecord,
)

STUDENT = "091b48c3-3e13-49b0-ae5b-99e52d96c626"
OTHER_STUDENT = "5f0c6d1e-8a51-4b7e-9a1d-2c9b7c1e0f42"
GROUP = "Tribu3"


def membership(student_id=STUDENT, class_id="C1"):
    return ClassMembership(student_id=student_id, class_id=class_id)


def stream_item(id, class_id="C1", type=None, archived=False, title=None):
    return StreamItemRecord(id=id, class_id=class_id, type=type, archived=archived, title=title or f"Post {id}")


def work(id, stream_item_id=None, kind=WorkKind.ASSIGNMENT, assign_to_all=False,
         assigned_groups=(), deleted=False, visible=True):
    return WorkRecord(
        id=id,
        stream_item_id=stream_item_id or f"si-{id}",
        kind=kind,
        assign_to_all=assign_to_all,
        assigned_groups=assigned_groups,
        deleted=deleted,
        visible=visible,
    )


def direct(work_id, student_id=STUDENT, kind=WorkKind.ASSIGNMENT):
    return DirectAssignment(work_id=work_id, student_id=student_id, kind=kind)


@pytest.fixture
def scenario():
    """The six example situations for one student in C1, group Tribu3."""
    stream_items = [
        stream_item("si-A1", "C1"),
        stream_item("si-A2", "C1"),
        stream_item("si-A3", "C1"),
        stream_item("si-A4", "C2"),
        stream_item("si-A5", "C1", archived=True),
        stream_item("si-A6", "C1"),
    ]
    works = [
        work("A1", assigned_groups=[GROUP]),
        work("A2", assigned_groups=["Tribu1"]),
        work("A3", assign_to_all=True),
        work("A4", assign_to_all=True),
        work("A5", assign_to_all=True),
        work("A6", assigned_groups=[GROUP], deleted=True),
    ]
    return {
        "memberships": [membership(STUDENT, "C1"), membership(OTHER_STUDENT, "C2")],
        "stream_items": stream_items,
        "work": works,
    }


@pytest.fixture
def snapshot(scenario):
    quiz_item = stream_item("si-Q1", "C1", type="quiz", title="Quiz 1")
    return ClassworkSnapshot(
        memberships=scenario["memberships"],
        stream_items=[*scenario["stream_items"], quiz_item],
        assignments=scenario["work"],
        quizzes=[work("Q1", "si-Q1", kind=WorkKind.QUIZ, assigned_groups=[GROUP])],
        students=[StudentRecord(id=STUDENT, group_assigned=GROUP), StudentRecord(id=OTHER_STUDENT)],
    )
