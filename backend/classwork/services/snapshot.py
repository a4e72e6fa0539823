"""Parsing of classwork records into a validated ``ClassworkSnapshot``.

Rows may come from the JSON export of the web app (camelCase keys), from
Postgres/Supabase (snake_case columns) or from ORM objects. Every row is
validated on the way in; a malformed row raises ``ClassworkDataError``
naming the collection and position instead of leaking half-filled records
into the resolver.
"""
import json
import logging
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, TypeVar, Union

from pydantic import ValidationError

from classwork.schemas.classwork import (
    ClassMembership,
    ClassworkSnapshot,
    DirectAssignment,
    StreamItemRecord,
    StudentRecord,
    WorkKind,
    WorkRecord,
)
from classwork.services.errors import ClassworkDataError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def parse_rows(collection: str, rows: Optional[Iterable[Any]], build: Callable[[Any], T]) -> List[T]:
    records = []
    for index, row in enumerate(rows or ()):
        try:
            records.append(build(row))
        except ValidationError as e:
            errors = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'row'}: {err['msg']}" for err in e.errors()
            )
            raise ClassworkDataError(collection, index, errors) from e
    return records


def _with_kind(model, kind: WorkKind) -> Callable[[Any], Any]:
    def build(row):
        if isinstance(row, dict):
            return model.model_validate({**row, "kind": kind})
        return model.model_validate(row).model_copy(update={"kind": kind})
    return build


def build_snapshot(
    memberships: Optional[Iterable[Any]] = None,
    stream_items: Optional[Iterable[Any]] = None,
    assignments: Optional[Iterable[Any]] = None,
    quizzes: Optional[Iterable[Any]] = None,
    assignment_students: Optional[Iterable[Any]] = None,
    quiz_students: Optional[Iterable[Any]] = None,
    users: Optional[Iterable[Any]] = None,
) -> ClassworkSnapshot:
    """Validate raw rows of every table into one snapshot; missing tables are empty."""
    return ClassworkSnapshot(
        memberships=parse_rows("class_members", memberships, ClassMembership.model_validate),
        stream_items=parse_rows("stream_items", stream_items, StreamItemRecord.model_validate),
        assignments=parse_rows("assignments", assignments, _with_kind(WorkRecord, WorkKind.ASSIGNMENT)),
        quizzes=parse_rows("quizzes", quizzes, _with_kind(WorkRecord, WorkKind.QUIZ)),
        direct_assignments=[
            *parse_rows("assignment_students", assignment_students, _with_kind(DirectAssignment, WorkKind.ASSIGNMENT)),
            *parse_rows("quiz_students", quiz_students, _with_kind(DirectAssignment, WorkKind.QUIZ)),
        ],
        students=parse_rows("users", users, StudentRecord.model_validate),
    )


def parse_snapshot(data: dict) -> ClassworkSnapshot:
    """Build a snapshot from the app's JSON export (``dummy-data.json`` layout)."""
    if not isinstance(data, dict):
        raise ClassworkDataError("snapshot", 0, f"expected an object, got {type(data).__name__}")

    return build_snapshot(
        memberships=data.get("classMembers"),
        stream_items=data.get("streamItems"),
        assignments=data.get("assignments"),
        quizzes=data.get("quizzes"),
        assignment_students=data.get("assignmentStudents"),
        quiz_students=data.get("quizStudents"),
        users=data.get("users"),
    )


def load_snapshot(path: Union[str, Path]) -> ClassworkSnapshot:
    path = Path(path)
    logger.info(f"Loading classwork snapshot from {path}")
    with path.open(encoding="utf-8") as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ClassworkDataError("snapshot", 0, f"invalid JSON: {e}") from e
    snapshot = parse_snapshot(data)
    logger.info(
        f"Loaded {len(snapshot.memberships)} memberships, {len(snapshot.stream_items)} stream items, "
        f"{len(snapshot.assignments)} assignments, {len(snapshot.quizzes)} quizzes"
    )
    return snapshot
