from typing import Iterable, Optional, Set

from classwork.schemas.classwork import ClassMembership


def classes_for_student(student_id: str, memberships: Optional[Iterable[ClassMembership]]) -> Set[str]:
    """Distinct class ids the student is enrolled in; empty when there are none."""
    if not memberships:
        return set()
    return {m.class_id for m in memberships if m.student_id == student_id}
