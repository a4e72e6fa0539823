"""Which assignments and quizzes a student can see.

Work is visible when its stream item exists and is live (not archived), the
work itself is neither soft-deleted nor hidden by its author, the student is
enrolled in the stream item's class, and the distribution rule addresses the
student. Everything here is a pure function of the collections passed in.
"""
import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from classwork.schemas.classwork import (
    ClassMembership,
    DirectAssignment,
    StreamItemRecord,
    WorkKind,
    WorkRecord,
)
from classwork.services.distribution import is_distributed_to
from classwork.services.membership import classes_for_student

logger = logging.getLogger(__name__)


class ExclusionReason(str, Enum):
    ORPHANED_REFERENCE = "orphaned_reference"
    ARCHIVED = "archived"
    DELETED = "deleted"
    HIDDEN = "hidden"
    NOT_ENROLLED = "not_enrolled"
    NOT_DISTRIBUTED = "not_distributed"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class VisibilityDecision:
    work: WorkRecord
    stream_item: Optional[StreamItemRecord]
    reason: Optional[ExclusionReason] = None

    @property
    def visible(self) -> bool:
        return self.reason is None


@dataclass
class ResolutionReport:
    total: int = 0
    visible: int = 0
    excluded: Dict[ExclusionReason, int] = field(default_factory=dict)

    @property
    def orphaned(self) -> int:
        return self.excluded.get(ExclusionReason.ORPHANED_REFERENCE, 0)


def _index_stream_items(stream_items: Optional[Iterable[StreamItemRecord]]) -> Dict[str, StreamItemRecord]:
    index: Dict[str, StreamItemRecord] = {}
    for item in stream_items or ():
        # First occurrence wins, like a linear search over the collection
        index.setdefault(item.id, item)
    return index


def _direct_targets(
    student_id: str, direct_assignments: Optional[Iterable[DirectAssignment]]
) -> Set[Tuple[WorkKind, str]]:
    return {
        (d.kind, d.work_id)
        for d in direct_assignments or ()
        if d.student_id == student_id
    }


def _decide(
    work: WorkRecord,
    stream_item: Optional[StreamItemRecord],
    class_ids: Set[str],
    group: Optional[str],
    direct_targets: Set[Tuple[WorkKind, str]],
) -> Optional[ExclusionReason]:
    if stream_item is None:
        logger.warning(f"{work.kind} {work.id} references missing stream item {work.stream_item_id}")
        return ExclusionReason.ORPHANED_REFERENCE
    if stream_item.type and stream_item.type != work.kind.value:
        logger.warning(
            f"{work.kind} {work.id} references stream item {stream_item.id} of type {stream_item.type}"
        )
        return ExclusionReason.ORPHANED_REFERENCE
    if stream_item.archived:
        return ExclusionReason.ARCHIVED
    if work.deleted:
        return ExclusionReason.DELETED
    if not work.visible:
        return ExclusionReason.HIDDEN
    if stream_item.class_id not in class_ids:
        return ExclusionReason.NOT_ENROLLED
    if not is_distributed_to(work, group, direct=(work.kind, work.id) in direct_targets):
        return ExclusionReason.NOT_DISTRIBUTED
    return None


def explain(
    student_id: str,
    group: Optional[str],
    memberships: Optional[Iterable[ClassMembership]],
    stream_items: Optional[Iterable[StreamItemRecord]],
    work: Optional[Iterable[WorkRecord]],
    direct_assignments: Optional[Iterable[DirectAssignment]] = None,
) -> List[VisibilityDecision]:
    """One decision per work item, in input order, with the first reason that excludes it."""
    class_ids = classes_for_student(student_id, memberships)
    index = _index_stream_items(stream_items)
    targets = _direct_targets(student_id, direct_assignments)

    decisions = []
    for w in work or ():
        stream_item = index.get(w.stream_item_id)
        reason = _decide(w, stream_item, class_ids, group, targets)
        decisions.append(VisibilityDecision(work=w, stream_item=stream_item, reason=reason))
    return decisions


def visible_work(
    student_id: str,
    group: Optional[str],
    memberships: Optional[Iterable[ClassMembership]],
    stream_items: Optional[Iterable[StreamItemRecord]],
    work: Optional[Iterable[WorkRecord]],
    direct_assignments: Optional[Iterable[DirectAssignment]] = None,
) -> List[WorkRecord]:
    """The work items visible to the student, in input order and unchanged."""
    decisions = explain(student_id, group, memberships, stream_items, work, direct_assignments)
    return [d.work for d in decisions if d.visible]


def hidden_work(decisions: Sequence[VisibilityDecision]) -> List[VisibilityDecision]:
    """Live work in the student's own classes that nevertheless does not reach them."""
    return [d for d in decisions if d.reason is ExclusionReason.NOT_DISTRIBUTED]


def summarize(decisions: Sequence[VisibilityDecision]) -> ResolutionReport:
    reasons = Counter(d.reason for d in decisions if d.reason is not None)
    report = ResolutionReport(
        total=len(decisions),
        visible=sum(1 for d in decisions if d.visible),
        excluded=dict(reasons),
    )
    if report.orphaned:
        logger.info(f"{report.orphaned} of {report.total} work items have no usable stream item")
    return report
