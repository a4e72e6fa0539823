import logging
from typing import Optional

from classwork.schemas.classwork import (
    ClassworkSnapshot,
    HiddenWorkItem,
    HiddenWorkResponse,
    ResolutionSummary,
    StudentClassworkResponse,
    VisibleWorkItem,
    WorkKind,
)
from classwork.services.classwork_source import ClassworkSource
from classwork.services.visibility import VisibilityDecision, explain, hidden_work, summarize

logger = logging.getLogger(__name__)


def _work_item(decision: VisibilityDecision) -> dict:
    work = decision.work
    stream_item = decision.stream_item
    return {
        "id": work.id,
        "kind": work.kind,
        "stream_item_id": work.stream_item_id,
        "class_id": stream_item.class_id if stream_item else None,
        "title": stream_item.title if stream_item else "",
        "assign_to_all": work.assign_to_all,
        "assigned_groups": list(work.assigned_groups),
    }


class StudentClassworkService:
    @staticmethod
    def resolve_group(snapshot: ClassworkSnapshot, student_id: str, group: Optional[str]) -> Optional[str]:
        """An explicit group wins; otherwise the student's stored group, if any"""
        if group:
            return group
        student = snapshot.student(student_id)
        return student.group_assigned if student else None

    @staticmethod
    def decisions(snapshot: ClassworkSnapshot, student_id: str, group: Optional[str]):
        return explain(
            student_id,
            group,
            snapshot.memberships,
            snapshot.stream_items,
            snapshot.work,
            snapshot.direct_assignments,
        )

    @staticmethod
    async def get_visible_classwork(
        source: ClassworkSource,
        student_id: str,
        group: Optional[str] = None
    ) -> StudentClassworkResponse:
        snapshot = await source.load(student_id)
        group = StudentClassworkService.resolve_group(snapshot, student_id, group)
        decisions = StudentClassworkService.decisions(snapshot, student_id, group)

        visible = [d for d in decisions if d.visible]
        logger.info(f"Student {student_id} (group {group}) sees {len(visible)} of {len(decisions)} work items")

        return StudentClassworkResponse(
            student_id=student_id,
            group=group,
            assignments=[VisibleWorkItem(**_work_item(d)) for d in visible if d.work.kind == WorkKind.ASSIGNMENT],
            quizzes=[VisibleWorkItem(**_work_item(d)) for d in visible if d.work.kind == WorkKind.QUIZ],
        )

    @staticmethod
    async def get_hidden_classwork(
        source: ClassworkSource,
        student_id: str,
        group: Optional[str] = None
    ) -> HiddenWorkResponse:
        snapshot = await source.load(student_id)
        group = StudentClassworkService.resolve_group(snapshot, student_id, group)
        decisions = StudentClassworkService.decisions(snapshot, student_id, group)
        report = summarize(decisions)

        return HiddenWorkResponse(
            student_id=student_id,
            group=group,
            hidden=[
                HiddenWorkItem(**_work_item(d), reason=d.reason.value)
                for d in hidden_work(decisions)
            ],
            summary=ResolutionSummary(
                total=report.total,
                visible=report.visible,
                excluded={reason.value: count for reason, count in report.excluded.items()},
                orphaned=report.orphaned,
            ),
        )
