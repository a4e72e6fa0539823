from typing import Optional

from classwork.schemas.classwork import WorkRecord


def is_distributed_to(work: WorkRecord, group: Optional[str], direct: bool = False) -> bool:
    """Decide whether a piece of work is addressed to a student.

    ``assign_to_all`` wins over any group targeting. Otherwise the work reaches
    the student when they were targeted individually (``direct``) or when their
    group appears in ``assigned_groups``. A student without a group is only
    reached by assign-to-all or direct targeting.
    """
    if work.assign_to_all:
        return True
    if direct:
        return True
    if not group:
        return False
    return group in (work.assigned_groups or ())
