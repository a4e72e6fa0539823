from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from classwork.schemas.classwork import HiddenWorkResponse, StudentClassworkResponse
from classwork.services.classwork_source import ClassworkSource
from classwork.services.errors import ClassworkDataError, ClassworkSourceError
from classwork.services.student_classwork import StudentClassworkService
from classwork.utils.deps import get_classwork_source

logger = logging.getLogger(__name__)

router = APIRouter()


def _source_failure(e: Exception) -> HTTPException:
    if isinstance(e, ClassworkDataError):
        logger.error(f"Malformed classwork data: {e}")
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Malformed classwork data: {e}"
        )
    logger.error(f"Classwork source unavailable: {e}")
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=str(e)
    )


@router.get("/{student_id}/classwork", response_model=StudentClassworkResponse)
async def get_student_classwork(
    student_id: str,
    group: Optional[str] = Query(None, description="Overrides the student's stored group"),
    source: ClassworkSource = Depends(get_classwork_source)
):
    """Assignments and quizzes visible to the student"""
    try:
        return await StudentClassworkService.get_visible_classwork(source, student_id, group)
    except (ClassworkDataError, ClassworkSourceError) as e:
        raise _source_failure(e) from e


@router.get("/{student_id}/classwork/hidden", response_model=HiddenWorkResponse)
async def get_hidden_student_classwork(
    student_id: str,
    group: Optional[str] = Query(None, description="Overrides the student's stored group"),
    source: ClassworkSource = Depends(get_classwork_source)
):
    """Work posted in the student's classes that is not distributed to them"""
    try:
        return await StudentClassworkService.get_hidden_classwork(source, student_id, group)
    except (ClassworkDataError, ClassworkSourceError) as e:
        raise _source_failure(e) from e
