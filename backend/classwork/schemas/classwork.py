from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class WorkKind(str, Enum):
    ASSIGNMENT = "assignment"
    QUIZ = "quiz"

    def __str__(self):
        return self.value


# Records accept the camelCase keys of the JSON export, the snake_case
# columns of the database and ORM objects alike.
_RECORD_CONFIG = ConfigDict(
    from_attributes=True,
    populate_by_name=True,
    frozen=True,
    coerce_numbers_to_str=True,
)


def _false_if_null(v: Any) -> Any:
    return False if v is None else v


class ClassMembership(BaseModel):
    model_config = _RECORD_CONFIG

    student_id: str = Field(validation_alias=AliasChoices("student_id", "userId", "user_id", "studentId"))
    class_id: str = Field(validation_alias=AliasChoices("class_id", "classId"))
    id: Optional[str] = None
    role: Optional[str] = None
    status: Optional[str] = None


class StreamItemRecord(BaseModel):
    model_config = _RECORD_CONFIG

    id: str
    # Null when the class was removed after the post was made
    class_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("class_id", "classId"))
    type: Optional[str] = None
    title: str = ""
    archived: bool = Field(default=False, validation_alias=AliasChoices("archived", "isArchived", "is_archived"))

    @field_validator("archived", mode="before")
    @classmethod
    def null_archived(cls, v):
        return _false_if_null(v)

    @field_validator("title", mode="before")
    @classmethod
    def null_title(cls, v):
        return "" if v is None else v


class WorkRecord(BaseModel):
    """An assignment or a quiz together with its distribution rules"""

    model_config = _RECORD_CONFIG

    id: str
    stream_item_id: str = Field(validation_alias=AliasChoices("stream_item_id", "streamItemId"))
    kind: WorkKind = WorkKind.ASSIGNMENT
    assign_to_all: bool = Field(default=False, validation_alias=AliasChoices("assign_to_all", "assignToAll"))
    assigned_groups: Tuple[str, ...] = Field(
        default=(), validation_alias=AliasChoices("assigned_groups", "assignedGroups")
    )
    deleted: bool = Field(default=False, validation_alias=AliasChoices("deleted", "isDeleted", "is_deleted"))
    visible: bool = Field(default=True, validation_alias=AliasChoices("visible", "isVisible", "is_visible"))

    @field_validator("assign_to_all", "deleted", mode="before")
    @classmethod
    def null_flags(cls, v):
        return _false_if_null(v)

    @field_validator("visible", mode="before")
    @classmethod
    def null_visible(cls, v):
        # Only an explicit false hides the work
        return True if v is None else v

    @field_validator("assigned_groups", mode="before")
    @classmethod
    def normalize_groups(cls, v):
        if v is None:
            return ()
        if isinstance(v, str):
            return (v,)
        return tuple(v)


class DirectAssignment(BaseModel):
    """A single student targeted by a piece of work, independent of groups"""

    model_config = _RECORD_CONFIG

    work_id: str = Field(
        validation_alias=AliasChoices("work_id", "assignmentId", "assignment_id", "quizId", "quiz_id")
    )
    student_id: str = Field(validation_alias=AliasChoices("student_id", "studentId"))
    kind: WorkKind = WorkKind.ASSIGNMENT


class StudentRecord(BaseModel):
    model_config = _RECORD_CONFIG

    id: str
    group_assigned: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("group_assigned", "grupoAsignado", "grupo_asignado")
    )
    role: Optional[str] = None

    @field_validator("group_assigned", mode="before")
    @classmethod
    def blank_group(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ClassworkSnapshot(BaseModel):
    """Everything the resolver needs, already materialized in memory"""

    memberships: List[ClassMembership] = Field(default_factory=list)
    stream_items: List[StreamItemRecord] = Field(default_factory=list)
    assignments: List[WorkRecord] = Field(default_factory=list)
    quizzes: List[WorkRecord] = Field(default_factory=list)
    direct_assignments: List[DirectAssignment] = Field(default_factory=list)
    students: List[StudentRecord] = Field(default_factory=list)

    @property
    def work(self) -> List[WorkRecord]:
        return [*self.assignments, *self.quizzes]

    def student(self, student_id: str) -> Optional[StudentRecord]:
        for student in self.students:
            if student.id == student_id:
                return student
        return None


# Response schemas
class VisibleWorkItem(BaseModel):
    id: str
    kind: WorkKind
    stream_item_id: str
    class_id: Optional[str] = None
    title: str = ""
    assign_to_all: bool
    assigned_groups: List[str] = []


class StudentClassworkResponse(BaseModel):
    student_id: str
    group: Optional[str] = None
    assignments: List[VisibleWorkItem] = []
    quizzes: List[VisibleWorkItem] = []


class HiddenWorkItem(VisibleWorkItem):
    reason: str


class ResolutionSummary(BaseModel):
    total: int
    visible: int
    excluded: Dict[str, int] = {}
    orphaned: int = 0


class HiddenWorkResponse(BaseModel):
    student_id: str
    group: Optional[str] = None
    hidden: List[HiddenWorkItem] = []
    summary: ResolutionSummary
