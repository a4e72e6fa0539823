from .classwork import (
    WorkKind,
    ClassMembership,
    StreamItemRecord,
    WorkRecord,
    DirectAssignment,
    StudentRecord,
    ClassworkSnapshot,
    VisibleWorkItem,
    StudentClassworkResponse,
    HiddenWorkItem,
    ResolutionSummary,
    HiddenWorkResponse,
)
