from .errors import ClassworkDataError, ClassworkSourceError
from .membership import classes_for_student
from .distribution import is_distributed_to
from .visibility import ExclusionReason, VisibilityDecision, ResolutionReport, explain, visible_work, hidden_work, summarize

__all__ = ["ClassworkDataError", "ClassworkSourceError",
           "classes_for_student", "is_distributed_to",
           "ExclusionReason", "VisibilityDecision", "ResolutionReport",
           "explain", "visible_work", "hidden_work", "summarize"]
