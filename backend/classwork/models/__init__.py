from .user import User, UserRole
from .classroom import Class, ClassMember, StreamItem
from .work import Assignment, AssignmentStudent, Quiz, QuizStudent

__all__ = ["User", "UserRole",
           "Class", "ClassMember", "StreamItem",
           "Assignment", "AssignmentStudent", "Quiz", "QuizStudent"]
