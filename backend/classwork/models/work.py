from sqlalchemy import Column, String, ForeignKey, DateTime, Boolean, Integer, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID, ARRAY
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from classwork.core.database import Base


class Assignment(Base):
    __tablename__ = "assignments"

    id = Column(UUID(as_uuid=False), primary_key=True, default=lambda: str(uuid.uuid4()))
    stream_item_id = Column(UUID(as_uuid=False), ForeignKey("stream_items.id"), nullable=False, unique=True)
    points = Column(Integer, nullable=True)
    due_date = Column(String(20), nullable=True)
    due_time = Column(String(10), nullable=True)
    instructions = Column(Text, nullable=True)
    assign_to_all = Column(Boolean, default=True, nullable=False)
    assigned_groups = Column(ARRAY(String), nullable=True)
    is_deleted = Column(Boolean, default=False, nullable=False)
    is_visible = Column(Boolean, default=True, nullable=False, server_default="true")
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    stream_item = relationship("StreamItem")
    students = relationship("AssignmentStudent", back_populates="assignment")


class AssignmentStudent(Base):
    __tablename__ = "assignment_students"
    __table_args__ = (
        UniqueConstraint('assignment_id', 'student_id', name='_assignment_student_uc'),
    )

    id = Column(UUID(as_uuid=False), primary_key=True, default=lambda: str(uuid.uuid4()))
    assignment_id = Column(UUID(as_uuid=False), ForeignKey("assignments.id"), nullable=False)
    student_id = Column(UUID(as_uuid=False), ForeignKey("users.id"), nullable=False)

    assignment = relationship("Assignment", back_populates="students")


class Quiz(Base):
    __tablename__ = "quizzes"

    id = Column(UUID(as_uuid=False), primary_key=True, default=lambda: str(uuid.uuid4()))
    stream_item_id = Column(UUID(as_uuid=False), ForeignKey("stream_items.id"), nullable=False, unique=True)
    points = Column(Integer, nullable=True)
    due_date = Column(String(20), nullable=True)
    due_time = Column(String(10), nullable=True)
    description = Column(Text, nullable=True)
    assign_to_all = Column(Boolean, default=True, nullable=False)
    assigned_groups = Column(ARRAY(String), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    stream_item = relationship("StreamItem")
    students = relationship("QuizStudent", back_populates="quiz")


class QuizStudent(Base):
    __tablename__ = "quiz_students"
    __table_args__ = (
        UniqueConstraint('quiz_id', 'student_id', name='_quiz_student_uc'),
    )

    id = Column(UUID(as_uuid=False), primary_key=True, default=lambda: str(uuid.uuid4()))
    quiz_id = Column(UUID(as_uuid=False), ForeignKey("quizzes.id"), nullable=False)
    student_id = Column(UUID(as_uuid=False), ForeignKey("users.id"), nullable=False)

    quiz = relationship("Quiz", back_populates="students")
