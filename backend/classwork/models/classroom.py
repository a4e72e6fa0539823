from sqlalchemy import Column, String, ForeignKey, DateTime, Boolean, Text, UniqueConstraint, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from classwork.core.database import Base


class Class(Base):
    __tablename__ = "classes"

    id = Column(UUID(as_uuid=False), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    class_code = Column(String(16), nullable=True, unique=True)
    teacher_id = Column(UUID(as_uuid=False), ForeignKey("users.id"), nullable=True)
    is_archived = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    members = relationship("ClassMember", back_populates="klass")
    stream_items = relationship("StreamItem", back_populates="klass")


class ClassMember(Base):
    __tablename__ = "class_members"
    __table_args__ = (
        UniqueConstraint('class_id', 'user_id', name='_class_member_uc'),
        Index('idx_class_members_user_id', 'user_id'),
    )

    id = Column(UUID(as_uuid=False), primary_key=True, default=lambda: str(uuid.uuid4()))
    class_id = Column(UUID(as_uuid=False), ForeignKey("classes.id"), nullable=False)
    user_id = Column(UUID(as_uuid=False), ForeignKey("users.id"), nullable=False)
    role = Column(String(50), nullable=False, default="student")
    status = Column(String(50), nullable=False, default="active")
    joined_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    klass = relationship("Class", back_populates="members")
    user = relationship("User", back_populates="memberships")


class StreamItem(Base):
    __tablename__ = "stream_items"
    __table_args__ = (
        Index('idx_stream_items_class_id', 'class_id'),
    )

    id = Column(UUID(as_uuid=False), primary_key=True, default=lambda: str(uuid.uuid4()))
    class_id = Column(UUID(as_uuid=False), ForeignKey("classes.id"), nullable=False)
    type = Column(String(50), nullable=False)  # announcement, assignment, quiz, material
    title = Column(String(255), nullable=False, default="")
    content = Column(Text, nullable=True)
    author_id = Column(UUID(as_uuid=False), ForeignKey("users.id"), nullable=True)
    is_archived = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    klass = relationship("Class", back_populates="stream_items")
