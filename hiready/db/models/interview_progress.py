"""
Attempt tracking models.

InterviewAssignment is the (user, scope, interview type) unit that repeated
practice attempts roll up into; HireadyIndexSnapshot records the consolidated
index after every attempt.
"""
from typing import Optional
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Float, Boolean, JSON, UniqueConstraint, Index
from sqlalchemy.sql import func
from hiready.db.base import Base


def build_scope_key(role_kit_id: Optional[int], job_target_id: Optional[int]) -> str:
    """
    Collapse the nullable scope columns into one comparable key.

    Unique constraints treat NULLs as distinct, so the raw columns cannot
    enforce one assignment per (user, null, null, type).
    """
    return f"{role_kit_id if role_kit_id is not None else '-'}:{job_target_id if job_target_id is not None else '-'}"


class InterviewAssignment(Base):
    __tablename__ = "interview_assignments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    role_kit_id = Column(Integer, ForeignKey("role_kits.id"), nullable=True)
    job_target_id = Column(Integer, ForeignKey("job_targets.id"), nullable=True)
    scope_key = Column(String, nullable=False)
    interview_type = Column(String, nullable=False)

    attempt_count = Column(Integer, nullable=False, default=0)
    latest_session_id = Column(Integer, nullable=True)
    latest_score = Column(Float, nullable=True)
    best_session_id = Column(Integer, nullable=True)
    best_score = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "scope_key", "interview_type", name="uq_assignment_user_scope_type"),
    )

    def __repr__(self):
        return (
            f"<InterviewAssignment(id={self.id}, user_id={self.user_id}, scope='{self.scope_key}', "
            f"type='{self.interview_type}', attempts={self.attempt_count})>"
        )


class HireadyIndexSnapshot(Base):
    __tablename__ = "hiready_index_snapshots"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    role_kit_id = Column(Integer, ForeignKey("role_kits.id"), nullable=True)
    job_target_id = Column(Integer, ForeignKey("job_targets.id"), nullable=True)
    scope_key = Column(String, nullable=False)

    interview_session_id = Column(Integer, nullable=True)
    interview_type = Column(String, nullable=True)
    attempt_score = Column(Float, nullable=True)

    consolidated_index = Column(Float, nullable=False)  # 0-100
    weighted_scores = Column(JSON, nullable=True)  # {"technical": {"score": 72, "weight": 3.0}}

    is_latest = Column(Boolean, nullable=False, default=False)
    is_best = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("idx_snapshots_user_scope", "user_id", "scope_key"),
    )

    def __repr__(self):
        return (
            f"<HireadyIndexSnapshot(id={self.id}, scope='{self.scope_key}', index={self.consolidated_index}, "
            f"latest={self.is_latest}, best={self.is_best})>"
        )
