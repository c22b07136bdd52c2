from sqlalchemy import Column, Integer, String, ForeignKey, Text, DateTime, JSON, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from hiready.db.base import Base


class InterviewSession(Base):
    __tablename__ = "interview_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Scope: at most one of these is normally set
    role_kit_id = Column(Integer, ForeignKey("role_kits.id"), nullable=True, index=True)
    job_target_id = Column(Integer, ForeignKey("job_targets.id"), nullable=True, index=True)
    employer_job_id = Column(Integer, nullable=True, index=True)

    interview_type = Column(String, nullable=False, default="general")
    status = Column(String, nullable=False, default="created")  # created / in_progress / completed / analyzed / failed
    transcript = Column(Text, nullable=True)

    assignment_id = Column(Integer, ForeignKey("interview_assignments.id"), nullable=True)
    attempt_number = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    analysis = relationship("InterviewAnalysis", uselist=False, back_populates="session")

    __table_args__ = (
        Index("idx_sessions_user_status", "user_id", "status"),
    )

    def __repr__(self):
        return f"<InterviewSession(id={self.id}, type='{self.interview_type}', status='{self.status}')>"


class InterviewAnalysis(Base):
    """LLM-produced scoring of one session. Written once, never updated."""
    __tablename__ = "interview_analyses"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("interview_sessions.id"), nullable=False, unique=True)

    # [{"dimension": "Communication", "score": 3.5, "evidence": ["..."]}]
    dimension_scores = Column(JSON, nullable=True)
    strengths = Column(JSON, nullable=True)
    improvements = Column(JSON, nullable=True)
    overall_recommendation = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    session = relationship("InterviewSession", back_populates="analysis")

    def __repr__(self):
        return f"<InterviewAnalysis(id={self.id}, session_id={self.session_id})>"
