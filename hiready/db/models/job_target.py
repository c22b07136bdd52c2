"""
JobTarget model: one user's tracked job application.

The archetype columns are a denormalized cache of the resolver output and are
rewritten whenever the target is re-resolved.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Float, Index
from sqlalchemy.orm import relationship, validates
from sqlalchemy.sql import func
from hiready.db.base import Base

JOB_TARGET_STATUSES = ("saved", "applied", "interview", "offer", "rejected", "archived")


class JobTarget(Base):
    __tablename__ = "job_targets"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    role_title = Column(String, nullable=False)
    company_name = Column(String, nullable=True)
    jd_text = Column(Text, nullable=True)
    experience_level = Column(String, nullable=True)

    # Resolver cache
    company_archetype = Column(String, nullable=True)
    role_archetype_id = Column(String, ForeignKey("role_archetypes.id"), nullable=True)
    role_family = Column(String, nullable=True)
    archetype_confidence = Column(String, nullable=True)

    status = Column(String, nullable=False, default="saved")
    readiness_score = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", backref="job_targets")

    __table_args__ = (
        Index("idx_job_targets_user_status", "user_id", "status"),
    )

    @validates("status")
    def validate_status(self, key, value):
        if value not in JOB_TARGET_STATUSES:
            raise ValueError(f"Unknown job target status '{value}'")
        return value

    def __repr__(self):
        return f"<JobTarget(id={self.id}, role='{self.role_title}', company='{self.company_name}')>"
