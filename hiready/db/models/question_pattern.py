from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, JSON, Index
from sqlalchemy.sql import func
from hiready.db.base import Base


class QuestionPattern(Base):
    """
    Reusable interview question with a probe tree.

    probe_tree keys: ``always``, ``ifVague``, ``ifStrong``, ``followUp``
    (each a list of probe questions, all optional).
    """
    __tablename__ = "question_patterns"

    id = Column(Integer, primary_key=True, index=True)
    pattern_type = Column(String, nullable=False)  # resume_claim, behavioral, technical_depth, ...
    role_category = Column(String, nullable=True)  # tech / data / product / sales / business, null = any
    interview_type = Column(String, nullable=True)
    template = Column(Text, nullable=False)
    probe_tree = Column(JSON, nullable=True)
    tags = Column(JSON, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_patterns_category_type", "role_category", "interview_type"),
    )

    def __repr__(self):
        return f"<QuestionPattern(id={self.id}, type='{self.pattern_type}')>"
