"""
Company reference data used by the company archetype resolver.

Rows are admin-seeded and read-only at resolution time.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON
from sqlalchemy.orm import validates
from sqlalchemy.sql import func
from hiready.db.base import Base
from hiready.core.archetype_tables import COMPANY_ARCHETYPES, CONFIDENCE_LEVELS, is_valid_company_archetype


class Company(Base):
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True, index=True)
    aliases = Column(JSON, nullable=True)  # ["TCS", "Tata Consultancy"]
    archetype = Column(String, nullable=True, index=True)
    confidence = Column(String, nullable=True, default="medium")  # high / medium / low
    sector = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    # {"hrScreen": true, "codingChallenge": true, "systemDesign": false, ...}
    interview_components = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @validates("archetype")
    def validate_archetype(self, key, value):
        if not is_valid_company_archetype(value):
            raise ValueError(f"Unknown company archetype '{value}'. Expected one of: {', '.join(COMPANY_ARCHETYPES)}")
        return value

    @validates("confidence")
    def validate_confidence(self, key, value):
        if value is not None and value not in CONFIDENCE_LEVELS:
            raise ValueError(f"Unknown confidence '{value}'")
        return value

    def __repr__(self):
        return f"<Company(id={self.id}, name='{self.name}', archetype='{self.archetype}')>"
