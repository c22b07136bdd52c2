"""
Role archetype reference data: archetypes, their seniority-specific interview
structures, and the task blueprints practice sessions are generated from.
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, JSON, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from hiready.db.base import Base


class RoleArchetype(Base):
    __tablename__ = "role_archetypes"

    id = Column(String, primary_key=True)  # stable key, e.g. "data_analyst"
    name = Column(String, nullable=False)
    role_family = Column(String, nullable=False, index=True)  # tech / data / product / sales / business
    description = Column(Text, nullable=True)

    common_interview_types = Column(JSON, nullable=True)  # ["technical", "case", "hr"]
    primary_skill_dimensions = Column(JSON, nullable=True)
    common_failure_modes = Column(JSON, nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<RoleArchetype(id='{self.id}', family='{self.role_family}')>"


class RoleInterviewStructureDefault(Base):
    __tablename__ = "role_interview_structure_defaults"

    id = Column(Integer, primary_key=True, index=True)
    role_archetype_id = Column(String, ForeignKey("role_archetypes.id"), nullable=False, index=True)
    seniority = Column(String, nullable=False)  # entry / mid / senior

    phases_json = Column(JSON, nullable=False)  # [{"name": ..., "mins": ..., "subphases": [...]}]
    emphasis_weights_json = Column(JSON, nullable=True)  # {"Case Study": 1.5}

    role_archetype = relationship("RoleArchetype", backref="structure_defaults")

    __table_args__ = (
        UniqueConstraint("role_archetype_id", "seniority", name="uq_structure_role_seniority"),
    )

    def __repr__(self):
        return f"<RoleInterviewStructureDefault(role='{self.role_archetype_id}', seniority='{self.seniority}')>"


class RoleTaskBlueprint(Base):
    __tablename__ = "role_task_blueprints"

    id = Column(Integer, primary_key=True, index=True)
    role_archetype_id = Column(String, ForeignKey("role_archetypes.id"), nullable=False, index=True)
    task_type = Column(String, nullable=False)  # behavioral_star, case_interview, coding_explain, ...
    difficulty_band = Column(String, nullable=True, default="entry-mid")

    prompt_template = Column(Text, nullable=False)
    expected_signals_json = Column(JSON, nullable=True)
    probe_tree_json = Column(JSON, nullable=True)
    tags_json = Column(JSON, nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    role_archetype = relationship("RoleArchetype", backref="task_blueprints")

    __table_args__ = (
        Index("idx_blueprints_role_task_type", "role_archetype_id", "task_type"),
    )

    def __repr__(self):
        return f"<RoleTaskBlueprint(id={self.id}, role='{self.role_archetype_id}', task_type='{self.task_type}')>"


class RoleKit(Base):
    """A curated practice track for a role, used as a scope when no job target exists."""
    __tablename__ = "role_kits"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    role_archetype_id = Column(String, ForeignKey("role_archetypes.id"), nullable=True, index=True)
    level = Column(String, nullable=True)  # entry / mid / senior
    domain = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    role_archetype = relationship("RoleArchetype", backref="role_kits")

    def __repr__(self):
        return f"<RoleKit(id={self.id}, name='{self.name}')>"
