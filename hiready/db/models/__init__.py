"""
Database models module.

Imports every model so they are registered on Base.metadata before table
creation or migration autogeneration.
"""
from hiready.db.models.user import User
from hiready.db.models.company import Company
from hiready.db.models.role_archetype import RoleArchetype, RoleInterviewStructureDefault, RoleTaskBlueprint, RoleKit
from hiready.db.models.job_target import JobTarget
from hiready.db.models.interview_progress import InterviewAssignment, HireadyIndexSnapshot
from hiready.db.models.interview_session import InterviewSession, InterviewAnalysis
from hiready.db.models.question_pattern import QuestionPattern

__all__ = [
    "User",
    "Company",
    "RoleArchetype",
    "RoleInterviewStructureDefault",
    "RoleTaskBlueprint",
    "RoleKit",
    "JobTarget",
    "InterviewAssignment",
    "HireadyIndexSnapshot",
    "InterviewSession",
    "InterviewAnalysis",
    "QuestionPattern",
]
