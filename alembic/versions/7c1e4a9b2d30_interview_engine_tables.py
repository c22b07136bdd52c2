"""interview_engine_tables

Revision ID: 7c1e4a9b2d30
Revises:
Create Date: 2026-02-03 11:42:17.508921

Production-safe migration: Only creates tables that do not exist yet.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '7c1e4a9b2d30'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
    ]


def upgrade() -> None:
    """Create users, reference data, job targets, sessions and progress tables."""
    if not table_exists('users'):
        op.create_table('users',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('full_name', sa.String(), nullable=False),
            sa.Column('email', sa.String(), nullable=True),
            sa.Column('password_hash', sa.String(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
        op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)

    if not table_exists('companies'):
        op.create_table('companies',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('aliases', sa.JSON(), nullable=True),
            sa.Column('archetype', sa.String(), nullable=True),
            sa.Column('confidence', sa.String(), nullable=True),
            sa.Column('sector', sa.String(), nullable=True),
            sa.Column('notes', sa.Text(), nullable=True),
            sa.Column('interview_components', sa.JSON(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_companies_id'), 'companies', ['id'], unique=False)
        op.create_index(op.f('ix_companies_name'), 'companies', ['name'], unique=True)
        op.create_index(op.f('ix_companies_archetype'), 'companies', ['archetype'], unique=False)

    if not table_exists('role_archetypes'):
        op.create_table('role_archetypes',
            sa.Column('id', sa.String(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('role_family', sa.String(), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('common_interview_types', sa.JSON(), nullable=True),
            sa.Column('primary_skill_dimensions', sa.JSON(), nullable=True),
            sa.Column('common_failure_modes', sa.JSON(), nullable=True),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_role_archetypes_role_family'), 'role_archetypes', ['role_family'], unique=False)

    if not table_exists('role_interview_structure_defaults'):
        op.create_table('role_interview_structure_defaults',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('role_archetype_id', sa.String(), nullable=False),
            sa.Column('seniority', sa.String(), nullable=False),
            sa.Column('phases_json', sa.JSON(), nullable=False),
            sa.Column('emphasis_weights_json', sa.JSON(), nullable=True),
            sa.ForeignKeyConstraint(['role_archetype_id'], ['role_archetypes.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('role_archetype_id', 'seniority', name='uq_structure_role_seniority')
        )
        op.create_index(op.f('ix_role_interview_structure_defaults_id'), 'role_interview_structure_defaults', ['id'], unique=False)
        op.create_index(op.f('ix_role_interview_structure_defaults_role_archetype_id'), 'role_interview_structure_defaults', ['role_archetype_id'], unique=False)

    if not table_exists('role_task_blueprints'):
        op.create_table('role_task_blueprints',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('role_archetype_id', sa.String(), nullable=False),
            sa.Column('task_type', sa.String(), nullable=False),
            sa.Column('difficulty_band', sa.String(), nullable=True),
            sa.Column('prompt_template', sa.Text(), nullable=False),
            sa.Column('expected_signals_json', sa.JSON(), nullable=True),
            sa.Column('probe_tree_json', sa.JSON(), nullable=True),
            sa.Column('tags_json', sa.JSON(), nullable=True),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.ForeignKeyConstraint(['role_archetype_id'], ['role_archetypes.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('idx_blueprints_role_task_type', 'role_task_blueprints', ['role_archetype_id', 'task_type'], unique=False)
        op.create_index(op.f('ix_role_task_blueprints_id'), 'role_task_blueprints', ['id'], unique=False)
        op.create_index(op.f('ix_role_task_blueprints_role_archetype_id'), 'role_task_blueprints', ['role_archetype_id'], unique=False)

    if not table_exists('role_kits'):
        op.create_table('role_kits',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('role_archetype_id', sa.String(), nullable=True),
            sa.Column('level', sa.String(), nullable=True),
            sa.Column('domain', sa.String(), nullable=True),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.ForeignKeyConstraint(['role_archetype_id'], ['role_archetypes.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_role_kits_id'), 'role_kits', ['id'], unique=False)
        op.create_index(op.f('ix_role_kits_role_archetype_id'), 'role_kits', ['role_archetype_id'], unique=False)

    if not table_exists('job_targets'):
        op.create_table('job_targets',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('role_title', sa.String(), nullable=False),
            sa.Column('company_name', sa.String(), nullable=True),
            sa.Column('jd_text', sa.Text(), nullable=True),
            sa.Column('experience_level', sa.String(), nullable=True),
            sa.Column('company_archetype', sa.String(), nullable=True),
            sa.Column('role_archetype_id', sa.String(), nullable=True),
            sa.Column('role_family', sa.String(), nullable=True),
            sa.Column('archetype_confidence', sa.String(), nullable=True),
            sa.Column('status', sa.String(), nullable=False, server_default='saved'),
            sa.Column('readiness_score', sa.Float(), nullable=True),
            *_timestamps(),
            sa.ForeignKeyConstraint(['role_archetype_id'], ['role_archetypes.id'], ),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('idx_job_targets_user_status', 'job_targets', ['user_id', 'status'], unique=False)
        op.create_index(op.f('ix_job_targets_id'), 'job_targets', ['id'], unique=False)
        op.create_index(op.f('ix_job_targets_user_id'), 'job_targets', ['user_id'], unique=False)

    if not table_exists('interview_assignments'):
        op.create_table('interview_assignments',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('role_kit_id', sa.Integer(), nullable=True),
            sa.Column('job_target_id', sa.Integer(), nullable=True),
            sa.Column('scope_key', sa.String(), nullable=False),
            sa.Column('interview_type', sa.String(), nullable=False),
            sa.Column('attempt_count', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('latest_session_id', sa.Integer(), nullable=True),
            sa.Column('latest_score', sa.Float(), nullable=True),
            sa.Column('best_session_id', sa.Integer(), nullable=True),
            sa.Column('best_score', sa.Float(), nullable=True),
            *_timestamps(),
            sa.ForeignKeyConstraint(['job_target_id'], ['job_targets.id'], ),
            sa.ForeignKeyConstraint(['role_kit_id'], ['role_kits.id'], ),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('user_id', 'scope_key', 'interview_type', name='uq_assignment_user_scope_type')
        )
        op.create_index(op.f('ix_interview_assignments_id'), 'interview_assignments', ['id'], unique=False)
        op.create_index(op.f('ix_interview_assignments_user_id'), 'interview_assignments', ['user_id'], unique=False)

    if not table_exists('interview_sessions'):
        op.create_table('interview_sessions',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('role_kit_id', sa.Integer(), nullable=True),
            sa.Column('job_target_id', sa.Integer(), nullable=True),
            sa.Column('employer_job_id', sa.Integer(), nullable=True),
            sa.Column('interview_type', sa.String(), nullable=False, server_default='general'),
            sa.Column('status', sa.String(), nullable=False, server_default='created'),
            sa.Column('transcript', sa.Text(), nullable=True),
            sa.Column('assignment_id', sa.Integer(), nullable=True),
            sa.Column('attempt_number', sa.Integer(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['assignment_id'], ['interview_assignments.id'], ),
            sa.ForeignKeyConstraint(['job_target_id'], ['job_targets.id'], ),
            sa.ForeignKeyConstraint(['role_kit_id'], ['role_kits.id'], ),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('idx_sessions_user_status', 'interview_sessions', ['user_id', 'status'], unique=False)
        op.create_index(op.f('ix_interview_sessions_id'), 'interview_sessions', ['id'], unique=False)
        op.create_index(op.f('ix_interview_sessions_user_id'), 'interview_sessions', ['user_id'], unique=False)
        op.create_index(op.f('ix_interview_sessions_role_kit_id'), 'interview_sessions', ['role_kit_id'], unique=False)
        op.create_index(op.f('ix_interview_sessions_job_target_id'), 'interview_sessions', ['job_target_id'], unique=False)
        op.create_index(op.f('ix_interview_sessions_employer_job_id'), 'interview_sessions', ['employer_job_id'], unique=False)

    if not table_exists('interview_analyses'):
        op.create_table('interview_analyses',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('session_id', sa.Integer(), nullable=False),
            sa.Column('dimension_scores', sa.JSON(), nullable=True),
            sa.Column('strengths', sa.JSON(), nullable=True),
            sa.Column('improvements', sa.JSON(), nullable=True),
            sa.Column('overall_recommendation', sa.String(), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['session_id'], ['interview_sessions.id'], ),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('session_id')
        )
        op.create_index(op.f('ix_interview_analyses_id'), 'interview_analyses', ['id'], unique=False)

    if not table_exists('hiready_index_snapshots'):
        op.create_table('hiready_index_snapshots',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('role_kit_id', sa.Integer(), nullable=True),
            sa.Column('job_target_id', sa.Integer(), nullable=True),
            sa.Column('scope_key', sa.String(), nullable=False),
            sa.Column('interview_session_id', sa.Integer(), nullable=True),
            sa.Column('interview_type', sa.String(), nullable=True),
            sa.Column('attempt_score', sa.Float(), nullable=True),
            sa.Column('consolidated_index', sa.Float(), nullable=False),
            sa.Column('weighted_scores', sa.JSON(), nullable=True),
            sa.Column('is_latest', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('is_best', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
            sa.ForeignKeyConstraint(['job_target_id'], ['job_targets.id'], ),
            sa.ForeignKeyConstraint(['role_kit_id'], ['role_kits.id'], ),
            sa.ForeignKeyConstraint(['user_id'], ['users.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('idx_snapshots_user_scope', 'hiready_index_snapshots', ['user_id', 'scope_key'], unique=False)
        op.create_index(op.f('ix_hiready_index_snapshots_id'), 'hiready_index_snapshots', ['id'], unique=False)
        op.create_index(op.f('ix_hiready_index_snapshots_user_id'), 'hiready_index_snapshots', ['user_id'], unique=False)

    if not table_exists('question_patterns'):
        op.create_table('question_patterns',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('pattern_type', sa.String(), nullable=False),
            sa.Column('role_category', sa.String(), nullable=True),
            sa.Column('interview_type', sa.String(), nullable=True),
            sa.Column('template', sa.Text(), nullable=False),
            sa.Column('probe_tree', sa.JSON(), nullable=True),
            sa.Column('tags', sa.JSON(), nullable=True),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('idx_patterns_category_type', 'question_patterns', ['role_category', 'interview_type'], unique=False)
        op.create_index(op.f('ix_question_patterns_id'), 'question_patterns', ['id'], unique=False)


def downgrade() -> None:
    """Drop tables in reverse dependency order."""
    for table_name in (
        'question_patterns',
        'hiready_index_snapshots',
        'interview_analyses',
        'interview_sessions',
        'interview_assignments',
        'job_targets',
        'role_kits',
        'role_task_blueprints',
        'role_interview_structure_defaults',
        'role_archetypes',
        'companies',
        'users',
    ):
        if table_exists(table_name):
            op.drop_table(table_name)
