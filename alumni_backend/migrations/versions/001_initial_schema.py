"""Initial alumni survey schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

from alumni_backend.migrations.util import get_timestamp_default, get_uuid_type

# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    uuid_type = get_uuid_type()

    op.create_table(
        'alumni',
        sa.Column('alumni_id', uuid_type, nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('gender', sa.String(20), nullable=True),
        sa.Column('graduation_year', sa.Integer(), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('major', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('alumni_id'),
        sa.UniqueConstraint('email', name='uq_alumni_email'),
    )

    op.create_table(
        'surveys',
        sa.Column('survey_id', uuid_type, nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.PrimaryKeyConstraint('survey_id'),
    )
    op.create_index('ix_surveys_created_at', 'surveys', ['created_at'])

    op.create_table(
        'survey_sections',
        sa.Column('section_id', uuid_type, nullable=False),
        sa.Column('survey_id', uuid_type, nullable=False),
        sa.Column('section_title', sa.String(255), nullable=False),
        sa.Column('section_description', sa.Text(), nullable=True),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['survey_id'], ['surveys.survey_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('section_id'),
    )
    op.create_index('ix_survey_sections_survey_id', 'survey_sections', ['survey_id'])

    op.create_table(
        'survey_questions',
        sa.Column('question_id', uuid_type, nullable=False),
        sa.Column('survey_id', uuid_type, nullable=False),
        sa.Column('section_id', uuid_type, nullable=False),
        sa.Column('question_text', sa.String(255), nullable=False),
        sa.Column('question_type', sa.String(32), nullable=False),
        sa.Column('is_required', sa.Boolean(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['survey_id'], ['surveys.survey_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['section_id'], ['survey_sections.section_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('question_id'),
    )
    op.create_index('ix_survey_questions_survey_id', 'survey_questions', ['survey_id'])
    op.create_index('ix_survey_questions_section_id', 'survey_questions', ['section_id'])

    op.create_table(
        'survey_options',
        sa.Column('option_id', uuid_type, nullable=False),
        sa.Column('question_id', uuid_type, nullable=False),
        sa.Column('option_text', sa.String(255), nullable=False),
        sa.Column('option_value', sa.Integer(), nullable=True),
        sa.Column('is_other_option', sa.Boolean(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['question_id'], ['survey_questions.question_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('option_id'),
    )
    op.create_index('ix_survey_options_question_id', 'survey_options', ['question_id'])

    op.create_table(
        'feedback_responses',
        sa.Column('response_id', uuid_type, nullable=False),
        sa.Column('survey_id', uuid_type, nullable=False),
        sa.Column('alumni_id', uuid_type, nullable=False),
        sa.Column('response_date', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['survey_id'], ['surveys.survey_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['alumni_id'], ['alumni.alumni_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('response_id'),
    )
    op.create_index('ix_feedback_responses_survey_id', 'feedback_responses', ['survey_id'])
    op.create_index('ix_feedback_responses_alumni_id', 'feedback_responses', ['alumni_id'])
    # One response per alumni per survey
    op.create_index(
        'ix_feedback_responses_survey_alumni',
        'feedback_responses',
        ['survey_id', 'alumni_id'],
        unique=True,
    )

    op.create_table(
        'question_responses',
        sa.Column('question_response_id', uuid_type, nullable=False),
        sa.Column('response_id', uuid_type, nullable=False),
        sa.Column('question_id', uuid_type, nullable=False),
        sa.Column('option_id', uuid_type, nullable=True),
        sa.Column('response_text', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['response_id'], ['feedback_responses.response_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['question_id'], ['survey_questions.question_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['option_id'], ['survey_options.option_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('question_response_id'),
    )
    op.create_index('ix_question_responses_response_id', 'question_responses', ['response_id'])
    op.create_index('ix_question_responses_question_id', 'question_responses', ['question_id'])

    op.create_table(
        'notifications',
        sa.Column('notification_id', uuid_type, nullable=False),
        sa.Column('notification_type', sa.String(50), nullable=False),
        sa.Column('alert', sa.String(50), nullable=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('link', sa.String(255), nullable=True),
        sa.Column('survey_id', uuid_type, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['survey_id'], ['surveys.survey_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('notification_id'),
    )
    op.create_index('ix_notifications_survey_type', 'notifications', ['survey_id', 'notification_type'])

    op.create_table(
        'alumni_notifications',
        sa.Column('alumni_id', uuid_type, nullable=False),
        sa.Column('notification_id', uuid_type, nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=get_timestamp_default()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=get_timestamp_default()),
        sa.ForeignKeyConstraint(['alumni_id'], ['alumni.alumni_id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['notification_id'], ['notifications.notification_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('alumni_id', 'notification_id'),
    )
    op.create_index('ix_alumni_notifications_alumni_read', 'alumni_notifications', ['alumni_id', 'is_read'])

    op.create_table(
        'quick_survey_responses',
        sa.Column('quick_survey_response_id', uuid_type, nullable=False),
        sa.Column('alumni_id', uuid_type, nullable=False),
        sa.Column('selected_options', sa.JSON(), nullable=False),
        sa.Column('other_response', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['alumni_id'], ['alumni.alumni_id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('quick_survey_response_id'),
        sa.UniqueConstraint('alumni_id', name='uq_quick_survey_responses_alumni_id'),
    )


def downgrade() -> None:
    op.drop_table('quick_survey_responses')

    op.drop_index('ix_alumni_notifications_alumni_read', table_name='alumni_notifications')
    op.drop_table('alumni_notifications')

    op.drop_index('ix_notifications_survey_type', table_name='notifications')
    op.drop_table('notifications')

    op.drop_index('ix_question_responses_question_id', table_name='question_responses')
    op.drop_index('ix_question_responses_response_id', table_name='question_responses')
    op.drop_table('question_responses')

    op.drop_index('ix_feedback_responses_survey_alumni', table_name='feedback_responses')
    op.drop_index('ix_feedback_responses_alumni_id', table_name='feedback_responses')
    op.drop_index('ix_feedback_responses_survey_id', table_name='feedback_responses')
    op.drop_table('feedback_responses')

    op.drop_index('ix_survey_options_question_id', table_name='survey_options')
    op.drop_table('survey_options')

    op.drop_index('ix_survey_questions_section_id', table_name='survey_questions')
    op.drop_index('ix_survey_questions_survey_id', table_name='survey_questions')
    op.drop_table('survey_questions')

    op.drop_index('ix_survey_sections_survey_id', table_name='survey_sections')
    op.drop_table('survey_sections')

    op.drop_index('ix_surveys_created_at', table_name='surveys')
    op.drop_table('surveys')

    op.drop_table('alumni')
