# -*- coding: utf-8 -*-
"""001 Catalog Schema Baseline

Revision ID: 001_catalog_baseline
Revises:
Create Date: 2026-10-19

- users, audit_logs, search_index
- servers -> databases -> tables -> elements, abbreviations
- 이름 유일성: deleted_at IS NULL 조건의 부분 유니크 인덱스
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_catalog_baseline'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')
ACTIVE_ONLY = sa.text('deleted_at IS NULL')
STATUS_CHECK = "status IN ('ACTIVE', 'INACTIVE', 'ARCHIVED')"


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    ]


def _created_by():
    return sa.Column(
        'created_by_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True
    )


def _active_unique(name: str, table: str, columns) -> None:
    op.create_index(
        name, table, columns, unique=True,
        postgresql_where=ACTIVE_ONLY, sqlite_where=ACTIVE_ONLY,
    )


def upgrade() -> None:
    # ============================================
    # 1. Users / Audit / Search
    # ============================================

    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('username', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='VIEWER'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("role IN ('ADMIN', 'MAINTAINER', 'VIEWER')", name='ck_users_role'),
    )
    _active_unique('uq_users_username_active', 'users', ['username'])
    _active_unique('uq_users_email_active', 'users', ['email'])

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('entity_type', sa.String(20), nullable=False),
        sa.Column('entity_id', sa.Uuid(), nullable=False),
        sa.Column('action', sa.String(10), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=True),
        sa.Column('changes', JSON_TYPE, nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
        sa.Column('user_agent', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("action IN ('CREATE', 'UPDATE', 'DELETE')", name='ck_audit_logs_action'),
    )
    op.create_index('ix_audit_logs_entity', 'audit_logs', ['entity_type', 'entity_id'])
    op.create_index('ix_audit_logs_user', 'audit_logs', ['user_id'])
    op.create_index('ix_audit_logs_created_at', 'audit_logs', ['created_at'])

    op.create_table(
        'search_index',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('entity_type', sa.String(20), nullable=False),
        sa.Column('entity_id', sa.Uuid(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('metadata', JSON_TYPE, nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('entity_type', 'entity_id', name='uq_search_index_entity'),
    )

    # ============================================
    # 2. Catalog hierarchy
    # ============================================

    op.create_table(
        'servers',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('host', sa.String(255), nullable=True),
        sa.Column('port', sa.Integer(), nullable=True),
        sa.Column('rdbms_type', sa.String(20), nullable=False),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='ACTIVE'),
        _created_by(),
        *_timestamps(),
        sa.CheckConstraint(STATUS_CHECK, name='ck_servers_status'),
        sa.CheckConstraint(
            "rdbms_type IN ('POSTGRESQL', 'MYSQL', 'ORACLE', 'SQLSERVER', "
            "'DB2', 'INFORMIX', 'SQLITE', 'MARIADB')",
            name='ck_servers_rdbms_type',
        ),
    )
    _active_unique('uq_servers_name_active', 'servers', ['name'])

    op.create_table(
        'databases',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'server_id', sa.Uuid(), sa.ForeignKey('servers.id', ondelete='RESTRICT'), nullable=False
        ),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('purpose', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='ACTIVE'),
        _created_by(),
        *_timestamps(),
        sa.CheckConstraint(STATUS_CHECK, name='ck_databases_status'),
    )
    _active_unique('uq_databases_server_name_active', 'databases', ['server_id', 'name'])
    op.create_index('ix_databases_server_id', 'databases', ['server_id'])

    op.create_table(
        'tables',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'database_id', sa.Uuid(), sa.ForeignKey('databases.id', ondelete='RESTRICT'), nullable=False
        ),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('table_type', sa.String(30), nullable=False, server_default='TABLE'),
        sa.Column('row_count_estimate', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='ACTIVE'),
        _created_by(),
        *_timestamps(),
        sa.CheckConstraint(STATUS_CHECK, name='ck_tables_status'),
        sa.CheckConstraint(
            "table_type IN ('TABLE', 'VIEW', 'MATERIALIZED_VIEW')", name='ck_tables_table_type'
        ),
    )
    _active_unique('uq_tables_database_name_active', 'tables', ['database_id', 'name'])
    op.create_index('ix_tables_database_id', 'tables', ['database_id'])

    op.create_table(
        'elements',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'table_id', sa.Uuid(), sa.ForeignKey('tables.id', ondelete='RESTRICT'), nullable=False
        ),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('data_type', sa.String(100), nullable=False),
        sa.Column('length', sa.Integer(), nullable=True),
        sa.Column('precision', sa.Integer(), nullable=True),
        sa.Column('scale', sa.Integer(), nullable=True),
        sa.Column('is_nullable', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_primary_key', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_foreign_key', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('default_value', sa.String(255), nullable=True),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('deleted_position', sa.Integer(), nullable=True),
        _created_by(),
        *_timestamps(),
        sa.CheckConstraint('position >= 1', name='ck_elements_position_positive'),
    )
    _active_unique('uq_elements_table_name_active', 'elements', ['table_id', 'name'])
    op.create_index('ix_elements_table_position', 'elements', ['table_id', 'position'])

    op.create_table(
        'abbreviations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('source', sa.String(255), nullable=False),
        sa.Column('abbreviation', sa.String(50), nullable=False),
        sa.Column('definition', sa.Text(), nullable=False),
        sa.Column('is_prime_class', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('category', sa.String(100), nullable=True),
        _created_by(),
        *_timestamps(),
    )
    _active_unique('uq_abbreviations_abbreviation_active', 'abbreviations', ['abbreviation'])
    op.create_index('ix_abbreviations_category', 'abbreviations', ['category'])


def downgrade() -> None:
    op.drop_table('abbreviations')
    op.drop_table('elements')
    op.drop_table('tables')
    op.drop_table('databases')
    op.drop_table('servers')
    op.drop_table('search_index')
    op.drop_table('audit_logs')
    op.drop_table('users')
