"""initial HR schema

Revision ID: 001
Revises:
Create Date: 2025-01-06

Companies and organization structure, employees, accounts with RBAC,
employee movements, attendance, leave, payroll tax tables, templates,
notifications, performance reviews and the audit log.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = True) -> list:
    columns = [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    ]
    if updated:
        columns.append(sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True))
    return columns


def upgrade() -> None:
    """Create the HR tables."""
    op.create_table(
        'companies',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('code', sa.String(50), nullable=False, unique=True, index=True),
        sa.Column('legal_name', sa.String(255), nullable=True),
        sa.Column('company_type', sa.String(20), nullable=False, server_default='subsidiary'),
        sa.Column('parent_company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='SET NULL'), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='active', index=True),
        sa.Column('industry', sa.String(100), nullable=True),
        sa.Column('tax_id', sa.String(50), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('website', sa.String(255), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('province', sa.String(100), nullable=True),
        sa.Column('postal_code', sa.String(20), nullable=True),
        sa.Column('country', sa.String(100), nullable=True, server_default='Indonesia'),
        sa.Column('logo', sa.String(500), nullable=True),
        sa.Column('attendance_enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('leave_enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('payroll_enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('performance_enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        'departments',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('code', sa.String(50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('parent_id', sa.Integer(), sa.ForeignKey('departments.id', ondelete='SET NULL'), nullable=True),
        sa.Column('head_id', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        *_timestamps(),
        sa.UniqueConstraint('company_id', 'code', name='uq_departments_company_code'),
    )

    op.create_table(
        'positions',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('department_id', sa.Integer(), sa.ForeignKey('departments.id', ondelete='SET NULL'), nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('code', sa.String(50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('level', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('min_salary', sa.Numeric(15, 2), nullable=True),
        sa.Column('max_salary', sa.Numeric(15, 2), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        *_timestamps(),
        sa.UniqueConstraint('company_id', 'code', name='uq_positions_company_code'),
    )

    op.create_table(
        'work_locations',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('code', sa.String(50), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('province', sa.String(100), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('radius_meters', sa.Integer(), nullable=False, server_default='100'),
        sa.Column('require_gps', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('allow_remote', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('work_start_time', sa.String(5), nullable=False, server_default='08:00'),
        sa.Column('work_end_time', sa.String(5), nullable=False, server_default='17:00'),
        sa.Column('break_start_time', sa.String(5), nullable=True, server_default='12:00'),
        sa.Column('break_end_time', sa.String(5), nullable=True, server_default='13:00'),
        sa.Column('late_tolerance_minutes', sa.Integer(), nullable=False, server_default='15'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('employee_id', sa.String(50), nullable=False, unique=True, index=True),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=True),
        sa.Column('email', sa.String(255), nullable=True, index=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('mobile_number', sa.String(50), nullable=True),
        sa.Column('gender', sa.String(10), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('place_of_birth', sa.String(100), nullable=True),
        sa.Column('marital_status', sa.String(20), nullable=True),
        sa.Column('religion', sa.String(50), nullable=True),
        sa.Column('blood_type', sa.String(5), nullable=True),
        sa.Column('nationality', sa.String(50), nullable=True, server_default='Indonesia'),
        sa.Column('avatar', sa.String(500), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('province', sa.String(100), nullable=True),
        sa.Column('postal_code', sa.String(20), nullable=True),
        sa.Column('current_address', sa.Text(), nullable=True),
        sa.Column('current_city', sa.String(100), nullable=True),
        sa.Column('current_province', sa.String(100), nullable=True),
        sa.Column('current_postal_code', sa.String(20), nullable=True),
        sa.Column('national_id', sa.String(32), nullable=True),
        sa.Column('family_card_number', sa.String(32), nullable=True),
        sa.Column('npwp_number', sa.String(32), nullable=True),
        sa.Column('emergency_contact_name', sa.String(255), nullable=True),
        sa.Column('emergency_contact_relationship', sa.String(50), nullable=True),
        sa.Column('emergency_contact_phone', sa.String(50), nullable=True),
        sa.Column('bank_name', sa.String(100), nullable=True),
        sa.Column('bank_account_number', sa.String(50), nullable=True),
        sa.Column('bank_account_holder', sa.String(255), nullable=True),
        sa.Column('education_level', sa.String(50), nullable=True),
        sa.Column('education_major', sa.String(100), nullable=True),
        sa.Column('education_institution', sa.String(255), nullable=True),
        sa.Column('graduation_year', sa.Integer(), nullable=True),
        sa.Column('spouse_name', sa.String(255), nullable=True),
        sa.Column('children_count', sa.Integer(), nullable=True, server_default='0'),
        sa.Column('number_of_dependents', sa.Integer(), nullable=True, server_default='0'),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('department_id', sa.Integer(), sa.ForeignKey('departments.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('position_id', sa.Integer(), sa.ForeignKey('positions.id', ondelete='SET NULL'), nullable=True),
        sa.Column('manager_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('work_location_id', sa.Integer(), sa.ForeignKey('work_locations.id', ondelete='SET NULL'), nullable=True),
        sa.Column('grade_level', sa.String(20), nullable=True),
        sa.Column('join_date', sa.Date(), nullable=True),
        sa.Column('permanent_date', sa.Date(), nullable=True),
        sa.Column('contract_end_date', sa.Date(), nullable=True),
        sa.Column('resign_date', sa.Date(), nullable=True),
        sa.Column('employment_status', sa.String(20), nullable=False, server_default='active', index=True),
        sa.Column('employment_type', sa.String(20), nullable=False, server_default='permanent'),
        sa.Column('basic_salary', sa.Numeric(15, 2), nullable=True),
        sa.Column('ptkp_status', sa.String(10), nullable=True, server_default='TK/0'),
        sa.Column('bpjs_kesehatan_number', sa.String(32), nullable=True),
        sa.Column('bpjs_ketenagakerjaan_number', sa.String(32), nullable=True),
        *_timestamps(),
    )

    # RBAC
    op.create_table(
        'permissions',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True, index=True),
        sa.Column('display_name', sa.String(255), nullable=True),
        sa.Column('group', sa.String(100), nullable=True, index=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.text('CURRENT_TIMESTAMP')),
    )

    op.create_table(
        'roles',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True, index=True),
        sa.Column('display_name', sa.String(255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('level', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('is_system', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('email', sa.String(255), nullable=False, unique=True, index=True),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('force_password_change', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='SET NULL'), nullable=True, unique=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='SET NULL'), nullable=True),
        sa.Column('avatar', sa.String(500), nullable=True),
        sa.Column('password_reset_token_hash', sa.String(64), nullable=True, index=True),
        sa.Column('password_reset_expires_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        'user_roles',
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('role_id', sa.Integer(), sa.ForeignKey('roles.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'role_permissions',
        sa.Column('role_id', sa.Integer(), sa.ForeignKey('roles.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('permission_id', sa.Integer(), sa.ForeignKey('permissions.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'refresh_tokens',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('token_hash', sa.String(64), unique=True, nullable=False, index=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
        sa.Column('revoked_at', sa.DateTime(), nullable=True),
        sa.Column('device_info', sa.String(255), nullable=True),
        sa.Column('ip_address', sa.String(45), nullable=True),
    )
    op.create_index('ix_refresh_tokens_user_expires', 'refresh_tokens', ['user_id', 'expires_at'])

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('timestamp', sa.DateTime(), nullable=False, index=True),
        sa.Column('user_id', sa.Integer(), nullable=True, index=True),
        sa.Column('username', sa.String(255), nullable=True, index=True),
        sa.Column('action', sa.String(100), nullable=False, index=True),
        sa.Column('resource_type', sa.String(100), nullable=True, index=True),
        sa.Column('resource_id', sa.String(100), nullable=True, index=True),
        sa.Column('ip_address', sa.String(64), nullable=True),
        sa.Column('metadata', sa.Text(), nullable=True),
        sa.Column('error_message', sa.Text(), nullable=True),
    )
    op.create_index('idx_audit_user_action', 'audit_logs', ['user_id', 'action'])
    op.create_index('idx_audit_resource', 'audit_logs', ['resource_type', 'resource_id'])

    op.create_table(
        'employee_movements',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('movement_type', sa.String(30), nullable=False, index=True),
        sa.Column('effective_date', sa.Date(), nullable=False),
        sa.Column('previous_position_id', sa.Integer(), nullable=True),
        sa.Column('previous_department_id', sa.Integer(), nullable=True),
        sa.Column('previous_company_id', sa.Integer(), nullable=True),
        sa.Column('previous_salary', sa.Numeric(15, 2), nullable=True),
        sa.Column('previous_grade', sa.String(20), nullable=True),
        sa.Column('previous_status', sa.String(20), nullable=True),
        sa.Column('new_position_id', sa.Integer(), sa.ForeignKey('positions.id', ondelete='SET NULL'), nullable=True),
        sa.Column('new_department_id', sa.Integer(), sa.ForeignKey('departments.id', ondelete='SET NULL'), nullable=True),
        sa.Column('new_company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='SET NULL'), nullable=True),
        sa.Column('new_salary', sa.Numeric(15, 2), nullable=True),
        sa.Column('new_grade', sa.String(20), nullable=True),
        sa.Column('new_status', sa.String(20), nullable=True),
        sa.Column('salary_change', sa.Numeric(15, 2), nullable=True),
        sa.Column('salary_change_percentage', sa.Float(), nullable=True),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending', index=True),
        sa.Column('requested_by', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('requested_at', sa.DateTime(), nullable=True),
        sa.Column('approved_by', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        sa.Column('approval_notes', sa.Text(), nullable=True),
        sa.Column('rejected_by', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('rejected_at', sa.DateTime(), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(), nullable=True),
        sa.Column('is_applied', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('applied_at', sa.DateTime(), nullable=True),
        sa.Column('applied_by', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        *_timestamps(),
    )
    op.create_index('ix_employee_movements_status_applied', 'employee_movements', ['status', 'is_applied'])

    op.create_table(
        'attendances',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('work_location_id', sa.Integer(), sa.ForeignKey('work_locations.id', ondelete='SET NULL'), nullable=True),
        sa.Column('date', sa.Date(), nullable=False, index=True),
        sa.Column('check_in_time', sa.DateTime(), nullable=True),
        sa.Column('check_in_latitude', sa.Float(), nullable=True),
        sa.Column('check_in_longitude', sa.Float(), nullable=True),
        sa.Column('check_in_distance_meters', sa.Float(), nullable=True),
        sa.Column('check_out_time', sa.DateTime(), nullable=True),
        sa.Column('check_out_latitude', sa.Float(), nullable=True),
        sa.Column('check_out_longitude', sa.Float(), nullable=True),
        sa.Column('break_start', sa.DateTime(), nullable=True),
        sa.Column('break_end', sa.DateTime(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='present'),
        sa.Column('is_late', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('late_minutes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('work_hours', sa.Float(), nullable=True),
        sa.Column('overtime_hours', sa.Float(), nullable=False, server_default='0'),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('employee_id', 'date', name='uq_attendance_employee_date'),
    )

    # Leave
    op.create_table(
        'leave_types',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('code', sa.String(30), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('default_days', sa.Float(), nullable=False, server_default='12'),
        sa.Column('is_paid', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('requires_balance', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(updated=False),
    )

    op.create_table(
        'leave_requests',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('leave_type_id', sa.Integer(), sa.ForeignKey('leave_types.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('total_days', sa.Float(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending', index=True),
        sa.Column('approved_by', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        sa.Column('approval_notes', sa.Text(), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'leave_balances',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('leave_type_id', sa.Integer(), sa.ForeignKey('leave_types.id', ondelete='CASCADE'), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('allocated_days', sa.Float(), nullable=False, server_default='0'),
        sa.Column('used_days', sa.Float(), nullable=False, server_default='0'),
        sa.Column('pending_days', sa.Float(), nullable=False, server_default='0'),
        sa.Column('carried_forward_days', sa.Float(), nullable=False, server_default='0'),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('employee_id', 'leave_type_id', 'year', name='uq_leave_balance_employee_type_year'),
    )

    # Payroll
    op.create_table(
        'payroll_settings',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('bpjs_kesehatan_employee_rate', sa.Float(), nullable=False, server_default='0.01'),
        sa.Column('bpjs_kesehatan_employer_rate', sa.Float(), nullable=False, server_default='0.04'),
        sa.Column('bpjs_kesehatan_max_salary', sa.Numeric(15, 2), nullable=False, server_default='12000000'),
        sa.Column('bpjs_jht_employee_rate', sa.Float(), nullable=False, server_default='0.02'),
        sa.Column('bpjs_jht_employer_rate', sa.Float(), nullable=False, server_default='0.037'),
        sa.Column('bpjs_jp_employee_rate', sa.Float(), nullable=False, server_default='0.01'),
        sa.Column('bpjs_jp_employer_rate', sa.Float(), nullable=False, server_default='0.02'),
        sa.Column('bpjs_jp_max_salary', sa.Numeric(15, 2), nullable=False, server_default='10042300'),
        sa.Column('bpjs_jkk_rate', sa.Float(), nullable=False, server_default='0.0024'),
        sa.Column('bpjs_jkm_rate', sa.Float(), nullable=False, server_default='0.003'),
        sa.Column('use_ter_method', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('position_cost_rate', sa.Float(), nullable=False, server_default='0.05'),
        sa.Column('position_cost_max', sa.Numeric(15, 2), nullable=False, server_default='500000'),
        sa.Column('overtime_rate_first_hour', sa.Float(), nullable=False, server_default='1.5'),
        sa.Column('overtime_rate_next_hours', sa.Float(), nullable=False, server_default='2.0'),
        sa.Column('payroll_cutoff_day', sa.Integer(), nullable=False, server_default='25'),
        sa.Column('payment_day', sa.Integer(), nullable=False, server_default='28'),
        sa.Column('rounding_method', sa.String(10), nullable=False, server_default='round'),
        sa.Column('rounding_precision', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('currency', sa.String(3), nullable=False, server_default='IDR'),
        *_timestamps(),
    )

    op.create_table(
        'tax_configurations',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('category', sa.String(1), nullable=False, index=True),
        sa.Column('min_income', sa.Numeric(15, 2), nullable=False),
        sa.Column('max_income', sa.Numeric(15, 2), nullable=True),
        sa.Column('rate', sa.Float(), nullable=False),
        sa.Column('effective_date', sa.Date(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index('ix_tax_configurations_category_min', 'tax_configurations', ['category', 'min_income'])

    op.create_table(
        'tax_brackets',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('min_income', sa.Numeric(15, 2), nullable=False),
        sa.Column('max_income', sa.Numeric(15, 2), nullable=True),
        sa.Column('rate', sa.Float(), nullable=False),
        sa.Column('bracket_order', sa.Integer(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        'ptkp',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('status', sa.String(10), nullable=False, unique=True, index=True),
        sa.Column('description', sa.String(255), nullable=True),
        sa.Column('amount', sa.Numeric(15, 2), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        'templates',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=True, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(30), nullable=False, server_default='other', index=True),
        sa.Column('file_type', sa.String(10), nullable=False, server_default='other'),
        sa.Column('file_path', sa.String(500), nullable=False),
        sa.Column('file_name', sa.String(255), nullable=False),
        sa.Column('file_size', sa.Integer(), nullable=True),
        sa.Column('mime_type', sa.String(100), nullable=True),
        sa.Column('version', sa.String(20), nullable=False, server_default='1.0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('download_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('updated_by', sa.Integer(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', sa.String(50), nullable=False, server_default='info'),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('link', sa.String(500), nullable=True),
        sa.Column('data', sa.JSON(), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('read_at', sa.DateTime(), nullable=True),
        *_timestamps(updated=False),
    )
    op.create_index('ix_notifications_user_read', 'notifications', ['user_id', 'is_read'])

    op.create_table(
        'performance_reviews',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('reviewer_id', sa.Integer(), sa.ForeignKey('employees.id', ondelete='SET NULL'), nullable=True),
        sa.Column('review_period', sa.String(50), nullable=False),
        sa.Column('period_start', sa.Date(), nullable=True),
        sa.Column('period_end', sa.Date(), nullable=True),
        sa.Column('review_date', sa.Date(), nullable=True),
        sa.Column('overall_rating', sa.Integer(), nullable=True),
        sa.Column('goals_achievement', sa.Float(), nullable=True),
        sa.Column('competency_score', sa.Float(), nullable=True),
        sa.Column('strengths', sa.Text(), nullable=True),
        sa.Column('areas_for_improvement', sa.Text(), nullable=True),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='draft', index=True),
        *_timestamps(),
    )


def downgrade() -> None:
    """Drop the HR tables."""
    op.drop_table('performance_reviews')
    op.drop_index('ix_notifications_user_read', table_name='notifications')
    op.drop_table('notifications')
    op.drop_table('templates')
    op.drop_table('ptkp')
    op.drop_table('tax_brackets')
    op.drop_index('ix_tax_configurations_category_min', table_name='tax_configurations')
    op.drop_table('tax_configurations')
    op.drop_table('payroll_settings')
    op.drop_table('leave_balances')
    op.drop_table('leave_requests')
    op.drop_table('leave_types')
    op.drop_table('attendances')
    op.drop_index('ix_employee_movements_status_applied', table_name='employee_movements')
    op.drop_table('employee_movements')
    op.drop_index('idx_audit_resource', table_name='audit_logs')
    op.drop_index('idx_audit_user_action', table_name='audit_logs')
    op.drop_table('audit_logs')
    op.drop_index('ix_refresh_tokens_user_expires', table_name='refresh_tokens')
    op.drop_table('refresh_tokens')
    op.drop_table('role_permissions')
    op.drop_table('user_roles')
    op.drop_table('users')
    op.drop_table('roles')
    op.drop_table('permissions')
    op.drop_table('employees')
    op.drop_table('work_locations')
    op.drop_table('positions')
    op.drop_table('departments')
    op.drop_table('companies')
