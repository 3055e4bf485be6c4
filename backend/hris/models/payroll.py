"""Payroll configuration: company settings and Indonesian income tax tables."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, Text, Float, ForeignKey, Numeric
from sqlalchemy.sql import func

from hris.db.base_class import Base

TER_CATEGORIES = ("A", "B", "C")


class PayrollSetting(Base):
    __tablename__ = "payroll_settings"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), unique=True, nullable=False)

    # BPJS Kesehatan
    bpjs_kesehatan_employee_rate = Column(Float, default=0.01, nullable=False)
    bpjs_kesehatan_employer_rate = Column(Float, default=0.04, nullable=False)
    bpjs_kesehatan_max_salary = Column(Numeric(15, 2), default=12000000, nullable=False)

    # BPJS Ketenagakerjaan
    bpjs_jht_employee_rate = Column(Float, default=0.02, nullable=False)
    bpjs_jht_employer_rate = Column(Float, default=0.037, nullable=False)
    bpjs_jp_employee_rate = Column(Float, default=0.01, nullable=False)
    bpjs_jp_employer_rate = Column(Float, default=0.02, nullable=False)
    bpjs_jp_max_salary = Column(Numeric(15, 2), default=10042300, nullable=False)
    bpjs_jkk_rate = Column(Float, default=0.0024, nullable=False)
    bpjs_jkm_rate = Column(Float, default=0.003, nullable=False)

    # PPh 21
    use_ter_method = Column(Boolean, default=True, nullable=False)
    position_cost_rate = Column(Float, default=0.05, nullable=False)
    position_cost_max = Column(Numeric(15, 2), default=500000, nullable=False)  # per month

    # Overtime multipliers (Kepmenakertrans 102/2004)
    overtime_rate_first_hour = Column(Float, default=1.5, nullable=False)
    overtime_rate_next_hours = Column(Float, default=2.0, nullable=False)

    payroll_cutoff_day = Column(Integer, default=25, nullable=False)
    payment_day = Column(Integer, default=28, nullable=False)
    rounding_method = Column(String(10), default="round", nullable=False)  # round | floor | ceil
    rounding_precision = Column(Integer, default=0, nullable=False)
    currency = Column(String(3), default="IDR", nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)


class TaxConfiguration(Base):
    """One TER (Tarif Efektif Rata-rata) row: monthly gross range -> rate."""
    __tablename__ = "tax_configurations"

    id = Column(Integer, primary_key=True, index=True)
    category = Column(String(1), nullable=False, index=True)  # A | B | C
    min_income = Column(Numeric(15, 2), nullable=False)
    max_income = Column(Numeric(15, 2), nullable=True)  # None = no upper bound
    rate = Column(Float, nullable=False)
    effective_date = Column(Date, nullable=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)


class TaxBracket(Base):
    """Progressive PPh 21 bracket on annual taxable income (PKP)."""
    __tablename__ = "tax_brackets"

    id = Column(Integer, primary_key=True, index=True)
    min_income = Column(Numeric(15, 2), nullable=False)
    max_income = Column(Numeric(15, 2), nullable=True)
    rate = Column(Float, nullable=False)
    bracket_order = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)


class PTKP(Base):
    """Annual non-taxable income amount per marital/dependent status."""
    __tablename__ = "ptkp"

    id = Column(Integer, primary_key=True, index=True)
    status = Column(String(10), unique=True, nullable=False, index=True)  # TK/0 .. K/3
    description = Column(String(255), nullable=True)
    amount = Column(Numeric(15, 2), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)
