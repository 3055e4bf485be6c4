from sqlalchemy import Column, Integer, String, DateTime, Date, Text, ForeignKey, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from hris.db.base_class import Base

EMPLOYMENT_STATUSES = ("active", "inactive", "terminated", "resigned", "retired")
EMPLOYMENT_TYPES = ("permanent", "contract", "intern", "freelance")
PTKP_STATUSES = ("TK/0", "TK/1", "TK/2", "TK/3", "K/0", "K/1", "K/2", "K/3")

# Fields an employee may change on their own record via /employees/me
SELF_SERVICE_FIELDS = frozenset({
    "phone",
    "mobile_number",
    "address",
    "city",
    "province",
    "postal_code",
    "current_address",
    "current_city",
    "current_province",
    "current_postal_code",
    "emergency_contact_name",
    "emergency_contact_relationship",
    "emergency_contact_phone",
    "national_id",
    "family_card_number",
    "npwp_number",
    "bank_name",
    "bank_account_number",
    "bank_account_holder",
    "avatar",
    "education_level",
    "education_major",
    "education_institution",
    "graduation_year",
    "spouse_name",
    "children_count",
    "number_of_dependents",
})


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(String(50), unique=True, nullable=False, index=True)  # company NIK, e.g. MB-0001

    # Personal data
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=True)
    email = Column(String(255), nullable=True, index=True)
    phone = Column(String(50), nullable=True)
    mobile_number = Column(String(50), nullable=True)
    gender = Column(String(10), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    place_of_birth = Column(String(100), nullable=True)
    marital_status = Column(String(20), nullable=True)
    religion = Column(String(50), nullable=True)
    blood_type = Column(String(5), nullable=True)
    nationality = Column(String(50), default="Indonesia", nullable=True)
    avatar = Column(String(500), nullable=True)

    # Address as on the KTP
    address = Column(Text, nullable=True)
    city = Column(String(100), nullable=True)
    province = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)
    # Domicile
    current_address = Column(Text, nullable=True)
    current_city = Column(String(100), nullable=True)
    current_province = Column(String(100), nullable=True)
    current_postal_code = Column(String(20), nullable=True)

    # Identity
    national_id = Column(String(32), nullable=True)
    family_card_number = Column(String(32), nullable=True)
    npwp_number = Column(String(32), nullable=True)

    # Emergency contact
    emergency_contact_name = Column(String(255), nullable=True)
    emergency_contact_relationship = Column(String(50), nullable=True)
    emergency_contact_phone = Column(String(50), nullable=True)

    # Bank
    bank_name = Column(String(100), nullable=True)
    bank_account_number = Column(String(50), nullable=True)
    bank_account_holder = Column(String(255), nullable=True)

    # Education and family
    education_level = Column(String(50), nullable=True)
    education_major = Column(String(100), nullable=True)
    education_institution = Column(String(255), nullable=True)
    graduation_year = Column(Integer, nullable=True)
    spouse_name = Column(String(255), nullable=True)
    children_count = Column(Integer, default=0, nullable=True)
    number_of_dependents = Column(Integer, default=0, nullable=True)

    # Organization placement
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True, index=True)
    department_id = Column(Integer, ForeignKey("departments.id", ondelete="SET NULL"), nullable=True, index=True)
    position_id = Column(Integer, ForeignKey("positions.id", ondelete="SET NULL"), nullable=True)
    manager_id = Column(Integer, ForeignKey("employees.id", ondelete="SET NULL"), nullable=True, index=True)
    work_location_id = Column(Integer, ForeignKey("work_locations.id", ondelete="SET NULL"), nullable=True)
    grade_level = Column(String(20), nullable=True)

    # Employment
    join_date = Column(Date, nullable=True)
    permanent_date = Column(Date, nullable=True)
    contract_end_date = Column(Date, nullable=True)
    resign_date = Column(Date, nullable=True)
    employment_status = Column(String(20), default="active", nullable=False, index=True)
    employment_type = Column(String(20), default="permanent", nullable=False)

    # Payroll
    basic_salary = Column(Numeric(15, 2), nullable=True)
    ptkp_status = Column(String(10), default="TK/0", nullable=True)
    bpjs_kesehatan_number = Column(String(32), nullable=True)
    bpjs_ketenagakerjaan_number = Column(String(32), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    company = relationship("Company", foreign_keys=[company_id])
    department = relationship("Department", foreign_keys=[department_id])
    position = relationship("Position", foreign_keys=[position_id])
    work_location = relationship("WorkLocation", foreign_keys=[work_location_id])
    manager = relationship("Employee", remote_side=[id], foreign_keys=[manager_id])

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)
