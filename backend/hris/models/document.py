"""
Employee documents: identity papers, certificates and HR letters kept on file.

The file itself is stored by the upload endpoint; a document row points at it
and tracks verification and expiry.
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, Text, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from hris.db.base_class import Base

# Uploaded by the employee through self-service
EMPLOYEE_UPLOAD_TYPES = (
    "ktp", "family_card", "npwp", "bpjs_tk", "bpjs_kes",
    "bank_account", "cv", "ijazah", "certificate", "photo",
    "skck", "surat_sehat", "transkrip", "sertifikat", "rekening",
)

# Issued by HR
HR_UPLOAD_TYPES = (
    "contract", "offer_letter", "kontrak_kerja", "pkwt", "pkwtt",
    "addendum", "sp1", "sp2", "sp3", "sk_pengangkatan", "sk_promosi",
    "sk_mutasi", "sk_phk", "surat_referensi", "paklaring", "slip_gaji",
)

DOCUMENT_TYPES = EMPLOYEE_UPLOAD_TYPES + HR_UPLOAD_TYPES

# Checked by the completeness report
REQUIRED_DOCUMENT_TYPES = ("ktp", "family_card", "npwp", "bank_account", "cv", "ijazah", "photo")


def document_category(document_type: str) -> str:
    return "hr" if document_type in HR_UPLOAD_TYPES else "employee"


class EmployeeDocument(Base):
    __tablename__ = "employee_documents"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    document_name = Column(String(255), nullable=False)
    document_type = Column(String(30), nullable=False, index=True)
    document_number = Column(String(100), nullable=True)

    file_path = Column(String(500), nullable=False)
    file_name = Column(String(255), nullable=True)
    file_size = Column(Integer, nullable=True)
    mime_type = Column(String(100), nullable=True)

    description = Column(Text, nullable=True)
    issue_date = Column(Date, nullable=True)
    expiry_date = Column(Date, nullable=True, index=True)
    issuing_authority = Column(String(255), nullable=True)
    tags = Column(JSON, nullable=True)

    is_required = Column(Boolean, default=False, nullable=False)
    is_confidential = Column(Boolean, default=False, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
    verified_at = Column(DateTime, nullable=True)
    verified_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    verification_notes = Column(Text, nullable=True)
    uploaded_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    employee = relationship("Employee", lazy="selectin")

    __table_args__ = (
        Index("ix_employee_documents_employee_type", "employee_id", "document_type"),
    )

    @property
    def category(self) -> str:
        return document_category(self.document_type)
