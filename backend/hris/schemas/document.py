from datetime import date, datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from hris.schemas.employee import EmployeeRef

DocumentType = Literal[
    "ktp", "family_card", "npwp", "bpjs_tk", "bpjs_kes",
    "bank_account", "cv", "ijazah", "certificate", "photo",
    "skck", "surat_sehat", "transkrip", "sertifikat", "rekening",
    "contract", "offer_letter", "kontrak_kerja", "pkwt", "pkwtt",
    "addendum", "sp1", "sp2", "sp3", "sk_pengangkatan", "sk_promosi",
    "sk_mutasi", "sk_phk", "surat_referensi", "paklaring", "slip_gaji",
]


class EmployeeDocumentCreate(BaseModel):
    employee_id: Optional[int] = None  # defaults to the caller's own record
    document_name: str = Field(..., min_length=1, max_length=255)
    document_type: DocumentType
    file_path: str
    file_name: Optional[str] = None
    file_size: Optional[int] = Field(None, ge=0)
    mime_type: Optional[str] = None
    document_number: Optional[str] = None
    description: Optional[str] = None
    issue_date: Optional[date] = None
    expiry_date: Optional[date] = None
    issuing_authority: Optional[str] = None
    is_required: bool = False
    is_confidential: bool = False
    tags: Optional[List[str]] = None


class EmployeeDocumentUpdate(BaseModel):
    document_name: Optional[str] = Field(None, min_length=1, max_length=255)
    document_type: Optional[DocumentType] = None
    document_number: Optional[str] = None
    description: Optional[str] = None
    issue_date: Optional[date] = None
    expiry_date: Optional[date] = None
    issuing_authority: Optional[str] = None
    is_required: Optional[bool] = None
    is_confidential: Optional[bool] = None
    tags: Optional[List[str]] = None


class VerifyDocumentRequest(BaseModel):
    verification_notes: Optional[str] = None


class EmployeeDocumentOut(BaseModel):
    id: int
    employee_id: int
    employee: Optional[EmployeeRef] = None
    document_name: str
    document_type: str
    category: str
    document_number: Optional[str] = None
    file_path: str
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    description: Optional[str] = None
    issue_date: Optional[date] = None
    expiry_date: Optional[date] = None
    issuing_authority: Optional[str] = None
    tags: Optional[List[str]] = None
    is_required: bool
    is_confidential: bool
    is_verified: bool
    verified_at: Optional[datetime] = None
    verified_by: Optional[int] = None
    verification_notes: Optional[str] = None
    uploaded_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DocumentTypeCount(BaseModel):
    type: str
    count: int


class DocumentStatistics(BaseModel):
    total: int
    verified: int
    unverified: int
    expired: int
    expiring_soon: int
    by_type: List[DocumentTypeCount]


class DocumentCompleteness(BaseModel):
    employee_id: int
    total_required: int
    uploaded: int
    verified: int
    missing: List[str]
    unverified: List[str]
    is_complete: bool
    is_verified: bool
    by_type: Dict[str, int] = {}
