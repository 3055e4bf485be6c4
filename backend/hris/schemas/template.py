from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel

TemplateCategory = Literal[
    "contract", "letter", "policy", "form", "report", "sop", "guideline", "manual",
    "memo", "circular", "checklist", "announcement", "onboarding", "offboarding",
    "evaluation", "training", "other",
]
TemplateFileType = Literal["docx", "pdf", "xlsx", "pptx", "other"]


class TemplateCreate(BaseModel):
    company_id: Optional[int] = None
    name: str
    description: Optional[str] = None
    category: TemplateCategory = "other"
    file_type: TemplateFileType = "other"
    file_path: str
    file_name: str
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    version: str = "1.0"
    is_active: bool = True


class TemplateUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[TemplateCategory] = None
    file_type: Optional[TemplateFileType] = None
    file_path: Optional[str] = None
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    version: Optional[str] = None
    is_active: Optional[bool] = None


class TemplateOut(BaseModel):
    id: int
    company_id: Optional[int] = None
    name: str
    description: Optional[str] = None
    category: str
    file_type: str
    file_path: str
    file_name: str
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    version: str
    is_active: bool
    download_count: int
    created_by: Optional[int] = None
    updated_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TemplateStatistics(BaseModel):
    total_templates: int
    active_templates: int
    total_downloads: int
    by_category: Dict[str, int]
    by_file_type: Dict[str, int]
    most_downloaded: List[TemplateOut]
