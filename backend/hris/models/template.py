from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, ForeignKey
from sqlalchemy.sql import func

from hris.db.base_class import Base

TEMPLATE_CATEGORIES = (
    "contract",
    "letter",
    "policy",
    "form",
    "report",
    "sop",
    "guideline",
    "manual",
    "memo",
    "circular",
    "checklist",
    "announcement",
    "onboarding",
    "offboarding",
    "evaluation",
    "training",
    "other",
)
TEMPLATE_FILE_TYPES = ("docx", "pdf", "xlsx", "pptx", "other")


class Template(Base):
    """Document template metadata; the file itself lives under UPLOAD_DIR."""
    __tablename__ = "templates"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(30), default="other", nullable=False, index=True)
    file_type = Column(String(10), default="other", nullable=False)
    file_path = Column(String(500), nullable=False)
    file_name = Column(String(255), nullable=False)
    file_size = Column(Integer, nullable=True)
    mime_type = Column(String(100), nullable=True)
    version = Column(String(20), default="1.0", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    download_count = Column(Integer, default=0, nullable=False)

    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)
