"""
Audit logging for HR operations.

Tracks approvals, payroll changes and account administration for compliance.
"""

import json
import logging
from datetime import datetime
from typing import Optional, Any, Dict

from sqlalchemy import Column, Integer, String, DateTime, Text, Index
from sqlalchemy.ext.asyncio import AsyncSession

from hris.core.logging_config import current_request_id
from hris.db.base_class import Base

logger = logging.getLogger("hris.audit")


class AuditLog(Base):
    """Audit log model for tracking user actions"""
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    user_id = Column(Integer, index=True)
    username = Column(String(255), index=True)
    action = Column(String(100), nullable=False, index=True)  # e.g. "movement.approve"
    resource_type = Column(String(100), index=True)  # e.g. "employee_movement"
    resource_id = Column(String(100), index=True)
    ip_address = Column(String(64))
    log_metadata = Column("metadata", Text)  # JSON
    error_message = Column(Text)

    __table_args__ = (
        Index('idx_audit_user_action', 'user_id', 'action'),
        Index('idx_audit_resource', 'resource_type', 'resource_id'),
    )

    def __repr__(self):
        return f"<AuditLog {self.id}: {self.username} - {self.action}>"


class AuditLogger:
    """Service for creating audit log entries"""

    @staticmethod
    def log(
        db: AsyncSession,
        action: str,
        user_id: Optional[int] = None,
        username: Optional[str] = None,
        resource_type: Optional[str] = None,
        resource_id: Optional[Any] = None,
        ip_address: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        error_message: Optional[str] = None,
    ) -> AuditLog:
        """
        Add an audit entry to the session.

        The entry is committed together with the caller's unit of work, so an
        approval and its audit row are persisted atomically.

        Args:
            db: Database session
            action: Action performed (e.g. "movement.approve", "payroll.update")
            user_id: ID of the user performing the action
            username: Email of the user
            resource_type: Type of resource affected
            resource_id: ID of the affected resource
            ip_address: Client IP address
            metadata: Additional metadata as dictionary
                (the current request id is added when there is one)
            error_message: Error message if action failed

        Returns:
            The pending AuditLog instance
        """
        request_id = current_request_id()
        if request_id:
            metadata = {**(metadata or {}), "request_id": request_id}
        log_entry = AuditLog(
            timestamp=datetime.utcnow(),
            user_id=user_id,
            username=username,
            action=action,
            resource_type=resource_type,
            resource_id=str(resource_id) if resource_id is not None else None,
            ip_address=ip_address,
            log_metadata=json.dumps(metadata, default=str) if metadata else None,
            error_message=error_message,
        )
        db.add(log_entry)
        logger.info(
            f"audit action={action} user={username or user_id} "
            f"resource={resource_type}:{resource_id}"
        )
        return log_entry
