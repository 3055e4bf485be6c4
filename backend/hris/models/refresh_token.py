"""
Refresh Token model for secure token rotation.
Stores hashed refresh tokens with expiration and revocation tracking.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index

from hris.db.base_class import Base


class RefreshToken(Base):
    """
    Stores refresh tokens for JWT token rotation.

    The token is hashed (SHA256) before storage; the raw token is never stored.
    """
    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, index=True)
    token_hash = Column(String(64), unique=True, nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    revoked_at = Column(DateTime, nullable=True)

    device_info = Column(String(255), nullable=True)
    ip_address = Column(String(45), nullable=True)  # IPv6 max length

    __table_args__ = (
        Index('ix_refresh_tokens_user_expires', 'user_id', 'expires_at'),
    )

    def is_valid(self) -> bool:
        """Check if token is still valid (not expired and not revoked)."""
        return self.expires_at > datetime.utcnow() and self.revoked_at is None

    def revoke(self) -> None:
        self.revoked_at = datetime.utcnow()
