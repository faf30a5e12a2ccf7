"""
RefreshToken model: one row per issued refresh token so it can be revoked and rotated.
Fields:
- token_hash (unique) - sha256 hex digest of the signed refresh JWT; the JWT itself is never stored
- user_id (String(36)) - FK to users.id
- expires_at (naive UTC)
- created_at, updated_at (BaseModel)
"""
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base

TOKEN_HASH_LENGTH = 64


class RefreshToken(BaseModel, Base):
    __tablename__ = "refresh_tokens"

    token_hash = Column(String(TOKEN_HASH_LENGTH), nullable=False, unique=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime(), nullable=False)

    user = relationship("User", back_populates="refresh_tokens")
