from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from skillswap.database import Base


class SwapRequest(Base):
    __tablename__ = "swap_requests"

    id = Column(Integer, primary_key=True, index=True)
    sender_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    receiver_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # UserSkill ids. Not foreign keys: a claim may be removed after the request was made.
    sender_skill_id = Column(Integer, nullable=False)
    receiver_skill_id = Column(Integer, nullable=False)

    message = Column(Text, nullable=True)
    # PENDING | ACCEPTED | REJECTED | COMPLETED | CANCELLED
    status = Column(String(16), nullable=False, default="PENDING", index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    sender = relationship("User", foreign_keys=[sender_id])
    receiver = relationship("User", foreign_keys=[receiver_id])
    rating = relationship("Rating", back_populates="swap_request", uselist=False, cascade="all, delete-orphan")
