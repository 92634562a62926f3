from sqlalchemy import Boolean, Column, DateTime, Integer, JSON, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from skillswap.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False)
    location = Column(String(255), nullable=True)
    profile_photo = Column(String(1024), nullable=True)
    # List of availability tokens, e.g. ["weekends", "evenings"].
    availability = Column(JSON, nullable=False, default=list)
    is_public = Column(Boolean, nullable=False, default=True)
    role = Column(String(16), nullable=False, default="USER")
    is_banned = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    user_skills = relationship("UserSkill", back_populates="user", cascade="all, delete-orphan")
    received_ratings = relationship(
        "Rating",
        foreign_keys="Rating.receiver_id",
        back_populates="receiver",
        cascade="all, delete-orphan",
    )
