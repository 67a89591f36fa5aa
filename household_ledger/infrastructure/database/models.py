"""SQLAlchemy ORM models for the document store and user sessions"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Text, JSON
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


class Document(Base):
    """Schemaless record in a named collection; the body is decoded on read"""

    __tablename__ = "document"

    id = Column(String(32), primary_key=True, default=new_id)
    collection = Column(Text, nullable=False, index=True)
    payload = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)


class UserSession(Base):
    """Signed-in identity behind a bearer token"""

    __tablename__ = "user_session"

    token = Column(String(64), primary_key=True)
    uid = Column(Text, nullable=False, index=True)
    email = Column(Text, nullable=False)
    display_name = Column(Text, nullable=False)
    photo_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
