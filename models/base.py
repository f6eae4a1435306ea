"""
Defines a base model for SQLAlchemy ORM with common attributes.

This module provides a base class for SQLAlchemy models, including standard
attributes for identifying and timestamping database records. It uses PostgreSQL's
UUID and ARRAY types when available and portable fallbacks elsewhere, so the
same models run against PostgreSQL in production and SQLite in tests.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import JSON, Column, DateTime, String, Text, TypeDecorator
from sqlalchemy.dialects.postgresql import ARRAY as PostgreSQLARRAY
from sqlalchemy.dialects.postgresql import UUID as PostgreSQLUUID
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(UTC)


class UUID(TypeDecorator):
    """
    Platform-independent UUID type.
    Uses PostgreSQL's UUID type when available,
    otherwise uses CHAR(36), storing as string.
    """
    impl = String
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(PostgreSQLUUID())
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if dialect.name == 'postgresql':
            return value
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        if not isinstance(value, uuid.UUID):
            return uuid.UUID(value)
        return value


class StringList(TypeDecorator):
    """
    Platform-independent list-of-strings type.
    Uses PostgreSQL's TEXT[] when available, otherwise a JSON array.
    """
    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(PostgreSQLARRAY(Text()))
        return dialect.type_descriptor(JSON())

    def process_bind_param(self, value, dialect):
        if value is None:
            return []
        return [str(item) for item in value]

    def process_result_value(self, value, dialect):
        return list(value) if value else []


class BaseModel(Base):
    """
    Base model class for database entities.

    :ivar id: Unique identifier for the record.
    :type id: UUID
    :ivar created_at: Timestamp representing when the record was created.
    :type created_at: datetime
    """
    __abstract__ = True

    id = Column(UUID(), primary_key=True, default=uuid.uuid4)
    created_at = Column(DateTime(timezone=True), default=utcnow)
