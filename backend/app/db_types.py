"""Portable SQLAlchemy column types shared by the models."""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.dialects import postgresql
from sqlalchemy.types import CHAR, String, TypeDecorator


class GUID(TypeDecorator):
    """UUID stored natively in PostgreSQL and as ``CHAR(36)`` elsewhere.

    Values always come back as strings so identifiers can be compared and
    serialized as text throughout the API.
    """

    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):  # type: ignore[override]
        if dialect.name == "postgresql":
            return dialect.type_descriptor(postgresql.UUID(as_uuid=True))
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value: Any, dialect):  # type: ignore[override]
        if value is None:
            return value
        if dialect.name == "postgresql":
            if isinstance(value, uuid.UUID):
                return value
            return uuid.UUID(str(value))
        return str(value)

    def process_result_value(self, value: Any, dialect):  # type: ignore[override]
        if value is None:
            return value
        return str(value)


class _NetworkAddress(TypeDecorator):
    """Base for address columns stored as text outside PostgreSQL."""

    impl = String
    cache_ok = True
    fallback_length = 45

    def postgres_type(self):  # pragma: no cover - overridden
        raise NotImplementedError

    def load_dialect_impl(self, dialect):  # type: ignore[override]
        if dialect.name == "postgresql":
            return dialect.type_descriptor(self.postgres_type())
        return dialect.type_descriptor(String(self.fallback_length))

    def process_bind_param(self, value: Any, dialect):  # type: ignore[override]
        if value is None or value == "":
            return None
        return str(value)

    def process_result_value(self, value: Any, dialect):  # type: ignore[override]
        if value is None:
            return value
        return str(value)


class INET(_NetworkAddress):
    """IPv4/IPv6 address, native ``INET`` in PostgreSQL."""

    fallback_length = 45

    def postgres_type(self):
        return postgresql.INET()


class MACADDR(_NetworkAddress):
    """Hardware address, native ``MACADDR`` in PostgreSQL."""

    fallback_length = 17

    def postgres_type(self):
        return postgresql.MACADDR()
