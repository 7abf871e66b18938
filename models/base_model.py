#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixins for the Book Management API.

- UUID primary key (String(36)) with defaults
- created_at / updated_at timestamps set by the database
- SoftDeleteMixin that adds delete() as a soft delete committed through DBStorage

SoftDelete: put the mixin FIRST in the model's inheritance list.
"""

from __future__ import annotations

from datetime import datetime, timezone
import uuid

# Importing 'models' gives access to the global 'storage' instance (DBStorage)
import models

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


def _uuid_str() -> str:
    """Return a canonical UUIDv4 string (36 chars, with hyphens)."""
    return str(uuid.uuid4())


class BaseModel:
    """Base mixin for all persistent models: id, created_at, updated_at."""

    id = Column(String(36), primary_key=True, default=_uuid_str, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __init__(self, *args, **kwargs):
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)
        # ids are known before flush so they can go into tokens and logs
        if getattr(self, "id", None) is None:
            self.id = _uuid_str()

    def __str__(self) -> str:
        return f"[{self.__class__.__name__}] ({self.id})"


class SoftDeleteMixin:
    """
    Adds a deleted_at timestamp; delete() marks the row instead of removing it.
    """

    deleted_at = Column(DateTime(timezone=True), nullable=True)

    def delete(self):
        self.deleted_at = datetime.now(timezone.utc)
        models.storage.new(self)
        models.storage.save()
