from pydantic import EmailStr, Field
from typing import Optional
from enum import Enum
from datetime import datetime
from uuid import uuid4

from karibu.models.base import CamelModel, UserSummary, utcnow


class UserRole(str, Enum):
    MANAGER = "Manager"
    SALES_AGENT = "Sales Agent"


class User(CamelModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    # Unique index lives in the store (see RecordStore.ensure_indexes)
    email: EmailStr
    hashed_password: Optional[str] = None
    # Assigned at creation, never changed afterwards
    role: UserRole

    created_at: datetime = Field(default_factory=utcnow)

    def summary(self) -> UserSummary:
        return UserSummary(id=self.id, name=self.name, email=self.email)
