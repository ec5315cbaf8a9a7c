from pydantic import BaseModel, EmailStr, Field
from datetime import datetime

from karibu.models.base import CamelModel
from karibu.models.user import UserRole
from karibu.schemas.validation import RecordInput


class Token(BaseModel):
    access_token: str
    token_type: str
    role: UserRole
    name: str


class UserCreate(RecordInput):
    """Used by a Manager to open an account for a colleague."""
    name: str = Field(min_length=2)
    email: EmailStr
    password: str = Field(min_length=6)
    role: UserRole

    messages = {
        "email.value_error": "Please enter a valid email",
        "role.enum": "Role must be either Manager or Sales Agent",
    }


# Properties to return to client (never the password hash)
class UserResponse(CamelModel):
    id: str
    name: str
    email: EmailStr
    role: UserRole
    created_at: datetime
