from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from karibu.core.exceptions import ValidationFailed, Violation
from karibu.core.security import get_password_hash
from karibu.core.store import DuplicateEmail, RecordStore
from karibu.dependencies.auth import get_current_user, get_manager
from karibu.dependencies.body import get_json_body
from karibu.dependencies.store import get_store
from karibu.models.user import User
from karibu.schemas.responses import single
from karibu.schemas.user import UserCreate, UserResponse
from karibu.schemas.validation import validate_payload

router = APIRouter()

DUPLICATE_EMAIL = "User with this email already exists"


# ---------------------------------------------------------
# 1. CREATE USER (Manager Only)
# ---------------------------------------------------------
@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    manager: User = Depends(get_manager),
    payload: Dict[str, Any] = Depends(get_json_body),
    store: RecordStore = Depends(get_store),
):
    """
    Opens an account for a Manager or Sales Agent.
    The role chosen here is permanent.
    """
    data = validate_payload(UserCreate, payload)

    if await store.find_user_by_email(data.email):
        raise ValidationFailed([Violation(field="email", message=DUPLICATE_EMAIL)])

    new_user = User(
        name=data.name,
        email=data.email,
        hashed_password=get_password_hash(data.password),
        role=data.role,
    )
    try:
        await store.create_user(new_user)
    except DuplicateEmail:
        # Lost a race with a concurrent request for the same email
        raise ValidationFailed([Violation(field="email", message=DUPLICATE_EMAIL)])

    return single(UserResponse.model_validate(new_user.model_dump()))


# ---------------------------------------------------------
# 2. MY PROFILE
# ---------------------------------------------------------
@router.get("/me")
async def get_my_profile(current_user: User = Depends(get_current_user)):
    return single(UserResponse.model_validate(current_user.model_dump()))
