from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm

from karibu.core.exceptions import Unauthenticated
from karibu.core.logger import get_logger
from karibu.core.security import create_access_token, verify_password
from karibu.core.store import RecordStore
from karibu.dependencies.store import get_store
from karibu.schemas.user import Token

router = APIRouter()
logger = get_logger("auth")


# ---------------------------------------------------------
# LOGIN ENDPOINT (Get Token)
# ---------------------------------------------------------
@router.post("/login", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    store: RecordStore = Depends(get_store),
):
    # The OAuth2 form calls it 'username'; we log in by email
    user = await store.find_user_by_email(form_data.username)

    if not user or not verify_password(form_data.password, user.hashed_password):
        raise Unauthenticated("Incorrect email or password")

    access_token = create_access_token(data={"sub": user.email})
    logger.info("User %s logged in", user.id)

    return Token(
        access_token=access_token,
        token_type="bearer",
        role=user.role,
        name=user.name,
    )
