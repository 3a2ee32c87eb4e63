from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from fastapi.security import OAuth2PasswordRequestForm
from quizmaster.db.session import get_db
from quizmaster.db.models import User
from quizmaster.core.security import (
    REFRESH_TOKEN_TYPE,
    create_token_pair,
    decode_token,
    password_changed_after,
    verify_password,
)
from quizmaster.crud import crud_user
from quizmaster.schemas.token import RefreshTokenRequest, Token
from quizmaster.schemas.user import UserResponse
from quizmaster.api.deps import get_current_user

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    user = crud_user.get_user_by_email(db, form_data.username)
    if not user or not verify_password(form_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password"
        )
    return create_token_pair(str(user.id))


@router.post("/refresh", response_model=Token)
def refresh_token(
    token_data: RefreshTokenRequest,
    db: Session = Depends(get_db)
):
    payload = decode_token(token_data.refresh_token, expected_type=REFRESH_TOKEN_TYPE)
    user_id: str = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    user = crud_user.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    if password_changed_after(payload.get("iat", 0), user.password_changed_at):
        raise HTTPException(status_code=401, detail="User recently changed password, please login again")

    return create_token_pair(str(user.id))


@router.get("/me", response_model=UserResponse)
def read_users_me(current_user: User = Depends(get_current_user)):
    return current_user
