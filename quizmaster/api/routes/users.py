from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session
from quizmaster.db.models import User
from quizmaster.db.session import get_db
from quizmaster.core.errors import NotFound
from quizmaster.core.security import create_token_pair, verify_password
from quizmaster.api.deps import get_current_user, require_admin
from quizmaster.crud import crud_user
from quizmaster.schemas.token import Token
from quizmaster.schemas.user import (
    UserCreate, UserResponse,
    UserUpdate, PasswordChangeRequest,
)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register_user(user_in: UserCreate, db: Session = Depends(get_db)):
    return crud_user.create_user(db, user_in)


@router.get("/me", response_model=UserResponse)
def get_current_user_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.patch("/me", response_model=UserResponse)
def update_profile(update: UserUpdate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    if update.name:
        current_user = crud_user.update_name(db, current_user, update.name)
    return current_user


@router.post("/change-password", response_model=Token)
def change_password(
    request: PasswordChangeRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    if not verify_password(request.old_password, current_user.password_hash):
        raise HTTPException(status_code=401, detail="Your current password is wrong")

    user = crud_user.change_password(db, current_user, request.new_password)
    # Old tokens are now rejected, so hand out fresh ones.
    return create_token_pair(str(user.id))


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
def deactivate_me(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    crud_user.deactivate_user(db, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/", response_model=List[UserResponse])
def list_users(
    include_inactive: bool = False,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return crud_user.list_users(db, include_inactive=include_inactive)


@router.get("/{user_id}", response_model=UserResponse)
def get_user_by_id(user_id: UUID, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    user = crud_user.get_user(db, user_id, include_inactive=True)
    if not user:
        raise NotFound("User not found")
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: UUID, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    crud_user.delete_user(db, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
