import logging
from datetime import timedelta

from sqlalchemy.orm import Session
from sqlalchemy.future import select
from quizmaster.core.errors import DuplicateValue, NotFound
from quizmaster.core.security import get_password_hash
from quizmaster.db.models import User, UserRole, utcnow
from quizmaster.schemas.user import UserCreate
import uuid

logger = logging.getLogger(__name__)


def _active_only(statement, include_inactive: bool):
    if include_inactive:
        return statement
    return statement.where(User.is_active.is_(True))


def get_user_by_email(db: Session, email: str, include_inactive: bool = False):
    statement = _active_only(select(User).where(User.email == email), include_inactive)
    return db.execute(statement).scalar_one_or_none()


def get_user(db: Session, user_id, include_inactive: bool = False):
    if isinstance(user_id, str):
        try:
            user_id = uuid.UUID(user_id)
        except ValueError:
            return None
    statement = _active_only(select(User).where(User.id == user_id), include_inactive)
    return db.execute(statement).scalar_one_or_none()


def list_users(db: Session, include_inactive: bool = False):
    statement = _active_only(select(User).order_by(User.created_at), include_inactive)
    return db.execute(statement).scalars().all()


def create_user(db: Session, user: UserCreate, role: UserRole = UserRole.USER):
    # Uniqueness covers deactivated accounts too.
    if get_user_by_email(db, user.email, include_inactive=True):
        raise DuplicateValue("Email already registered")
    if db.execute(select(User).where(User.name == user.name)).scalar_one_or_none():
        raise DuplicateValue("Username already registered")

    db_user = User(
        id=uuid.uuid4(),
        name=user.name,
        email=user.email,
        password_hash=get_password_hash(user.password),
        role=role.value,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info("Registered user %s", db_user.id)
    return db_user


def update_name(db: Session, user: User, name: str) -> User:
    taken = db.execute(
        select(User).where(User.name == name, User.id != user.id)
    ).scalar_one_or_none()
    if taken:
        raise DuplicateValue("Username already registered")
    user.name = name
    db.commit()
    db.refresh(user)
    return user


def change_password(db: Session, user: User, new_password: str) -> User:
    user.password_hash = get_password_hash(new_password)
    # Back-dated a second so a token issued right after the change stays valid.
    user.password_changed_at = utcnow() - timedelta(seconds=1)
    db.commit()
    db.refresh(user)
    logger.info("Password changed for user %s", user.id)
    return user


def deactivate_user(db: Session, user: User) -> None:
    user.is_active = False
    db.commit()
    logger.info("Deactivated user %s", user.id)


def delete_user(db: Session, user_id) -> None:
    user = get_user(db, user_id, include_inactive=True)
    if user is None:
        raise NotFound()
    db.delete(user)
    db.commit()
    logger.info("Deleted user %s", user_id)
