from sqlalchemy.orm import Session

from .. import models
from ..models import UserRole


def get_user(db: Session, user_id: str):
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_users(db: Session):
    return db.query(models.User).order_by(models.User.created_at.desc(), models.User.id).all()


def get_user_role(db: Session, user_id: str) -> UserRole:
    """Role of a known user; identities without a users row are plain USERs."""
    db_user = get_user(db, user_id)
    return db_user.role if db_user else UserRole.USER


def upsert_user(db: Session, user_id: str, email=None, name=None, role=None):
    db_user = get_user(db, user_id)
    if not db_user:
        db_user = models.User(id=user_id, role=role or UserRole.USER)
        db.add(db_user)
    if email is not None:
        db_user.email = email
    if name is not None:
        db_user.name = name
    if role is not None:
        db_user.role = role
    db.commit()
    db.refresh(db_user)
    return db_user


def sync_user(db: Session, user_id: str, email=None, name=None, admin_emails=()):
    """Register or refresh the caller's profile.

    The role is never lowered here; emails listed in `admin_emails` are promoted.
    """
    role = UserRole.ADMIN if email and email.lower() in admin_emails else None
    return upsert_user(db, user_id, email=email, name=name, role=role)


def set_user_role(db: Session, user_id: str, role: UserRole):
    db_user = get_user(db, user_id)
    if not db_user:
        return None
    db_user.role = role
    db.commit()
    db.refresh(db_user)
    return db_user
