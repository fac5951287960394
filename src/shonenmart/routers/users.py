from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import crud, database, schemas
from ..auth import Caller, require_admin, require_user
from ..dependencies import get_settings

router = APIRouter(prefix="/users", tags=["users"])

NOT_FOUND = {"description": "Not Found", "content": {"application/json": {"example": {"detail": "User not found"}}}}


@router.post("/sync", response_model=schemas.User)
def sync_user(
    profile: schemas.UserSync,
    db: Session = Depends(database.get_db),
    settings=Depends(get_settings),
    caller: Caller = Depends(require_user),
):
    """Register the signed-in caller, or refresh their email and name.

    Called by the storefront after sign-in. Emails listed in ADMIN_EMAILS are
    promoted to ADMIN.
    """
    return crud.sync_user(
        db,
        caller.user_id,
        email=profile.email,
        name=profile.name,
        admin_emails=settings.admin_emails,
    )


@router.get("/me", response_model=schemas.User, responses={404: NOT_FOUND})
def read_me(db: Session = Depends(database.get_db), caller: Caller = Depends(require_user)):
    """The caller's profile. 404 until the caller has synced."""
    db_user = crud.get_user(db, caller.user_id)
    if not db_user:
        raise HTTPException(status_code=404, detail="User not found")
    return db_user


@router.get("/", response_model=List[schemas.User])
def read_users(db: Session = Depends(database.get_db), caller=Depends(require_admin)):
    return crud.get_users(db)


@router.put("/{user_id}/role", response_model=schemas.User, responses={404: NOT_FOUND})
def update_user_role(
    user_id: str,
    body: schemas.UserRoleUpdate,
    db: Session = Depends(database.get_db),
    caller=Depends(require_admin),
):
    db_user = crud.set_user_role(db, user_id, body.role)
    if not db_user:
        raise HTTPException(status_code=404, detail="User not found")
    return db_user
