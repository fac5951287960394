from sqlalchemy.orm import Session

from .. import models, schemas
from .exceptions import NotFoundError


def _clear_default(db: Session, user_id: str):
    db.query(models.Address).filter(
        models.Address.user_id == user_id, models.Address.is_default.is_(True)
    ).update({models.Address.is_default: False}, synchronize_session="fetch")


def _owned(db: Session, user_id: str, address_id: str):
    db_address = db.query(models.Address).filter(models.Address.id == address_id).first()
    if not db_address or db_address.user_id != user_id:
        raise NotFoundError("Address not found")
    return db_address


def create_address(db: Session, user_id: str, address: schemas.AddressCreate):
    data = address.model_dump()
    if data["is_default"]:
        _clear_default(db, user_id)
    # The first address always becomes the default
    count = db.query(models.Address).filter(models.Address.user_id == user_id).count()
    data["is_default"] = True if count == 0 else bool(data["is_default"])
    db_address = models.Address(user_id=user_id, **data)
    db.add(db_address)
    db.commit()
    db.refresh(db_address)
    return db_address


def update_address(db: Session, user_id: str, address_id: str, address: schemas.AddressUpdate):
    db_address = _owned(db, user_id, address_id)
    data = address.model_dump(exclude_unset=True, exclude_none=True)
    if data.get("is_default"):
        _clear_default(db, user_id)
    for field, value in data.items():
        setattr(db_address, field, value)
    db.commit()
    db.refresh(db_address)
    return db_address


def delete_address(db: Session, user_id: str, address_id: str):
    db_address = _owned(db, user_id, address_id)
    db.delete(db_address)
    db.commit()
    return db_address


def get_addresses(db: Session, user_id: str):
    return (
        db.query(models.Address)
        .filter(models.Address.user_id == user_id)
        .order_by(models.Address.is_default.desc(), models.Address.created_at)
        .all()
    )
