from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from .. import crud, database, schemas
from ..auth import Caller, require_user

router = APIRouter(prefix="/addresses", tags=["addresses"])

NOT_FOUND = {"description": "Not Found", "content": {"application/json": {"example": {"detail": "Address not found"}}}}


@router.get("/", response_model=List[schemas.Address])
def read_addresses(db: Session = Depends(database.get_db), caller: Caller = Depends(require_user)):
    """Saved addresses, default first."""
    return crud.get_addresses(db, caller.user_id)


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=schemas.Address)
def create_address(
    address: schemas.AddressCreate,
    response: Response,
    db: Session = Depends(database.get_db),
    caller: Caller = Depends(require_user),
):
    db_address = crud.create_address(db, caller.user_id, address)
    response.headers["Location"] = f"/addresses/{db_address.id}"
    return db_address


@router.put("/{address_id}", response_model=schemas.Address, responses={404: NOT_FOUND})
def update_address(
    address_id: str,
    address: schemas.AddressUpdate,
    db: Session = Depends(database.get_db),
    caller: Caller = Depends(require_user),
):
    """Change only the provided fields. Another user's address reads as not found."""
    try:
        return crud.update_address(db, caller.user_id, address_id, address)
    except crud.NotFoundError:
        raise HTTPException(status_code=404, detail="Address not found")


@router.delete("/{address_id}", status_code=status.HTTP_204_NO_CONTENT, responses={404: NOT_FOUND})
def delete_address(address_id: str, db: Session = Depends(database.get_db), caller: Caller = Depends(require_user)):
    try:
        crud.delete_address(db, caller.user_id, address_id)
    except crud.NotFoundError:
        raise HTTPException(status_code=404, detail="Address not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
