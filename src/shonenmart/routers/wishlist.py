from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from .. import crud, database, schemas
from ..auth import Caller, require_user

router = APIRouter(prefix="/wishlist", tags=["wishlist"])


@router.get("/", response_model=List[schemas.WishlistItem])
def read_wishlist(db: Session = Depends(database.get_db), caller: Caller = Depends(require_user)):
    """The caller's wishlist, newest first, with product details."""
    return crud.get_items(db, caller.user_id)


@router.post(
    "/",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.WishlistItem,
    responses={
        404: {"description": "Not Found", "content": {"application/json": {"example": {"detail": "Product not found"}}}},
        409: {"description": "Conflict", "content": {"application/json": {"example": {"detail": "Product is already in the wishlist"}}}},
    },
)
def add_to_wishlist(
    item: schemas.WishlistAdd,
    db: Session = Depends(database.get_db),
    caller: Caller = Depends(require_user),
):
    try:
        return crud.add_item(db, caller.user_id, item.product_id)
    except crud.ProductNotFoundError:
        raise HTTPException(status_code=404, detail="Product not found")
    except crud.DuplicateError:
        raise HTTPException(status_code=409, detail="Product is already in the wishlist")


@router.post("/share", response_model=schemas.WishlistShare)
def share_wishlist(db: Session = Depends(database.get_db), caller: Caller = Depends(require_user)):
    """Token for the caller's public wishlist link. Repeated calls return the same token."""
    return {"token": crud.get_share_token(db, caller.user_id)}


@router.get(
    "/shared/{token}",
    response_model=schemas.SharedWishlist,
    responses={404: {"description": "Not Found", "content": {"application/json": {"example": {"detail": "Wishlist not found"}}}}},
)
def read_shared_wishlist(token: str, db: Session = Depends(database.get_db)):
    """A wishlist opened through its share link. No login needed."""
    try:
        owner, items = crud.get_shared_wishlist(db, token)
    except crud.NotFoundError:
        raise HTTPException(status_code=404, detail="Wishlist not found")
    return {"owner_name": owner.name or "Anonymous", "items": items}


@router.post("/status", response_model=schemas.StatusMap)
def wishlist_statuses(
    body: schemas.ProductIds,
    db: Session = Depends(database.get_db),
    caller: Caller = Depends(require_user),
):
    """Wishlist membership for many products at once, keyed by product id."""
    return crud.wishlist_statuses(db, caller.user_id, body.product_ids)


@router.get("/{product_id}/status")
def wishlist_status(product_id: str, db: Session = Depends(database.get_db), caller: Caller = Depends(require_user)):
    return {"product_id": product_id, "wishlisted": crud.is_wishlisted(db, caller.user_id, product_id)}


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_from_wishlist(product_id: str, db: Session = Depends(database.get_db), caller: Caller = Depends(require_user)):
    try:
        crud.remove_item(db, caller.user_id, product_id)
    except crud.NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
