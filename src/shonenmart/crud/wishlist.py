import secrets

from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import IntegrityError

from .. import models
from .exceptions import DuplicateError, NotFoundError, ProductNotFoundError
from .products import get_product
from .users import get_user


def _item(db: Session, user_id: str, product_id: str):
    return (
        db.query(models.WishlistItem)
        .filter(models.WishlistItem.user_id == user_id, models.WishlistItem.product_id == product_id)
        .first()
    )


def add_item(db: Session, user_id: str, product_id: str):
    if not get_product(db, product_id):
        raise ProductNotFoundError(product_id)
    db_item = models.WishlistItem(user_id=user_id, product_id=product_id)
    db.add(db_item)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateError(f"Product {product_id} is already in the wishlist")
    db.refresh(db_item)
    return db_item


def remove_item(db: Session, user_id: str, product_id: str):
    db_item = _item(db, user_id, product_id)
    if not db_item:
        raise NotFoundError(f"Product {product_id} is not in the wishlist")
    db.delete(db_item)
    db.commit()
    return db_item


def get_items(db: Session, user_id: str):
    return (
        db.query(models.WishlistItem)
        .options(selectinload(models.WishlistItem.product))
        .filter(models.WishlistItem.user_id == user_id)
        .order_by(models.WishlistItem.created_at.desc(), models.WishlistItem.id.desc())
        .all()
    )


def is_wishlisted(db: Session, user_id: str, product_id: str) -> bool:
    return _item(db, user_id, product_id) is not None


def wishlist_statuses(db: Session, user_id: str, product_ids):
    """Membership for many products with a single query, keyed by product id."""
    found = {
        product_id
        for (product_id,) in db.query(models.WishlistItem.product_id).filter(
            models.WishlistItem.user_id == user_id,
            models.WishlistItem.product_id.in_(list(product_ids)),
        )
    }
    return {product_id: product_id in found for product_id in product_ids}


def get_share_token(db: Session, user_id: str) -> str:
    """The caller's public wishlist token, created on first use."""
    db_user = get_user(db, user_id)
    if not db_user:
        db_user = models.User(id=user_id)
        db.add(db_user)
    if not db_user.wishlist_share_token:
        db_user.wishlist_share_token = secrets.token_urlsafe(16)
        db.commit()
    return db_user.wishlist_share_token


def get_shared_wishlist(db: Session, token: str):
    """Owner and items behind a share token. Raises NotFoundError for unknown tokens."""
    db_user = db.query(models.User).filter(models.User.wishlist_share_token == token).first()
    if not token or not db_user:
        raise NotFoundError("Wishlist not found")
    return db_user, get_items(db, db_user.id)
