from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from .. import models, schemas
from .exceptions import InvalidReferenceError

ORDERINGS = {
    "newest": models.Product.created_at.desc(),
    "price_asc": models.Product.price.asc(),
    "price_desc": models.Product.price.desc(),
}


def get_product(db: Session, product_id: str):
    return db.query(models.Product).filter(models.Product.id == product_id).first()


REFERENCES = {
    "category_id": models.Category,
    "anime_id": models.AnimeSeries,
}


def _check_references(db: Session, values: dict):
    for field, model in REFERENCES.items():
        value = values.get(field)
        if value is not None and db.get(model, value) is None:
            raise InvalidReferenceError(field, value)


def _filtered(db: Session, category_id=None, anime_id=None, is_sale=None, is_preorder=None, featured=None, q=None):
    query = db.query(models.Product)
    if category_id is not None:
        query = query.filter(models.Product.category_id == category_id)
    if anime_id is not None:
        query = query.filter(models.Product.anime_id == anime_id)
    if is_sale is not None:
        query = query.filter(models.Product.is_sale == is_sale)
    if is_preorder is not None:
        query = query.filter(models.Product.is_preorder == is_preorder)
    if featured is not None:
        query = query.filter(models.Product.featured == featured)
    if q:
        query = query.filter(models.Product.name.ilike(f"%{q}%"))
    return query


def get_products(db: Session, skip: int = 0, limit: int = 100, order_by: str = "newest", **filters):
    ordering = ORDERINGS.get(order_by, ORDERINGS["newest"])
    return _filtered(db, **filters).order_by(ordering, models.Product.id).offset(skip).limit(limit).all()


def count_products(db: Session, **filters):
    return _filtered(db, **filters).count()


def create_product(db: Session, product: schemas.ProductCreate):
    values = product.model_dump()
    _check_references(db, values)
    db_product = models.Product(**values)
    db.add(db_product)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    db.refresh(db_product)
    return db_product


def update_product(db: Session, product_id: str, product: schemas.ProductCreate):
    db_product = get_product(db, product_id)
    if not db_product:
        return None
    values = product.model_dump()
    _check_references(db, values)
    for field, value in values.items():
        setattr(db_product, field, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    db.refresh(db_product)
    return db_product


def update_product_partial(db: Session, product_id: str, product: schemas.ProductUpdate):
    db_product = get_product(db, product_id)
    if not db_product:
        return None
    values = product.model_dump(exclude_unset=True)
    _check_references(db, values)
    # Only update provided fields; an explicit null clears sale_price
    for field, value in values.items():
        if value is None and field != "sale_price":
            continue
        setattr(db_product, field, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    db.refresh(db_product)
    return db_product


def delete_product(db: Session, product_id: str):
    db_product = get_product(db, product_id)
    if not db_product:
        return None
    db.delete(db_product)
    try:
        db.commit()
    except IntegrityError:
        # still referenced by order items
        db.rollback()
        raise
    return db_product
