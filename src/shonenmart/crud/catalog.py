from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from .. import models, schemas


def get_categories(db: Session):
    return db.query(models.Category).order_by(models.Category.name).all()


def create_category(db: Session, category: schemas.CategoryCreate):
    db_category = models.Category(name=category.name, slug=category.slug)
    db.add(db_category)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    db.refresh(db_category)
    return db_category


def get_series(db: Session, featured=None):
    query = db.query(models.AnimeSeries)
    if featured is not None:
        query = query.filter(models.AnimeSeries.featured == featured)
    return query.order_by(models.AnimeSeries.name).all()


def create_series(db: Session, series: schemas.AnimeSeriesCreate):
    db_series = models.AnimeSeries(**series.model_dump())
    db.add(db_series)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    db.refresh(db_series)
    return db_series


def get_series_by_id(db: Session, series_id: str):
    return db.query(models.AnimeSeries).filter(models.AnimeSeries.id == series_id).first()


def update_series(db: Session, series_id: str, series: schemas.AnimeSeriesUpdate):
    db_series = get_series_by_id(db, series_id)
    if not db_series:
        return None
    for field, value in series.model_dump(exclude_unset=True).items():
        if value is None and field != "header_image_url":
            continue
        setattr(db_series, field, value)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    db.refresh(db_series)
    return db_series


def delete_series(db: Session, series_id: str):
    """Delete a series; its products stay in the catalog without one."""
    db_series = get_series_by_id(db, series_id)
    if not db_series:
        return None
    db.query(models.Product).filter(models.Product.anime_id == series_id).update(
        {models.Product.anime_id: None}, synchronize_session=False
    )
    db.delete(db_series)
    db.commit()
    return db_series
