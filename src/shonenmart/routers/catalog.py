from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import crud, database, schemas
from ..auth import require_admin

router = APIRouter(tags=["catalog"])

SERIES_NOT_FOUND = {"description": "Not Found", "content": {"application/json": {"example": {"detail": "Series not found"}}}}


@router.get("/categories/", response_model=List[schemas.Category])
def read_categories(db: Session = Depends(database.get_db)):
    return crud.get_categories(db)


@router.post(
    "/categories/",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.Category,
    responses={409: {"description": "Conflict", "content": {"application/json": {"example": {"detail": "category already exists"}}}}},
)
def create_category(
    category: schemas.CategoryCreate,
    db: Session = Depends(database.get_db),
    caller=Depends(require_admin),
):
    try:
        return crud.create_category(db, category)
    except IntegrityError:
        raise HTTPException(status_code=409, detail="category already exists")


@router.get("/series/", response_model=List[schemas.AnimeSeries])
def read_series(featured: Optional[bool] = None, db: Session = Depends(database.get_db)):
    """Anime series, optionally only the featured ones."""
    return crud.get_series(db, featured=featured)


@router.post(
    "/series/",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.AnimeSeries,
    responses={409: {"description": "Conflict", "content": {"application/json": {"example": {"detail": "series already exists"}}}}},
)
def create_series(
    series: schemas.AnimeSeriesCreate,
    request: Request,
    db: Session = Depends(database.get_db),
    caller=Depends(require_admin),
):
    try:
        db_series = crud.create_series(db, series)
    except IntegrityError:
        raise HTTPException(status_code=409, detail="series already exists")
    request.app.state.sitemap_cache.invalidate()
    return db_series


@router.put(
    "/series/{series_id}",
    response_model=schemas.AnimeSeries,
    responses={
        404: SERIES_NOT_FOUND,
        409: {"description": "Conflict", "content": {"application/json": {"example": {"detail": "series already exists"}}}},
    },
)
def update_series(
    series_id: str,
    series: schemas.AnimeSeriesUpdate,
    request: Request,
    db: Session = Depends(database.get_db),
    caller=Depends(require_admin),
):
    """Change only the provided fields of a series (admin)."""
    try:
        db_series = crud.update_series(db, series_id, series)
    except IntegrityError:
        raise HTTPException(status_code=409, detail="series already exists")
    if not db_series:
        raise HTTPException(status_code=404, detail="Series not found")
    request.app.state.sitemap_cache.invalidate()
    return db_series


@router.delete("/series/{series_id}", status_code=status.HTTP_204_NO_CONTENT, responses={404: SERIES_NOT_FOUND})
def delete_series(
    series_id: str,
    request: Request,
    db: Session = Depends(database.get_db),
    caller=Depends(require_admin),
):
    """Delete a series (admin). Its products remain, unlinked."""
    if not crud.delete_series(db, series_id):
        raise HTTPException(status_code=404, detail="Series not found")
    request.app.state.sitemap_cache.invalidate()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
