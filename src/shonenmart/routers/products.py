from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response, status
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import crud, database, schemas
from ..auth import require_admin
from ..dependencies import get_mailer, get_notifier
from ..services import catalog as catalog_service

router = APIRouter(prefix="/products", tags=["products"])

NOT_FOUND = {"description": "Not Found", "content": {"application/json": {"example": {"detail": "Product not found"}}}}
SLUG_CONFLICT = {"description": "Conflict - slug exists", "content": {"application/json": {"example": {"detail": "slug already exists"}}}}


@router.post(
    "/",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.Product,
    responses={
        400: {"description": "Bad Request", "content": {"application/json": {"example": {"detail": "stock must be >= 0"}}}},
        409: SLUG_CONFLICT,
    },
)
def create_product(
    product: schemas.ProductCreate,
    request: Request,
    response: Response,
    db: Session = Depends(database.get_db),
    caller=Depends(require_admin),
):
    """Create a new product (admin).

    - Returns 201 and a Location header on success.
    - Returns 409 if the `slug` already exists.
    - Returns 400 for a negative stock or an unknown category or series.
    """
    # validate stock locally (not caught by pydantic)
    if product.stock < 0:
        raise HTTPException(status_code=400, detail="stock must be >= 0")
    try:
        db_product = crud.create_product(db, product)
    except crud.InvalidReferenceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except IntegrityError:
        raise HTTPException(status_code=409, detail="slug already exists")
    request.app.state.sitemap_cache.invalidate()
    response.headers["Location"] = f"/products/{db_product.id}"
    return db_product


@router.get(
    "/",
    response_model=schemas.ProductList,
    responses={
        400: {"description": "Bad Request", "content": {"application/json": {"example": {"detail": "page and size must be >= 1"}}}},
    },
)
def read_products(
    page: int = 1,
    size: int = 12,
    order_by: str = "newest",
    category_id: Optional[str] = None,
    anime_id: Optional[str] = None,
    is_sale: Optional[bool] = None,
    is_preorder: Optional[bool] = None,
    featured: Optional[bool] = None,
    q: Optional[str] = None,
    db: Session = Depends(database.get_db),
):
    if page < 1 or size < 1:
        raise HTTPException(status_code=400, detail="page and size must be >= 1")
    if order_by not in crud.products.ORDERINGS:
        raise HTTPException(status_code=400, detail=f"order_by must be one of {', '.join(crud.products.ORDERINGS)}")
    filters = dict(
        category_id=category_id,
        anime_id=anime_id,
        is_sale=is_sale,
        is_preorder=is_preorder,
        featured=featured,
        q=q,
    )
    skip = (page - 1) * size
    items = crud.get_products(db, skip=skip, limit=size, order_by=order_by, **filters)
    total = crud.count_products(db, **filters)
    return {"items": items, "page": page, "size": size, "total": total}


@router.get("/{product_id}", response_model=schemas.Product, responses={404: NOT_FOUND})
def read_product(product_id: str, db: Session = Depends(database.get_db)):
    """Retrieve a product by id. Returns 404 if not found."""
    db_product = crud.get_product(db, product_id)
    if not db_product:
        raise HTTPException(status_code=404, detail="Product not found")
    return db_product


@router.put(
    "/{product_id}",
    response_model=schemas.Product,
    responses={
        400: {"description": "Bad Request", "content": {"application/json": {"example": {"detail": "invalid value"}}}},
        404: NOT_FOUND,
        409: SLUG_CONFLICT,
    },
)
def update_product(
    product_id: str,
    request: Request,
    partial: bool = False,
    product_data: dict = Body(...),
    db: Session = Depends(database.get_db),
    mailer=Depends(get_mailer),
    notifier=Depends(get_notifier),
    caller=Depends(require_admin),
):
    """Update a product (admin).

    Pass `?partial=true` to change only the provided fields; otherwise a full
    product is expected. Raising stock from zero emails every pending
    back-in-stock subscriber.
    """
    try:
        if partial:
            product_obj = schemas.ProductUpdate(**product_data)
        else:
            product_obj = schemas.ProductCreate(**product_data)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if product_obj.stock is not None and product_obj.stock < 0:
        raise HTTPException(status_code=400, detail="stock must be >= 0")
    try:
        db_product = catalog_service.update_product(db, product_id, product_obj, partial, mailer, notifier)
    except crud.InvalidReferenceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except IntegrityError:
        raise HTTPException(status_code=409, detail="slug already exists")
    if not db_product:
        raise HTTPException(status_code=404, detail="Product not found")
    request.app.state.sitemap_cache.invalidate()
    return db_product


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        404: NOT_FOUND,
        409: {"description": "Product has orders", "content": {"application/json": {"example": {"detail": "Product is referenced by orders"}}}},
    },
)
def delete_product(
    product_id: str,
    request: Request,
    db: Session = Depends(database.get_db),
    caller=Depends(require_admin),
):
    """Delete a product (admin). Returns 204 No Content on success or 404 if not found."""
    try:
        db_product = crud.delete_product(db, product_id)
    except IntegrityError:
        raise HTTPException(status_code=409, detail="Product is referenced by orders")
    if not db_product:
        raise HTTPException(status_code=404, detail="Product not found")
    request.app.state.sitemap_cache.invalidate()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
