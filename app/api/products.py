from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Optional
import math

from app.api.deps import get_product_service
from app.config import get_settings
from app.services.product_service import ProductService
from app.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductView,
    ProductListResponse,
    SortSpec,
)
from app.schemas.result import ServiceResult

settings = get_settings()

router = APIRouter(prefix="/products", tags=["Products"])


def _unwrap(result: ServiceResult):
    """Return the result entity or raise 404 with the service message."""
    if not result.is_success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=result.exception_message
        )
    return result.entity


def _parse_sort(sort: str) -> SortSpec:
    try:
        return SortSpec.parse(sort)
    except ValueError as e:
        raise HTTPException(
            status_code=422,
            detail=str(e)
        )


@router.post(
    "/",
    response_model=ProductView,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    description="Create a new product owned by an existing user in an existing category."
)
def create_product(
    product_data: ProductCreate,
    service: ProductService = Depends(get_product_service)
):
    """
    Create a new product.

    - **name**, **display_name**: required
    - **price**, **stock**: must be non-negative
    - **user_id**, **category_id**: must reference existing records
    """
    return _unwrap(service.insert(product_data))


@router.get(
    "/",
    response_model=ProductListResponse,
    summary="List products",
    description="Get a page of active products, ordered by ID or by the given sort."
)
def list_products(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(
        settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Items per page"
    ),
    sort: Optional[str] = Query(None, description="Sort field, e.g. 'price', '-price' or 'price desc'"),
    service: ProductService = Depends(get_product_service)
):
    """Get paginated list of products."""
    if sort:
        result = service.get_pages_sorted(page, page_size, _parse_sort(sort))
    else:
        result = service.get(page, page_size)

    total = result.total_count
    return ProductListResponse(
        items=result.items,
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size) if total > 0 else 1
    )


@router.get(
    "/sorted",
    response_model=ProductListResponse,
    summary="List all products sorted",
    description="Get every active product ordered by the given sort."
)
def list_products_sorted(
    sort: str = Query(..., description="Sort field, e.g. 'price', '-price' or 'price desc'"),
    service: ProductService = Depends(get_product_service)
):
    result = service.get_sorted(_parse_sort(sort))
    return ProductListResponse(items=result.items, total=result.total_count)


@router.get(
    "/filter",
    response_model=ProductListResponse,
    summary="Filter products by price",
    description="Get active products priced within the inclusive range, cheapest first. "
                "`total` counts all active products."
)
def filter_products(
    min_price: float = Query(..., ge=0, description="Lowest price (inclusive)"),
    max_price: float = Query(..., ge=0, description="Highest price (inclusive)"),
    service: ProductService = Depends(get_product_service)
):
    result = service.get_filtered(min_price, max_price)
    return ProductListResponse(items=result.items, total=result.total_count)


@router.get(
    "/{product_id}",
    response_model=ProductView,
    summary="Get product by ID",
    description="Get an active product by ID."
)
def get_product(
    product_id: int,
    service: ProductService = Depends(get_product_service)
):
    return _unwrap(service.get_by_id(product_id))


@router.put(
    "/{product_id}",
    response_model=ProductUpdate,
    summary="Update a product",
    description="Update product details. Zero numbers and blank strings keep the stored value."
)
def update_product(
    product_id: int,
    product_data: ProductUpdate,
    service: ProductService = Depends(get_product_service)
):
    """
    Update a product.

    **user_id** and **category_id** must reference existing records.
    The response echoes the submitted payload.
    """
    return _unwrap(service.update(product_data, product_id))


@router.delete(
    "/{product_id}",
    response_model=ProductView,
    summary="Delete a product",
    description="Soft-delete a product. It stays stored but is hidden from reads."
)
def delete_product(
    product_id: int,
    service: ProductService = Depends(get_product_service)
):
    return _unwrap(service.delete(product_id))
