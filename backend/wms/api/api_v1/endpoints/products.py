"""Product API"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from wms.api.deps import CurrentUser, get_current_user, require_admin
from wms.api.pagination import PageParams, fetch_page
from wms.api.api_v1.endpoints.system_logs import record_system_log
from wms.core.deps import get_db
from wms.core.responses import ApiResponse, create_api_response
from wms.models.product import Product
from wms.schemas.product import ProductCreate, ProductUpdate, ProductResponse, ProductListData

router = APIRouter()


async def get_live_product(db: AsyncSession, product_id: int) -> Optional[Product]:
    result = await db.execute(select(Product).where(Product.id == product_id, Product.deleted_at.is_(None)))
    return result.scalar_one_or_none()


async def _ensure_sku_free(db: AsyncSession, sku: str, exclude_id: Optional[int] = None) -> None:
    query = select(Product.id).where(Product.sku == sku)
    if exclude_id is not None:
        query = query.where(Product.id != exclude_id)
    if (await db.execute(query)).first():
        raise HTTPException(status_code=409, detail="A product with this SKU already exists")


@router.get("/", response_model=ApiResponse[ProductListData])
async def list_products(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    page: PageParams = Depends(),
    search: Optional[str] = Query(None, description="name, SKU or barcode"),
    status: Optional[str] = Query(None),
    low_stock: Optional[bool] = Query(None, description="only products at or below min_stock_level")) -> Any:
    query = select(Product).where(Product.deleted_at.is_(None))
    if search:
        like = f"%{search}%"
        query = query.where(or_(Product.name.ilike(like), Product.sku.ilike(like), Product.barcode.ilike(like)))
    if status:
        query = query.where(Product.status == status)
    if low_stock:
        query = query.where(Product.track_stock.is_(True), Product.stock_quantity <= Product.min_stock_level)

    products, total = await fetch_page(db, query.order_by(Product.name), page)
    return create_api_response(True, ProductListData(
        products=[ProductResponse.model_validate(p) for p in products],
        total=total,
    ))


@router.get("/{product_id}", response_model=ApiResponse[ProductResponse])
async def get_product(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    product_id: int) -> Any:
    product = await get_live_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return create_api_response(True, ProductResponse.model_validate(product))


@router.post("/", response_model=ApiResponse[ProductResponse], status_code=201)
async def create_product(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    request: Request,
    product_in: ProductCreate) -> Any:
    await _ensure_sku_free(db, product_in.sku)

    product = Product(**product_in.model_dump())
    db.add(product)
    await db.flush()
    record_system_log(
        db, "product.create", f"Product {product.sku} created",
        user_id=current_user.id, module="products", entity_type="product",
        entity_id=product.id, request=request,
    )
    await db.commit()
    await db.refresh(product)
    return create_api_response(True, ProductResponse.model_validate(product), "Product created successfully")


@router.put("/{product_id}", response_model=ApiResponse[ProductResponse])
@router.patch("/{product_id}", response_model=ApiResponse[ProductResponse])
async def update_product(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    product_id: int,
    product_in: ProductUpdate) -> Any:
    product = await get_live_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    update_data = product_in.model_dump(exclude_unset=True)
    if "sku" in update_data and update_data["sku"] != product.sku:
        await _ensure_sku_free(db, update_data["sku"], exclude_id=product.id)
    for field, value in update_data.items():
        setattr(product, field, value)

    await db.commit()
    await db.refresh(product)
    return create_api_response(True, ProductResponse.model_validate(product), "Product updated successfully")


@router.delete("/{product_id}", response_model=ApiResponse[None])
async def delete_product(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    request: Request,
    product_id: int) -> Any:
    product = await get_live_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    product.soft_delete()
    record_system_log(
        db, "product.delete", f"Product {product.sku} deleted",
        level="warning", user_id=current_user.id, module="products", entity_type="product",
        entity_id=product.id, request=request,
    )
    await db.commit()
    return create_api_response(True, None, "Product deleted successfully")
