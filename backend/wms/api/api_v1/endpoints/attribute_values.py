"""Attribute values assigned to products"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from wms.api.deps import CurrentUser, get_current_user, require_admin
from wms.api.pagination import PageParams, fetch_page
from wms.api.api_v1.endpoints.attribute_options import get_live_option
from wms.api.api_v1.endpoints.attributes import get_live_attribute
from wms.api.api_v1.endpoints.products import get_live_product
from wms.core.deps import get_db
from wms.core.responses import ApiResponse, create_api_response
from wms.models.product import Product, ProductAttribute, ProductAttributeValue
from wms.schemas.product import ValueCreate, ValueUpdate, ValueResponse, ValueListData

router = APIRouter()


def _base_query():
    """Values whose product and attribute are both live"""
    return (
        select(ProductAttributeValue)
        .join(Product, Product.id == ProductAttributeValue.product_id)
        .join(ProductAttribute, ProductAttribute.id == ProductAttributeValue.attribute_id)
        .where(Product.deleted_at.is_(None), ProductAttribute.deleted_at.is_(None))
        .options(
            selectinload(ProductAttributeValue.attribute),
            selectinload(ProductAttributeValue.option),
        )
    )


def _build_response(value: ProductAttributeValue) -> ValueResponse:
    return ValueResponse(
        id=value.id,
        product_id=value.product_id,
        attribute_id=value.attribute_id,
        option_id=value.option_id,
        value=value.value,
        attribute_name=value.attribute.name if value.attribute else "",
        attribute_type=value.attribute.type if value.attribute else "",
        option_label=value.option.label if value.option else None,
        created_at=value.created_at)


async def _load(db: AsyncSession, value_id: int) -> Optional[ProductAttributeValue]:
    result = await db.execute(_base_query().where(ProductAttributeValue.id == value_id))
    return result.scalar_one_or_none()


async def _check_option(db: AsyncSession, option_id: Optional[int], attribute_id: int) -> None:
    if option_id is None:
        return
    option = await get_live_option(db, option_id)
    if not option:
        raise HTTPException(status_code=404, detail="Attribute option not found")
    if option.attribute_id != attribute_id:
        raise HTTPException(status_code=400, detail="Option does not belong to this attribute")


@router.get("/", response_model=ApiResponse[ValueListData])
async def list_values(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    page: PageParams = Depends(),
    product_id: Optional[int] = Query(None),
    attribute_id: Optional[int] = Query(None)) -> Any:
    query = _base_query()
    if product_id:
        query = query.where(ProductAttributeValue.product_id == product_id)
    if attribute_id:
        query = query.where(ProductAttributeValue.attribute_id == attribute_id)

    values, total = await fetch_page(db, query.order_by(ProductAttributeValue.id), page)
    return create_api_response(True, ValueListData(
        values=[_build_response(v) for v in values],
        total=total,
    ))


@router.get("/product/{product_id}", response_model=ApiResponse[ValueListData])
async def list_product_values(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    product_id: int) -> Any:
    """All attribute values of one product"""
    if not await get_live_product(db, product_id):
        raise HTTPException(status_code=404, detail="Product not found")

    result = await db.execute(
        _base_query().where(ProductAttributeValue.product_id == product_id).order_by(ProductAttributeValue.id)
    )
    values = result.scalars().all()
    return create_api_response(True, ValueListData(
        values=[_build_response(v) for v in values],
        total=len(values),
    ))


@router.get("/{value_id}", response_model=ApiResponse[ValueResponse])
async def get_value(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    value_id: int) -> Any:
    value = await _load(db, value_id)
    if not value:
        raise HTTPException(status_code=404, detail="Attribute value not found")
    return create_api_response(True, _build_response(value))


@router.post("/", response_model=ApiResponse[ValueResponse], status_code=201)
async def create_value(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    value_in: ValueCreate) -> Any:
    if not await get_live_product(db, value_in.product_id):
        raise HTTPException(status_code=404, detail="Product not found")
    if not await get_live_attribute(db, value_in.attribute_id):
        raise HTTPException(status_code=404, detail="Attribute not found")
    await _check_option(db, value_in.option_id, value_in.attribute_id)
    if value_in.option_id is None and value_in.value is None:
        raise HTTPException(status_code=400, detail="Either value or option_id is required")

    value = ProductAttributeValue(**value_in.model_dump())
    db.add(value)
    await db.commit()

    value = await _load(db, value.id)
    return create_api_response(True, _build_response(value), "Attribute value created successfully")


@router.put("/{value_id}", response_model=ApiResponse[ValueResponse])
@router.patch("/{value_id}", response_model=ApiResponse[ValueResponse])
async def update_value(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    value_id: int,
    value_in: ValueUpdate) -> Any:
    value = await _load(db, value_id)
    if not value:
        raise HTTPException(status_code=404, detail="Attribute value not found")

    update_data = value_in.model_dump(exclude_unset=True)
    if "option_id" in update_data:
        await _check_option(db, update_data["option_id"], value.attribute_id)
    for field, val in update_data.items():
        setattr(value, field, val)

    await db.commit()
    # the option relationship may point at a different row now
    await db.refresh(value, attribute_names=["option"])
    return create_api_response(True, _build_response(value), "Attribute value updated successfully")


@router.delete("/{value_id}", response_model=ApiResponse[None])
async def delete_value(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    value_id: int) -> Any:
    value = await _load(db, value_id)
    if not value:
        raise HTTPException(status_code=404, detail="Attribute value not found")

    await db.delete(value)
    await db.commit()
    return create_api_response(True, None, "Attribute value deleted successfully")
