"""Attribute option API"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from wms.api.deps import CurrentUser, get_current_user, require_admin
from wms.api.pagination import PageParams, fetch_page
from wms.api.api_v1.endpoints.attributes import get_live_attribute
from wms.core.deps import get_db
from wms.core.responses import ApiResponse, create_api_response
from wms.models.product import ProductAttribute, ProductAttributeOption, ProductAttributeValue
from wms.schemas.product import OptionCreate, OptionUpdate, OptionResponse, OptionListData

router = APIRouter()


def _live_options():
    """Options whose attribute has not been deleted"""
    return select(ProductAttributeOption).join(
        ProductAttribute, ProductAttribute.id == ProductAttributeOption.attribute_id
    ).where(ProductAttribute.deleted_at.is_(None))


async def get_live_option(db: AsyncSession, option_id: int) -> Optional[ProductAttributeOption]:
    result = await db.execute(_live_options().where(ProductAttributeOption.id == option_id))
    return result.scalar_one_or_none()


@router.get("/", response_model=ApiResponse[OptionListData])
async def list_options(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    page: PageParams = Depends(),
    attribute_id: Optional[int] = Query(None)) -> Any:
    query = _live_options()
    if attribute_id:
        query = query.where(ProductAttributeOption.attribute_id == attribute_id)
    query = query.order_by(
        ProductAttributeOption.attribute_id, ProductAttributeOption.sort_order, ProductAttributeOption.id
    )

    options, total = await fetch_page(db, query, page)
    return create_api_response(True, OptionListData(
        options=[OptionResponse.model_validate(o) for o in options],
        total=total,
    ))


@router.get("/{option_id}", response_model=ApiResponse[OptionResponse])
async def get_option(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    option_id: int) -> Any:
    option = await get_live_option(db, option_id)
    if not option:
        raise HTTPException(status_code=404, detail="Attribute option not found")
    return create_api_response(True, OptionResponse.model_validate(option))


@router.post("/", response_model=ApiResponse[OptionResponse], status_code=201)
async def create_option(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    option_in: OptionCreate) -> Any:
    if not await get_live_attribute(db, option_in.attribute_id):
        raise HTTPException(status_code=404, detail="Attribute not found")

    option = ProductAttributeOption(**option_in.model_dump())
    db.add(option)
    await db.commit()
    await db.refresh(option)
    return create_api_response(True, OptionResponse.model_validate(option), "Attribute option created successfully")


@router.put("/{option_id}", response_model=ApiResponse[OptionResponse])
@router.patch("/{option_id}", response_model=ApiResponse[OptionResponse])
async def update_option(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    option_id: int,
    option_in: OptionUpdate) -> Any:
    option = await get_live_option(db, option_id)
    if not option:
        raise HTTPException(status_code=404, detail="Attribute option not found")

    for field, value in option_in.model_dump(exclude_unset=True).items():
        setattr(option, field, value)

    await db.commit()
    await db.refresh(option)
    return create_api_response(True, OptionResponse.model_validate(option), "Attribute option updated successfully")


@router.delete("/{option_id}", response_model=ApiResponse[None])
async def delete_option(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    option_id: int) -> Any:
    option = await get_live_option(db, option_id)
    if not option:
        raise HTTPException(status_code=404, detail="Attribute option not found")

    in_use = await db.execute(
        select(func.count(ProductAttributeValue.id)).where(ProductAttributeValue.option_id == option_id)
    )
    if in_use.scalar():
        raise HTTPException(status_code=409, detail="Attribute option is used by product values")

    await db.delete(option)
    await db.commit()
    return create_api_response(True, None, "Attribute option deleted successfully")
