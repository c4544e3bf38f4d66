"""Product attribute API"""

from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from wms.api.deps import CurrentUser, get_current_user, require_admin
from wms.api.pagination import PageParams, fetch_page
from wms.core.deps import get_db
from wms.core.responses import ApiResponse, create_api_response
from wms.core.text import slugify
from wms.models.product import ProductAttribute, ProductAttributeOption, ProductAttributeValue
from wms.schemas.product import (
    AttributeType, AttributeCreate, AttributeUpdate, AttributeResponse, AttributeListData,
    OptionResponse, OptionListData
)

router = APIRouter()


async def get_live_attribute(db: AsyncSession, attribute_id: int) -> Optional[ProductAttribute]:
    result = await db.execute(
        select(ProductAttribute).where(ProductAttribute.id == attribute_id, ProductAttribute.deleted_at.is_(None))
    )
    return result.scalar_one_or_none()


async def _counts(db: AsyncSession, model, attribute_ids) -> Dict[int, int]:
    if not attribute_ids:
        return {}
    rows = await db.execute(
        select(model.attribute_id, func.count(model.id))
        .where(model.attribute_id.in_(attribute_ids))
        .group_by(model.attribute_id)
    )
    return dict(rows.all())


async def _build_responses(db: AsyncSession, attributes):
    ids = [a.id for a in attributes]
    option_counts = await _counts(db, ProductAttributeOption, ids)
    value_counts = await _counts(db, ProductAttributeValue, ids)
    responses = []
    for attribute in attributes:
        response = AttributeResponse.model_validate(attribute)
        response.option_count = option_counts.get(attribute.id, 0)
        response.value_count = value_counts.get(attribute.id, 0)
        responses.append(response)
    return responses


async def _ensure_slug_free(db: AsyncSession, slug: str, exclude_id: Optional[int] = None) -> None:
    query = select(ProductAttribute.id).where(ProductAttribute.slug == slug)
    if exclude_id is not None:
        query = query.where(ProductAttribute.id != exclude_id)
    if (await db.execute(query)).first():
        raise HTTPException(status_code=409, detail="Attribute with this slug already exists")


@router.get("/", response_model=ApiResponse[AttributeListData])
async def list_attributes(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    page: PageParams = Depends(),
    search: Optional[str] = Query(None),
    type: Optional[AttributeType] = Query(None),
    is_active: Optional[bool] = Query(None)) -> Any:
    """List attributes with their option and value counts"""
    query = select(ProductAttribute).where(ProductAttribute.deleted_at.is_(None))
    if search:
        query = query.where(or_(
            ProductAttribute.name.ilike(f"%{search}%"), ProductAttribute.slug.ilike(f"%{search}%")
        ))
    if type:
        query = query.where(ProductAttribute.type == type)
    if is_active is not None:
        query = query.where(ProductAttribute.is_active == is_active)

    attributes, total = await fetch_page(
        db, query.order_by(ProductAttribute.sort_order, ProductAttribute.name), page
    )
    return create_api_response(True, AttributeListData(
        attributes=await _build_responses(db, attributes),
        total=total,
    ))


@router.get("/{attribute_id}", response_model=ApiResponse[AttributeResponse])
async def get_attribute(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    attribute_id: int) -> Any:
    attribute = await get_live_attribute(db, attribute_id)
    if not attribute:
        raise HTTPException(status_code=404, detail="Attribute not found")
    return create_api_response(True, (await _build_responses(db, [attribute]))[0])


@router.get("/{attribute_id}/options", response_model=ApiResponse[OptionListData])
async def list_attribute_options(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    attribute_id: int) -> Any:
    if not await get_live_attribute(db, attribute_id):
        raise HTTPException(status_code=404, detail="Attribute not found")

    result = await db.execute(
        select(ProductAttributeOption)
        .where(ProductAttributeOption.attribute_id == attribute_id)
        .order_by(ProductAttributeOption.sort_order, ProductAttributeOption.id)
    )
    options = result.scalars().all()
    return create_api_response(True, OptionListData(
        options=[OptionResponse.model_validate(o) for o in options],
        total=len(options),
    ))


@router.post("/", response_model=ApiResponse[AttributeResponse], status_code=201)
async def create_attribute(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    attribute_in: AttributeCreate) -> Any:
    data = attribute_in.model_dump()
    data["slug"] = slugify(attribute_in.slug or attribute_in.name)
    await _ensure_slug_free(db, data["slug"])

    attribute = ProductAttribute(**data)
    db.add(attribute)
    await db.commit()
    await db.refresh(attribute)
    return create_api_response(
        True, (await _build_responses(db, [attribute]))[0], "Attribute created successfully"
    )


@router.put("/{attribute_id}", response_model=ApiResponse[AttributeResponse])
@router.patch("/{attribute_id}", response_model=ApiResponse[AttributeResponse])
async def update_attribute(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    attribute_id: int,
    attribute_in: AttributeUpdate) -> Any:
    attribute = await get_live_attribute(db, attribute_id)
    if not attribute:
        raise HTTPException(status_code=404, detail="Attribute not found")

    update_data = attribute_in.model_dump(exclude_unset=True)
    if update_data.get("slug"):
        update_data["slug"] = slugify(update_data["slug"])
        if update_data["slug"] != attribute.slug:
            await _ensure_slug_free(db, update_data["slug"], exclude_id=attribute.id)
    for field, value in update_data.items():
        setattr(attribute, field, value)

    await db.commit()
    await db.refresh(attribute)
    return create_api_response(
        True, (await _build_responses(db, [attribute]))[0], "Attribute updated successfully"
    )


@router.delete("/{attribute_id}", response_model=ApiResponse[None])
async def delete_attribute(
    *,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
    attribute_id: int) -> Any:
    attribute = await get_live_attribute(db, attribute_id)
    if not attribute:
        raise HTTPException(status_code=404, detail="Attribute not found")

    attribute.soft_delete()
    await db.commit()
    return create_api_response(True, None, "Attribute deleted successfully")
