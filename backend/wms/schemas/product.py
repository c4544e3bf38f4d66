"""Product and product-attribute schemas."""

from typing import Literal, Optional, List
from datetime import datetime
from pydantic import BaseModel, Field

from wms.schemas.common import not_null

AttributeType = Literal["text", "number", "boolean", "select", "multiselect", "date"]
ProductStatus = Literal["active", "inactive", "draft", "discontinued"]


# ========== products ==========

class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    sku: str = Field(..., min_length=1, max_length=100)
    barcode: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    short_description: Optional[str] = Field(None, max_length=500)
    price: float = Field(0, ge=0)
    cost: Optional[float] = Field(None, ge=0)
    stock_quantity: int = Field(0, ge=0)
    min_stock_level: int = Field(0, ge=0)
    weight: Optional[float] = Field(None, gt=0)
    length: Optional[float] = Field(None, gt=0)
    width: Optional[float] = Field(None, gt=0)
    height: Optional[float] = Field(None, gt=0)
    status: ProductStatus = "active"
    is_digital: bool = False
    track_stock: bool = True
    image_url: Optional[str] = Field(None, max_length=500)
    tags: Optional[List[str]] = None


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    sku: Optional[str] = Field(None, min_length=1, max_length=100)
    barcode: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    short_description: Optional[str] = Field(None, max_length=500)
    price: Optional[float] = Field(None, ge=0)
    cost: Optional[float] = Field(None, ge=0)
    stock_quantity: Optional[int] = Field(None, ge=0)
    min_stock_level: Optional[int] = Field(None, ge=0)
    weight: Optional[float] = Field(None, gt=0)
    length: Optional[float] = Field(None, gt=0)
    width: Optional[float] = Field(None, gt=0)
    height: Optional[float] = Field(None, gt=0)
    status: Optional[ProductStatus] = None
    is_digital: Optional[bool] = None
    track_stock: Optional[bool] = None
    image_url: Optional[str] = Field(None, max_length=500)
    tags: Optional[List[str]] = None

    check_not_null = not_null(
        "name", "sku", "price", "stock_quantity", "min_stock_level", "status", "is_digital", "track_stock"
    )


class ProductResponse(ProductBase):
    id: int
    status: str
    is_low_stock: bool = False
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProductListData(BaseModel):
    products: List[ProductResponse]
    total: int


# ========== attributes ==========

class AttributeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=1, max_length=100, description="defaults to the slugified name")
    type: AttributeType = "text"
    description: Optional[str] = None
    is_required: bool = False
    is_filterable: bool = False
    is_searchable: bool = False
    sort_order: int = Field(0, ge=0)
    is_active: bool = True


class AttributeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[AttributeType] = None
    description: Optional[str] = None
    is_required: Optional[bool] = None
    is_filterable: Optional[bool] = None
    is_searchable: Optional[bool] = None
    sort_order: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None

    check_not_null = not_null(
        "name", "slug", "type", "is_required", "is_filterable", "is_searchable", "sort_order", "is_active"
    )


class AttributeResponse(BaseModel):
    id: int
    name: str
    slug: str
    type: str
    description: Optional[str] = None
    is_required: bool
    is_filterable: bool
    is_searchable: bool
    sort_order: int
    is_active: bool
    option_count: int = 0
    value_count: int = 0
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AttributeListData(BaseModel):
    attributes: List[AttributeResponse]
    total: int


# ========== options ==========

class OptionCreate(BaseModel):
    attribute_id: int
    label: str = Field(..., min_length=1, max_length=100)
    value: str = Field(..., min_length=1, max_length=255)
    sort_order: int = Field(0, ge=0)


class OptionUpdate(BaseModel):
    label: Optional[str] = Field(None, min_length=1, max_length=100)
    value: Optional[str] = Field(None, min_length=1, max_length=255)
    sort_order: Optional[int] = Field(None, ge=0)

    check_not_null = not_null("label", "value", "sort_order")


class OptionResponse(BaseModel):
    id: int
    attribute_id: int
    label: str
    value: str
    sort_order: int
    created_at: datetime

    class Config:
        from_attributes = True


class OptionListData(BaseModel):
    options: List[OptionResponse]
    total: int


# ========== values ==========

class ValueCreate(BaseModel):
    product_id: int
    attribute_id: int
    option_id: Optional[int] = None
    value: Optional[str] = None


class ValueUpdate(BaseModel):
    option_id: Optional[int] = None
    value: Optional[str] = None


class ValueResponse(BaseModel):
    id: int
    product_id: int
    attribute_id: int
    option_id: Optional[int] = None
    value: Optional[str] = None
    attribute_name: str = ""
    attribute_type: str = ""
    option_label: Optional[str] = None
    created_at: datetime


class ValueListData(BaseModel):
    values: List[ValueResponse]
    total: int
