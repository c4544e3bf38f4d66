"""Schemas for the storage hierarchy."""

from typing import Any, Dict, Literal, Optional, List
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from wms.schemas.common import not_null

ZoneType = Literal["receiving", "shipping", "storage", "picking", "packing", "staging"]
LocationType = Literal["picking", "storage", "bulk", "returns", "staging"]
LocationPriority = Literal["HIGH", "MEDIUM", "LOW"]


def _normalize_code(cls, value):
    if isinstance(value, str):
        return value.strip().upper()
    return value


def _check_temperature_range(model):
    low = getattr(model, "temperature_min", None)
    high = getattr(model, "temperature_max", None)
    if low is not None and high is not None and low > high:
        raise ValueError("temperature_min must not exceed temperature_max")
    return model


# ========== warehouses ==========

class WarehouseBase(BaseModel):
    warehouse_name: str = Field(..., min_length=1, max_length=200)
    warehouse_code: str = Field(..., min_length=1, max_length=50)
    warehouse_type: Optional[str] = Field(None, max_length=50)
    address_line1: Optional[str] = Field(None, max_length=255)
    address_line2: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    state_province: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    contact_person: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    total_area: Optional[float] = Field(None, gt=0)
    storage_area: Optional[float] = Field(None, gt=0)
    area_unit: str = Field("SQM", max_length=10)
    climate_controlled: bool = False
    temperature_min: Optional[float] = None
    temperature_max: Optional[float] = None
    is_active: bool = True
    status: str = Field("operational", max_length=30)
    time_zone: Optional[str] = Field(None, max_length=50)
    operating_hours: Optional[Dict[str, Any]] = None
    custom_attributes: Optional[Dict[str, Any]] = None


class WarehouseCreate(WarehouseBase):
    warehouse_id: Optional[str] = Field(None, max_length=64)

    @model_validator(mode="after")
    def check_temperatures(self):
        return _check_temperature_range(self)


class WarehouseUpdate(BaseModel):
    warehouse_name: Optional[str] = Field(None, min_length=1, max_length=200)
    warehouse_code: Optional[str] = Field(None, min_length=1, max_length=50)
    warehouse_type: Optional[str] = Field(None, max_length=50)
    address_line1: Optional[str] = Field(None, max_length=255)
    address_line2: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    state_province: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    contact_person: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    total_area: Optional[float] = Field(None, gt=0)
    storage_area: Optional[float] = Field(None, gt=0)
    area_unit: Optional[str] = Field(None, max_length=10)
    climate_controlled: Optional[bool] = None
    temperature_min: Optional[float] = None
    temperature_max: Optional[float] = None
    is_active: Optional[bool] = None
    status: Optional[str] = Field(None, max_length=30)
    time_zone: Optional[str] = Field(None, max_length=50)
    operating_hours: Optional[Dict[str, Any]] = None
    custom_attributes: Optional[Dict[str, Any]] = None

    check_not_null = not_null(
        "warehouse_name", "warehouse_code", "area_unit", "climate_controlled", "is_active", "status"
    )

    @model_validator(mode="after")
    def check_temperatures(self):
        return _check_temperature_range(self)


class WarehouseResponse(WarehouseBase):
    warehouse_id: str
    email: Optional[str] = None
    lc_warehouse_code: str
    lc_full_code: str
    created_by: Optional[int] = None
    updated_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class WarehouseListData(BaseModel):
    warehouses: List[WarehouseResponse]
    total: int


# ========== zones ==========

class ZoneCreate(BaseModel):
    zone_id: Optional[str] = Field(None, max_length=64)
    warehouse_id: str = Field(..., min_length=1)
    zone_name: str = Field(..., min_length=1, max_length=200)
    zone_code: str = Field(..., min_length=1, max_length=50)
    zone_type: ZoneType = "storage"
    description: Optional[str] = None
    capacity: Optional[float] = Field(None, gt=0)
    temperature_controlled: bool = False
    is_active: bool = True
    status: str = Field("active", max_length=30)

    normalize_zone_code = field_validator("zone_code", mode="before")(_normalize_code)


class ZoneUpdate(BaseModel):
    zone_name: Optional[str] = Field(None, min_length=1, max_length=200)
    zone_code: Optional[str] = Field(None, min_length=1, max_length=50)
    zone_type: Optional[ZoneType] = None
    description: Optional[str] = None
    capacity: Optional[float] = Field(None, gt=0)
    temperature_controlled: Optional[bool] = None
    is_active: Optional[bool] = None
    status: Optional[str] = Field(None, max_length=30)

    check_not_null = not_null("zone_name", "zone_code", "zone_type", "temperature_controlled", "is_active", "status")
    normalize_zone_code = field_validator("zone_code", mode="before")(_normalize_code)


class ZoneResponse(BaseModel):
    zone_id: str
    warehouse_id: str
    zone_name: str
    zone_code: str
    zone_type: str
    description: Optional[str] = None
    capacity: Optional[float] = None
    temperature_controlled: bool
    is_active: bool
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ZoneListData(BaseModel):
    zones: List[ZoneResponse]
    total: int


# ========== aisles ==========

class AisleCreate(BaseModel):
    aisle_id: Optional[str] = Field(None, max_length=64)
    zone_id: str = Field(..., min_length=1)
    aisle_name: str = Field(..., min_length=1, max_length=200)
    aisle_code: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = None
    length: Optional[float] = Field(None, gt=0)
    width: Optional[float] = Field(None, gt=0)
    height: Optional[float] = Field(None, gt=0)
    dimension_unit: str = Field("m", max_length=10)
    capacity: Optional[float] = Field(None, gt=0)
    aisle_direction: Optional[str] = Field(None, max_length=30)
    start_x: Optional[float] = None
    start_y: Optional[float] = None
    end_x: Optional[float] = None
    end_y: Optional[float] = None
    is_active: bool = True
    status: str = Field("active", max_length=30)


class AisleUpdate(BaseModel):
    aisle_name: Optional[str] = Field(None, min_length=1, max_length=200)
    aisle_code: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = None
    length: Optional[float] = Field(None, gt=0)
    width: Optional[float] = Field(None, gt=0)
    height: Optional[float] = Field(None, gt=0)
    dimension_unit: Optional[str] = Field(None, max_length=10)
    capacity: Optional[float] = Field(None, gt=0)
    aisle_direction: Optional[str] = Field(None, max_length=30)
    start_x: Optional[float] = None
    start_y: Optional[float] = None
    end_x: Optional[float] = None
    end_y: Optional[float] = None
    is_active: Optional[bool] = None
    status: Optional[str] = Field(None, max_length=30)

    check_not_null = not_null("aisle_name", "aisle_code", "dimension_unit", "is_active", "status")


class AisleResponse(BaseModel):
    aisle_id: str
    zone_id: str
    aisle_name: str
    aisle_code: str
    description: Optional[str] = None
    length: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    dimension_unit: str
    capacity: Optional[float] = None
    aisle_direction: Optional[str] = None
    start_x: Optional[float] = None
    start_y: Optional[float] = None
    end_x: Optional[float] = None
    end_y: Optional[float] = None
    is_active: bool
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class AisleListData(BaseModel):
    aisles: List[AisleResponse]
    total: int


# ========== racks ==========

class RackCreate(BaseModel):
    rack_id: Optional[str] = Field(None, max_length=64)
    aisle_id: str = Field(..., min_length=1)
    rack_name: str = Field(..., min_length=1, max_length=200)
    rack_code: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = None
    rack_type: str = Field("standard", max_length=30)
    position_in_aisle: Optional[int] = Field(None, ge=0)
    side: Optional[Literal["left", "right"]] = None
    levels_count: int = Field(1, ge=1)
    max_weight: Optional[float] = Field(None, gt=0)
    length: Optional[float] = Field(None, gt=0)
    width: Optional[float] = Field(None, gt=0)
    height: Optional[float] = Field(None, gt=0)
    dimension_unit: str = Field("m", max_length=10)
    is_active: bool = True
    status: str = Field("active", max_length=30)
    accessibility: str = Field("normal", max_length=30)
    barcode: Optional[str] = Field(None, max_length=100)


class RackUpdate(BaseModel):
    rack_name: Optional[str] = Field(None, min_length=1, max_length=200)
    rack_code: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = None
    rack_type: Optional[str] = Field(None, max_length=30)
    position_in_aisle: Optional[int] = Field(None, ge=0)
    side: Optional[Literal["left", "right"]] = None
    levels_count: Optional[int] = Field(None, ge=1)
    max_weight: Optional[float] = Field(None, gt=0)
    length: Optional[float] = Field(None, gt=0)
    width: Optional[float] = Field(None, gt=0)
    height: Optional[float] = Field(None, gt=0)
    dimension_unit: Optional[str] = Field(None, max_length=10)
    is_active: Optional[bool] = None
    status: Optional[str] = Field(None, max_length=30)
    accessibility: Optional[str] = Field(None, max_length=30)
    barcode: Optional[str] = Field(None, max_length=100)

    check_not_null = not_null(
        "rack_name", "rack_code", "rack_type", "levels_count", "dimension_unit", "is_active", "status", "accessibility"
    )


class RackResponse(BaseModel):
    rack_id: str
    aisle_id: str
    rack_name: str
    rack_code: str
    description: Optional[str] = None
    rack_type: str
    position_in_aisle: Optional[int] = None
    side: Optional[str] = None
    levels_count: int
    max_weight: Optional[float] = None
    length: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    dimension_unit: str
    is_active: bool
    status: str
    accessibility: str
    barcode: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RackListData(BaseModel):
    racks: List[RackResponse]
    total: int


# ========== locations ==========

class LocationCreate(BaseModel):
    location_id: Optional[str] = Field(None, max_length=64)
    rack_id: str = Field(..., min_length=1)
    location_name: Optional[str] = Field(None, max_length=200)
    location_code: str = Field(..., min_length=1, max_length=50)
    location_type: LocationType = "storage"
    level_number: Optional[int] = Field(None, ge=1)
    position: Optional[str] = Field(None, max_length=50)
    barcode: Optional[str] = Field(None, max_length=100)
    location_priority: LocationPriority = "MEDIUM"
    length: Optional[float] = Field(None, gt=0)
    width: Optional[float] = Field(None, gt=0)
    height: Optional[float] = Field(None, gt=0)
    volume: Optional[float] = Field(None, gt=0)
    max_weight: Optional[float] = Field(None, gt=0)
    is_active: bool = True


class LocationUpdate(BaseModel):
    location_name: Optional[str] = Field(None, max_length=200)
    location_code: Optional[str] = Field(None, min_length=1, max_length=50)
    location_type: Optional[LocationType] = None
    level_number: Optional[int] = Field(None, ge=1)
    position: Optional[str] = Field(None, max_length=50)
    barcode: Optional[str] = Field(None, max_length=100)
    location_priority: Optional[LocationPriority] = None
    length: Optional[float] = Field(None, gt=0)
    width: Optional[float] = Field(None, gt=0)
    height: Optional[float] = Field(None, gt=0)
    volume: Optional[float] = Field(None, gt=0)
    max_weight: Optional[float] = Field(None, gt=0)
    is_active: Optional[bool] = None

    check_not_null = not_null("location_code", "location_type", "location_priority", "is_active")


class LocationResponse(BaseModel):
    location_id: str
    rack_id: str
    warehouse_id: str
    location_name: Optional[str] = None
    location_code: str
    location_type: str
    level_number: Optional[int] = None
    position: Optional[str] = None
    barcode: Optional[str] = None
    location_priority: str
    length: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    volume: Optional[float] = None
    max_weight: Optional[float] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class LocationListData(BaseModel):
    locations: List[LocationResponse]
    total: int


# ========== bins ==========

class BinCreate(BaseModel):
    bin_id: Optional[str] = Field(None, max_length=64)
    location_id: str = Field(..., min_length=1)
    bin_code: str = Field(..., min_length=1, max_length=50)
    bin_name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    capacity: Optional[float] = Field(None, gt=0)
    weight_capacity: Optional[float] = Field(None, gt=0)
    length: Optional[float] = Field(None, gt=0)
    width: Optional[float] = Field(None, gt=0)
    height: Optional[float] = Field(None, gt=0)
    is_active: bool = True
    status: str = Field("available", max_length=30)
    bin_priority: int = Field(5, ge=1, le=10)
    accessibility: str = Field("normal", max_length=30)
    temperature_zone: str = Field("ambient", max_length=30)
    hazmat_approved: bool = False
    barcode: Optional[str] = Field(None, max_length=100)
    rfid_tag: Optional[str] = Field(None, max_length=100)
    qr_code: Optional[str] = Field(None, max_length=255)


class BinUpdate(BaseModel):
    bin_code: Optional[str] = Field(None, min_length=1, max_length=50)
    bin_name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    capacity: Optional[float] = Field(None, gt=0)
    weight_capacity: Optional[float] = Field(None, gt=0)
    length: Optional[float] = Field(None, gt=0)
    width: Optional[float] = Field(None, gt=0)
    height: Optional[float] = Field(None, gt=0)
    is_active: Optional[bool] = None
    status: Optional[str] = Field(None, max_length=30)
    bin_priority: Optional[int] = Field(None, ge=1, le=10)
    accessibility: Optional[str] = Field(None, max_length=30)
    temperature_zone: Optional[str] = Field(None, max_length=30)
    hazmat_approved: Optional[bool] = None
    barcode: Optional[str] = Field(None, max_length=100)
    rfid_tag: Optional[str] = Field(None, max_length=100)
    qr_code: Optional[str] = Field(None, max_length=255)

    check_not_null = not_null(
        "bin_code", "is_active", "status", "bin_priority", "accessibility", "temperature_zone", "hazmat_approved"
    )


class BinResponse(BaseModel):
    bin_id: str
    location_id: str
    bin_code: str
    bin_name: Optional[str] = None
    description: Optional[str] = None
    capacity: Optional[float] = None
    weight_capacity: Optional[float] = None
    length: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    is_active: bool
    status: str
    bin_priority: int
    accessibility: str
    temperature_zone: str
    hazmat_approved: bool
    barcode: Optional[str] = None
    rfid_tag: Optional[str] = None
    qr_code: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BinListData(BaseModel):
    bins: List[BinResponse]
    total: int
