"""
Storage hierarchy: warehouse -> zone -> aisle -> rack -> location -> bin.

Every level is keyed by a string id so records can be created with stable
identifiers (for example by the seeders) as well as generated ones.
"""

import uuid

from sqlalchemy import Column, Integer, String, Text, Boolean, Float, ForeignKey, JSON
from sqlalchemy.orm import relationship

from wms.db.base import Base, SoftDeleteMixin


def _new_id() -> str:
    return str(uuid.uuid4())


ZONE_TYPES = ("receiving", "shipping", "storage", "picking", "packing", "staging")
LOCATION_TYPES = ("picking", "storage", "bulk", "returns", "staging")
LOCATION_PRIORITIES = ("HIGH", "MEDIUM", "LOW")


class Warehouse(SoftDeleteMixin, Base):
    __tablename__ = "warehouses"

    warehouse_id = Column(String(64), primary_key=True, default=_new_id)
    warehouse_name = Column(String(200), nullable=False)
    warehouse_code = Column(String(50), unique=True, index=True, nullable=False)
    lc_warehouse_code = Column(String(50), nullable=False, comment="upper-cased warehouse_code")
    lc_full_code = Column(String(60), nullable=False, comment="WH-<CODE>")
    warehouse_type = Column(String(50), nullable=True)
    address_line1 = Column(String(255), nullable=True)
    address_line2 = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    state_province = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)
    contact_person = Column(String(100), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(30), nullable=True)
    total_area = Column(Float, nullable=True)
    storage_area = Column(Float, nullable=True)
    area_unit = Column(String(10), nullable=False, default="SQM")
    climate_controlled = Column(Boolean, nullable=False, default=False)
    temperature_min = Column(Float, nullable=True)
    temperature_max = Column(Float, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    status = Column(String(30), nullable=False, default="operational")
    time_zone = Column(String(50), nullable=True)
    operating_hours = Column(JSON, nullable=True)
    custom_attributes = Column(JSON, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    updated_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    zones = relationship("Zone", back_populates="warehouse")


class Zone(SoftDeleteMixin, Base):
    __tablename__ = "zones"

    zone_id = Column(String(64), primary_key=True, default=_new_id)
    warehouse_id = Column(String(64), ForeignKey("warehouses.warehouse_id"), nullable=False, index=True)
    zone_name = Column(String(200), nullable=False)
    zone_code = Column(String(50), nullable=False, index=True)
    zone_type = Column(String(20), nullable=False, default="storage")
    description = Column(Text, nullable=True)
    capacity = Column(Float, nullable=True)
    temperature_controlled = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    status = Column(String(30), nullable=False, default="active")
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    updated_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    warehouse = relationship("Warehouse", back_populates="zones")
    aisles = relationship("Aisle", back_populates="zone")


class Aisle(SoftDeleteMixin, Base):
    __tablename__ = "aisles"

    aisle_id = Column(String(64), primary_key=True, default=_new_id)
    zone_id = Column(String(64), ForeignKey("zones.zone_id"), nullable=False, index=True)
    aisle_name = Column(String(200), nullable=False)
    aisle_code = Column(String(50), nullable=False, index=True)
    description = Column(Text, nullable=True)
    length = Column(Float, nullable=True)
    width = Column(Float, nullable=True)
    height = Column(Float, nullable=True)
    dimension_unit = Column(String(10), nullable=False, default="m")
    capacity = Column(Float, nullable=True)
    aisle_direction = Column(String(30), nullable=True, comment="e.g. north-south, bidirectional")
    start_x = Column(Float, nullable=True)
    start_y = Column(Float, nullable=True)
    end_x = Column(Float, nullable=True)
    end_y = Column(Float, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    status = Column(String(30), nullable=False, default="active")
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    updated_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    zone = relationship("Zone", back_populates="aisles")
    racks = relationship("Rack", back_populates="aisle")


class Rack(SoftDeleteMixin, Base):
    __tablename__ = "racks"

    rack_id = Column(String(64), primary_key=True, default=_new_id)
    aisle_id = Column(String(64), ForeignKey("aisles.aisle_id"), nullable=False, index=True)
    rack_name = Column(String(200), nullable=False)
    rack_code = Column(String(50), nullable=False, index=True)
    description = Column(Text, nullable=True)
    rack_type = Column(String(30), nullable=False, default="standard")
    position_in_aisle = Column(Integer, nullable=True)
    side = Column(String(10), nullable=True, comment="left / right")
    levels_count = Column(Integer, nullable=False, default=1)
    max_weight = Column(Float, nullable=True)
    length = Column(Float, nullable=True)
    width = Column(Float, nullable=True)
    height = Column(Float, nullable=True)
    dimension_unit = Column(String(10), nullable=False, default="m")
    is_active = Column(Boolean, nullable=False, default=True)
    status = Column(String(30), nullable=False, default="active")
    accessibility = Column(String(30), nullable=False, default="normal")
    barcode = Column(String(100), nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    updated_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    aisle = relationship("Aisle", back_populates="racks")
    locations = relationship("Location", back_populates="rack")


class Location(SoftDeleteMixin, Base):
    __tablename__ = "locations"

    location_id = Column(String(64), primary_key=True, default=_new_id)
    rack_id = Column(String(64), ForeignKey("racks.rack_id"), nullable=False, index=True)
    # denormalised from rack -> aisle -> zone for warehouse-wide queries
    warehouse_id = Column(String(64), ForeignKey("warehouses.warehouse_id"), nullable=False, index=True)
    location_name = Column(String(200), nullable=True)
    location_code = Column(String(50), nullable=False, index=True)
    location_type = Column(String(20), nullable=False, default="storage")
    level_number = Column(Integer, nullable=True)
    position = Column(String(50), nullable=True)
    barcode = Column(String(100), nullable=True)
    location_priority = Column(String(10), nullable=False, default="MEDIUM")
    length = Column(Float, nullable=True)
    width = Column(Float, nullable=True)
    height = Column(Float, nullable=True)
    volume = Column(Float, nullable=True)
    max_weight = Column(Float, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    updated_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    rack = relationship("Rack", back_populates="locations")
    bins = relationship("Bin", back_populates="location")


class Bin(SoftDeleteMixin, Base):
    __tablename__ = "bins"

    bin_id = Column(String(64), primary_key=True, default=_new_id)
    location_id = Column(String(64), ForeignKey("locations.location_id"), nullable=False, index=True)
    bin_code = Column(String(50), nullable=False, index=True)
    bin_name = Column(String(200), nullable=True)
    description = Column(Text, nullable=True)
    capacity = Column(Float, nullable=True)
    weight_capacity = Column(Float, nullable=True)
    length = Column(Float, nullable=True)
    width = Column(Float, nullable=True)
    height = Column(Float, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    status = Column(String(30), nullable=False, default="available")
    bin_priority = Column(Integer, nullable=False, default=5, comment="1 (highest) .. 10")
    accessibility = Column(String(30), nullable=False, default="normal")
    temperature_zone = Column(String(30), nullable=False, default="ambient")
    hazmat_approved = Column(Boolean, nullable=False, default=False)
    barcode = Column(String(100), nullable=True)
    rfid_tag = Column(String(100), nullable=True)
    qr_code = Column(String(255), nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    updated_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    location = relationship("Location", back_populates="bins")
