"""Products and their EAV-style attributes."""

from sqlalchemy import Column, Integer, String, Text, Boolean, Float, ForeignKey, JSON
from sqlalchemy.orm import relationship

from wms.db.base import Base, SoftDeleteMixin, TimestampMixin

ATTRIBUTE_TYPES = ("text", "number", "boolean", "select", "multiselect", "date")


class Product(SoftDeleteMixin, Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    sku = Column(String(100), unique=True, index=True, nullable=False)
    barcode = Column(String(100), nullable=True, index=True)
    description = Column(Text, nullable=True)
    short_description = Column(String(500), nullable=True)
    price = Column(Float, nullable=False, default=0)
    cost = Column(Float, nullable=True)
    stock_quantity = Column(Integer, nullable=False, default=0)
    min_stock_level = Column(Integer, nullable=False, default=0)
    weight = Column(Float, nullable=True)
    length = Column(Float, nullable=True)
    width = Column(Float, nullable=True)
    height = Column(Float, nullable=True)
    status = Column(String(20), nullable=False, default="active")
    is_digital = Column(Boolean, nullable=False, default=False)
    track_stock = Column(Boolean, nullable=False, default=True)
    image_url = Column(String(500), nullable=True)
    tags = Column(JSON, nullable=True)

    attribute_values = relationship("ProductAttributeValue", back_populates="product")

    @property
    def is_low_stock(self) -> bool:
        return bool(self.track_stock) and self.stock_quantity <= self.min_stock_level


class ProductAttribute(SoftDeleteMixin, Base):
    __tablename__ = "product_attributes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    slug = Column(String(100), unique=True, index=True, nullable=False)
    type = Column(String(20), nullable=False, default="text")
    description = Column(Text, nullable=True)
    is_required = Column(Boolean, nullable=False, default=False)
    is_filterable = Column(Boolean, nullable=False, default=False)
    is_searchable = Column(Boolean, nullable=False, default=False)
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    options = relationship("ProductAttributeOption", back_populates="attribute")
    values = relationship("ProductAttributeValue", back_populates="attribute")


class ProductAttributeOption(TimestampMixin, Base):
    __tablename__ = "product_attribute_options"

    id = Column(Integer, primary_key=True, index=True)
    attribute_id = Column(Integer, ForeignKey("product_attributes.id"), nullable=False, index=True)
    label = Column(String(100), nullable=False)
    value = Column(String(255), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)

    attribute = relationship("ProductAttribute", back_populates="options")


class ProductAttributeValue(TimestampMixin, Base):
    __tablename__ = "product_attribute_values"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    attribute_id = Column(Integer, ForeignKey("product_attributes.id"), nullable=False, index=True)
    option_id = Column(Integer, ForeignKey("product_attribute_options.id"), nullable=True)
    value = Column(Text, nullable=True)

    product = relationship("Product", back_populates="attribute_values")
    attribute = relationship("ProductAttribute", back_populates="values")
    option = relationship("ProductAttributeOption")
