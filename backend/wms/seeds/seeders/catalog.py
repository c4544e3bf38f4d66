"""Products and product attributes."""

from sqlalchemy import select

from wms.core.text import slugify
from wms.models.product import (
    ATTRIBUTE_TYPES, Product, ProductAttribute, ProductAttributeOption
)
from wms.seeds.base import JsonSeed, SeedDataError


class ProductSeed(JsonSeed):
    name = "products"
    domain = "catalog"
    data_file = "products.json"
    model = Product
    natural_key = ("sku",)
    required_fields = ("name", "sku", "price")

    def validate_record(self, record):
        problems = super().validate_record(record)
        for field in ("price", "cost", "stock_quantity", "min_stock_level"):
            if record.get(field) is not None and record[field] < 0:
                problems.append(f"{field} cannot be negative")
        return problems

    @staticmethod
    def record_label(record, index):
        return f"product '{record.get('sku', index + 1)}'"


class ProductAttributeSeed(JsonSeed):
    name = "product_attributes"
    domain = "catalog"
    data_file = "product_attributes.json"
    model = ProductAttribute
    natural_key = ("slug",)
    required_fields = ("name", "type")

    def validate_record(self, record):
        problems = super().validate_record(record)
        if record.get("type") and record["type"] not in ATTRIBUTE_TYPES:
            problems.append(f"type must be one of {', '.join(ATTRIBUTE_TYPES)}")
        return problems

    async def prepare(self, session, record):
        values = dict(record)
        values["slug"] = slugify(record.get("slug") or record["name"])
        return values


class ProductAttributeOptionSeed(JsonSeed):
    name = "product_attribute_options"
    domain = "catalog"
    dependencies = ("product_attributes",)
    data_file = "product_attribute_options.json"
    model = ProductAttributeOption
    natural_key = ("attribute_id", "value")
    required_fields = ("attribute_slug", "label", "value")

    async def prepare(self, session, record):
        row = (await session.execute(
            select(ProductAttribute.id).where(ProductAttribute.slug == record["attribute_slug"])
        )).first()
        if row is None:
            raise SeedDataError(f"attribute '{record['attribute_slug']}' does not exist")
        values = {k: v for k, v in record.items() if k != "attribute_slug"}
        values["attribute_id"] = row[0]
        return values
