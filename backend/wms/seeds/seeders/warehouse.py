"""Storage hierarchy seeders. Records carry explicit ids so children can reference parents."""

from sqlalchemy import select

from wms.core.text import warehouse_codes
from wms.models.warehouse import (
    Aisle, Bin, Location, Rack, Warehouse, Zone, LOCATION_PRIORITIES, LOCATION_TYPES, ZONE_TYPES
)
from wms.seeds.base import JsonSeed, SeedDataError

DIMENSION_FIELDS = ("length", "width", "height", "capacity", "max_weight", "weight_capacity", "volume")


def _positive_dimensions(record):
    return [
        f"{name} must be positive"
        for name in DIMENSION_FIELDS
        if record.get(name) is not None and record[name] <= 0
    ]


async def _require(session, model, key_column: str, value, what: str) -> None:
    row = (await session.execute(
        select(getattr(model, key_column)).where(getattr(model, key_column) == value)
    )).first()
    if row is None:
        raise SeedDataError(f"{what} '{value}' does not exist")


class WarehouseSeed(JsonSeed):
    name = "warehouses"
    domain = "warehouse"
    data_file = "warehouses.json"
    model = Warehouse
    natural_key = ("warehouse_id",)
    required_fields = ("warehouse_id", "warehouse_name", "warehouse_code")

    def validate_record(self, record):
        problems = super().validate_record(record) + _positive_dimensions(record)
        low, high = record.get("temperature_min"), record.get("temperature_max")
        if low is not None and high is not None and low > high:
            problems.append("temperature_min exceeds temperature_max")
        return problems

    async def prepare(self, session, record):
        values = dict(record)
        values["lc_warehouse_code"], values["lc_full_code"] = warehouse_codes(record["warehouse_code"])
        return values

    @staticmethod
    def record_label(record, index):
        return f"warehouse '{record.get('warehouse_code', index + 1)}'"


class ZoneSeed(JsonSeed):
    name = "zones"
    domain = "warehouse"
    dependencies = ("warehouses",)
    data_file = "zones.json"
    model = Zone
    natural_key = ("zone_id",)
    required_fields = ("zone_id", "warehouse_id", "zone_name", "zone_code", "zone_type")

    def validate_record(self, record):
        problems = super().validate_record(record) + _positive_dimensions(record)
        if record.get("zone_type") and record["zone_type"] not in ZONE_TYPES:
            problems.append(f"zone_type must be one of {', '.join(ZONE_TYPES)}")
        return problems

    async def prepare(self, session, record):
        await _require(session, Warehouse, "warehouse_id", record["warehouse_id"], "warehouse")
        values = dict(record)
        values["zone_code"] = record["zone_code"].upper()
        return values


class AisleSeed(JsonSeed):
    name = "aisles"
    domain = "warehouse"
    dependencies = ("zones",)
    data_file = "aisles.json"
    model = Aisle
    natural_key = ("aisle_id",)
    required_fields = ("aisle_id", "zone_id", "aisle_name", "aisle_code")

    def validate_record(self, record):
        return super().validate_record(record) + _positive_dimensions(record)

    async def prepare(self, session, record):
        await _require(session, Zone, "zone_id", record["zone_id"], "zone")
        return dict(record)


class RackSeed(JsonSeed):
    name = "racks"
    domain = "warehouse"
    dependencies = ("aisles",)
    data_file = "racks.json"
    model = Rack
    natural_key = ("rack_id",)
    required_fields = ("rack_id", "aisle_id", "rack_name", "rack_code")

    def validate_record(self, record):
        problems = super().validate_record(record) + _positive_dimensions(record)
        if record.get("levels_count") is not None and record["levels_count"] < 1:
            problems.append("levels_count must be at least 1")
        return problems

    async def prepare(self, session, record):
        await _require(session, Aisle, "aisle_id", record["aisle_id"], "aisle")
        return dict(record)


class LocationSeed(JsonSeed):
    name = "locations"
    domain = "warehouse"
    dependencies = ("racks",)
    data_file = "locations.json"
    model = Location
    natural_key = ("location_id",)
    required_fields = ("location_id", "rack_id", "location_code")

    def validate_record(self, record):
        problems = super().validate_record(record) + _positive_dimensions(record)
        if record.get("location_type") and record["location_type"] not in LOCATION_TYPES:
            problems.append(f"location_type must be one of {', '.join(LOCATION_TYPES)}")
        if record.get("location_priority") and record["location_priority"] not in LOCATION_PRIORITIES:
            problems.append(f"location_priority must be one of {', '.join(LOCATION_PRIORITIES)}")
        return problems

    async def prepare(self, session, record):
        row = (await session.execute(
            select(Rack.levels_count, Zone.warehouse_id)
            .join(Aisle, Rack.aisle_id == Aisle.aisle_id)
            .join(Zone, Aisle.zone_id == Zone.zone_id)
            .where(Rack.rack_id == record["rack_id"])
        )).first()
        if row is None:
            raise SeedDataError(f"rack '{record['rack_id']}' does not exist")
        levels_count, warehouse_id = row
        if record.get("level_number") is not None and record["level_number"] > levels_count:
            raise SeedDataError(f"level_number {record['level_number']} exceeds {levels_count} rack levels")

        values = dict(record)
        values["warehouse_id"] = warehouse_id
        return values


class BinSeed(JsonSeed):
    name = "bins"
    domain = "warehouse"
    dependencies = ("locations",)
    data_file = "bins.json"
    model = Bin
    natural_key = ("bin_id",)
    required_fields = ("bin_id", "location_id", "bin_code")

    def validate_record(self, record):
        problems = super().validate_record(record) + _positive_dimensions(record)
        priority = record.get("bin_priority")
        if priority is not None and not 1 <= priority <= 10:
            problems.append("bin_priority must be between 1 and 10")
        return problems

    async def prepare(self, session, record):
        await _require(session, Location, "location_id", record["location_id"], "location")
        return dict(record)
