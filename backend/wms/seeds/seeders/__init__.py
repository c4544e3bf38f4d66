"""Every seeder shipped with the application, in registration order."""

from functools import partial
from typing import Any, Dict

from wms.seeds.seeders.auth import PermissionSeed, RolePermissionSeed, RoleSeed, UserRoleSeed, UserSeed
from wms.seeds.seeders.catalog import ProductAttributeOptionSeed, ProductAttributeSeed, ProductSeed
from wms.seeds.seeders.system import NotificationSeed, SystemSettingSeed
from wms.seeds.seeders.warehouse import (
    AisleSeed, BinSeed, LocationSeed, RackSeed, WarehouseSeed, ZoneSeed
)

SEEDERS = (
    RoleSeed, PermissionSeed, RolePermissionSeed, UserSeed, UserRoleSeed,
    WarehouseSeed, ZoneSeed, AisleSeed, RackSeed, LocationSeed, BinSeed,
    ProductSeed, ProductAttributeSeed, ProductAttributeOptionSeed,
    SystemSettingSeed, NotificationSeed,
)


def default_registrations(session_factory, data_dir=None) -> Dict[str, Dict[str, Any]]:
    """Registration mapping for SeedRunner.register_seeders."""
    return {
        seed_cls.name: {
            "domain": seed_cls.domain,
            "factory": partial(seed_cls, session_factory, data_dir=data_dir),
            "dependencies": list(seed_cls.dependencies),
        }
        for seed_cls in SEEDERS
    }
