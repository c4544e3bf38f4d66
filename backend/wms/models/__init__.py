from wms.models.user import User
from wms.models.role import Role, Permission, UserRole, RolePermission
from wms.models.warehouse import Warehouse, Zone, Aisle, Rack, Location, Bin
from wms.models.product import (
    Product, ProductAttribute, ProductAttributeOption, ProductAttributeValue
)
from wms.models.notification import Notification
from wms.models.system import SystemSetting, SystemLog

__all__ = [
    "User", "Role", "Permission", "UserRole", "RolePermission",
    "Warehouse", "Zone", "Aisle", "Rack", "Location", "Bin",
    "Product", "ProductAttribute", "ProductAttributeOption", "ProductAttributeValue",
    "Notification", "SystemSetting", "SystemLog",
]
