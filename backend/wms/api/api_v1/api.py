"""API router aggregation"""
from fastapi import APIRouter

from wms.api.api_v1.endpoints import (
    auth, profile, users, roles, permissions, user_roles, role_permissions,
    warehouses, zones, aisles, racks, locations, bins,
    products, attributes, attribute_options, attribute_values,
    notifications, system_settings, system_logs
)

api_router = APIRouter()

# Identity and access
api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router.include_router(profile.router, prefix="/profile", tags=["Profile"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(roles.router, prefix="/roles", tags=["Roles"])
api_router.include_router(permissions.router, prefix="/permissions", tags=["Permissions"])
api_router.include_router(user_roles.router, prefix="/user-roles", tags=["User roles"])
api_router.include_router(role_permissions.router, prefix="/role-permissions", tags=["Role permissions"])

# Storage hierarchy
api_router.include_router(warehouses.router, prefix="/warehouses", tags=["Warehouses"])
api_router.include_router(zones.router, prefix="/zones", tags=["Zones"])
api_router.include_router(aisles.router, prefix="/aisles", tags=["Aisles"])
api_router.include_router(racks.router, prefix="/racks", tags=["Racks"])
api_router.include_router(locations.router, prefix="/locations", tags=["Locations"])
api_router.include_router(bins.router, prefix="/bins", tags=["Bins"])

# Catalogue
api_router.include_router(products.router, prefix="/products", tags=["Products"])
api_router.include_router(attributes.router, prefix="/attributes", tags=["Product attributes"])
api_router.include_router(attribute_options.router, prefix="/attribute-options", tags=["Attribute options"])
api_router.include_router(attribute_values.router, prefix="/attribute-values", tags=["Attribute values"])

# System
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(system_settings.router, prefix="/system-settings", tags=["System settings"])
api_router.include_router(system_logs.router, prefix="/system-logs", tags=["System logs"])
