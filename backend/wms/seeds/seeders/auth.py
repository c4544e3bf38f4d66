"""Roles, permissions, users and their assignments."""

from typing import Any, Dict, List

from sqlalchemy import select

from wms.core.security import get_password_hash
from wms.models.role import Permission, Role, RolePermission, UserRole
from wms.models.user import User
from wms.seeds.base import JsonSeed, SeedDataError


async def _id_by(session, model, column: str, value: Any, what: str) -> int:
    row = (await session.execute(select(model.id).where(getattr(model, column) == value))).first()
    if row is None:
        raise SeedDataError(f"{what} '{value}' does not exist")
    return row[0]


class RoleSeed(JsonSeed):
    name = "roles"
    domain = "auth"
    data_file = "roles.json"
    model = Role
    natural_key = ("slug",)
    required_fields = ("name", "slug")

    @staticmethod
    def record_label(record, index):
        return f"role '{record.get('slug', index + 1)}'"


class PermissionSeed(JsonSeed):
    name = "permissions"
    domain = "auth"
    data_file = "permissions.json"
    model = Permission
    natural_key = ("slug",)
    required_fields = ("name", "slug", "module")

    @staticmethod
    def record_label(record, index):
        return f"permission '{record.get('slug', index + 1)}'"


class RolePermissionSeed(JsonSeed):
    """role_permissions.json maps a role slug to permission slugs; "*" grants all."""
    name = "role_permissions"
    domain = "auth"
    dependencies = ("roles", "permissions")
    data_file = "role_permissions.json"
    model = RolePermission
    natural_key = ("role_id", "permission_id")
    required_fields = ("role_slug", "permission_slug")

    def load_data(self) -> List[Dict[str, Any]]:
        return [
            {"role_slug": entry.get("role_slug"), "permission_slug": slug}
            for entry in super().load_data()
            for slug in entry.get("permissions", [])
        ]

    async def load_records(self, session):
        records = self.load_data()
        if not any(r["permission_slug"] == "*" for r in records):
            return records

        all_slugs = (await session.execute(select(Permission.slug).order_by(Permission.id))).scalars().all()
        expanded = []
        for record in records:
            if record["permission_slug"] == "*":
                expanded.extend({"role_slug": record["role_slug"], "permission_slug": s} for s in all_slugs)
            else:
                expanded.append(record)
        return expanded

    async def prepare(self, session, record):
        return {
            "role_id": await _id_by(session, Role, "slug", record["role_slug"], "role"),
            "permission_id": await _id_by(session, Permission, "slug", record["permission_slug"], "permission"),
        }

    @staticmethod
    def record_label(record, index):
        return f"{record.get('role_slug')} -> {record.get('permission_slug')}"


class UserSeed(JsonSeed):
    name = "users"
    domain = "auth"
    data_file = "users.json"
    model = User
    natural_key = ("email",)
    required_fields = ("username", "email", "password")
    # a forced re-seed must not reset passwords that users have changed
    immutable_fields = ("password_hash",)

    def validate_record(self, record):
        problems = super().validate_record(record)
        if record.get("email") and "@" not in record["email"]:
            problems.append("invalid email")
        if record.get("password") and len(record["password"]) < 8:
            problems.append("password must be at least 8 characters")
        return problems

    async def prepare(self, session, record):
        values = {k: v for k, v in record.items() if k != "password"}
        values["email"] = values["email"].lower()
        values["password_hash"] = get_password_hash(record["password"])
        return values

    @staticmethod
    def record_label(record, index):
        return f"user '{record.get('email', index + 1)}'"


class UserRoleSeed(JsonSeed):
    name = "user_roles"
    domain = "auth"
    dependencies = ("users", "roles")
    data_file = "user_roles.json"
    model = UserRole
    natural_key = ("user_id", "role_id")
    required_fields = ("user_email", "role_slug")

    async def prepare(self, session, record):
        return {
            "user_id": await _id_by(session, User, "email", record["user_email"].lower(), "user"),
            "role_id": await _id_by(session, Role, "slug", record["role_slug"], "role"),
        }

    @staticmethod
    def record_label(record, index):
        return f"{record.get('user_email')} -> {record.get('role_slug')}"
