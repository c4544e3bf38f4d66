"""System settings and sample notifications."""

from sqlalchemy import select

from wms.models.notification import Notification
from wms.models.system import SETTING_TYPES, SystemSetting
from wms.models.user import User
from wms.seeds.base import JsonSeed, SeedDataError


class SystemSettingSeed(JsonSeed):
    name = "system_settings"
    domain = "system"
    data_file = "system_settings.json"
    model = SystemSetting
    natural_key = ("key",)
    required_fields = ("key",)
    # values edited by administrators survive a forced re-seed
    immutable_fields = ("value",)

    def validate_record(self, record):
        problems = super().validate_record(record)
        if record.get("type") and record["type"] not in SETTING_TYPES:
            problems.append(f"type must be one of {', '.join(SETTING_TYPES)}")
        return problems

    @staticmethod
    def record_label(record, index):
        return f"setting '{record.get('key', index + 1)}'"


class NotificationSeed(JsonSeed):
    name = "notifications"
    domain = "system"
    dependencies = ("users",)
    data_file = "notifications.json"
    model = Notification
    natural_key = ("user_id", "title")
    required_fields = ("user_email", "type", "title", "message")

    async def prepare(self, session, record):
        row = (await session.execute(
            select(User.id, User.email).where(User.email == record["user_email"].lower())
        )).first()
        if row is None:
            raise SeedDataError(f"user '{record['user_email']}' does not exist")
        values = {k: v for k, v in record.items() if k not in ("user_email", "metadata")}
        values["user_id"], values["email"] = row
        values["meta"] = record.get("metadata")
        return values
