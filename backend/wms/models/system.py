"""System-wide settings and the application log table."""

from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, JSON

from wms.db.base import Base, TimestampMixin

SETTING_TYPES = ("string", "number", "boolean", "json")
LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


class SystemSetting(TimestampMixin, Base):
    __tablename__ = "system_settings"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String(100), unique=True, index=True, nullable=False)
    value = Column(Text, nullable=True)
    type = Column(String(20), nullable=False, default="string")
    description = Column(Text, nullable=True)
    group = Column(String(50), nullable=False, default="general", index=True)
    is_public = Column(Boolean, nullable=False, default=False)
    is_editable = Column(Boolean, nullable=False, default=True)


class SystemLog(TimestampMixin, Base):
    __tablename__ = "system_logs"

    id = Column(Integer, primary_key=True, index=True)
    level = Column(String(20), nullable=False, default="info", index=True)
    action = Column(String(100), nullable=False, index=True)
    message = Column(Text, nullable=False)
    context = Column(JSON, nullable=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(500), nullable=True)
    module = Column(String(50), nullable=True, index=True)
    entity_type = Column(String(50), nullable=True)
    entity_id = Column(String(64), nullable=True)
