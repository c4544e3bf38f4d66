from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text
from sqlalchemy.orm import relationship

from wms.db.base import Base, SoftDeleteMixin


class User(SoftDeleteMixin, Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    phone = Column(String(30), nullable=True)
    address = Column(Text, nullable=True)
    avatar_url = Column(String(500), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    email_verified = Column(Boolean, nullable=False, default=False)
    last_login_at = Column(DateTime, nullable=True)

    user_roles = relationship("UserRole", back_populates="user", foreign_keys="UserRole.user_id")

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)

    def active_role_slugs(self):
        """Slugs of live, active roles. Requires user_roles -> role to be loaded."""
        return [
            ur.role.slug
            for ur in self.user_roles
            if ur.deleted_at is None and ur.role is not None
            and ur.role.deleted_at is None and ur.role.is_active
        ]
