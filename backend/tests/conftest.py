import os
import tempfile

_tmp = tempfile.mkdtemp(prefix="wms-tests-")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_DIR", os.path.join(_tmp, "logs"))
os.environ.setdefault("DATABASE_URI", f"sqlite:///{os.path.join(_tmp, 'unused.db')}")

from typing import Iterable, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from wms.core.deps import get_db
from wms.core.security import create_access_token, get_password_hash
from wms.db.base import Base
from wms.main import app
from wms.models import Role, User, UserRole

DEFAULT_PASSWORD = "Password123!"


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Factory creating a committed user holding the given role slugs."""
    async def _make_user(
        username: str,
        roles: Iterable[str] = (),
        *,
        email: Optional[str] = None,
        password: str = DEFAULT_PASSWORD,
        is_active: bool = True) -> User:
        user = User(
            username=username,
            email=email or f"{username}@example.com",
            password_hash=get_password_hash(password),
            first_name=username.title(),
            last_name="Tester",
            is_active=is_active)
        db.add(user)
        await db.flush()
        for slug in roles:
            role = (await db.execute(select(Role).where(Role.slug == slug))).scalar_one_or_none()
            if role is None:
                role = Role(name=slug.replace("-", " ").title(), slug=slug)
                db.add(role)
                await db.flush()
            db.add(UserRole(user_id=user.id, role_id=role.id))
        await db.commit()
        return user

    return _make_user


def headers_for(user: User, role_names: Iterable[str] = ()) -> dict:
    token = create_access_token(
        user_id=user.id, email=user.email, username=user.username, role_names=list(role_names)
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def viewer_headers(make_user):
    user = await make_user("viewer", ["viewer"])
    return headers_for(user, ["viewer"])


@pytest.fixture
async def admin_headers(make_user):
    user = await make_user("admin", ["admin"])
    return headers_for(user, ["admin"])


@pytest.fixture
async def super_admin_headers(make_user):
    user = await make_user("root", ["super-admin"])
    return headers_for(user, ["super-admin"])
