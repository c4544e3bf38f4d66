"""Seeding against a real (temporary) database."""

import json

import pytest
from sqlalchemy import func, select

from wms.core.container import Container
from wms.models import (
    Bin, Location, Notification, Permission, Product, Role, RolePermission, SystemSetting, User, Warehouse
)
from wms.seeds.base import SeedOptions
from wms.seeds.cli import build_parser, configure_container, parse_options, run
from wms.seeds.runner import SeedRunner
from wms.seeds.seeders import SEEDERS, default_registrations
from wms.seeds.seeders.auth import RoleSeed, UserSeed
from wms.seeds.seeders.catalog import ProductSeed


async def count(session_factory, model):
    async with session_factory() as session:
        return (await session.execute(select(func.count()).select_from(model))).scalar()


@pytest.fixture
def runner(session_factory):
    runner = SeedRunner()
    runner.register_seeders(default_registrations(session_factory))
    return runner


class TestFullSeed:
    """Test running every shipped seeder."""

    async def test_seeds_every_table(self, runner, session_factory):
        result = await runner.run_seeders()
        assert result.is_success, result.error

        summary = result.value
        assert summary.total_seeders == len(SEEDERS)
        assert summary.failed == 0
        assert summary.errors == []
        assert await count(session_factory, Role) == 8
        assert await count(session_factory, User) == 5
        assert await count(session_factory, Warehouse) == 4
        assert await count(session_factory, Bin) == 6
        assert await count(session_factory, Product) == 7
        assert await count(session_factory, SystemSetting) == 8
        assert await count(session_factory, Notification) == 4

    async def test_wildcard_grants_every_permission(self, runner, session_factory):
        await runner.run_seeders()
        async with session_factory() as session:
            super_admin = (await session.execute(select(Role).where(Role.slug == "super-admin"))).scalar_one()
            granted = (await session.execute(
                select(func.count()).select_from(RolePermission).where(RolePermission.role_id == super_admin.id)
            )).scalar()
            total = (await session.execute(select(func.count()).select_from(Permission))).scalar()
        assert granted == total == 11

    async def test_locations_inherit_warehouse_and_codes_are_derived(self, runner, session_factory):
        await runner.run_seeders()
        async with session_factory() as session:
            location = await session.get(Location, "lc-mdc-a01-1")
            warehouse = (await session.execute(
                select(Warehouse).where(Warehouse.warehouse_code == "MDC-001")
            )).scalar_one()
        assert location.warehouse_id == warehouse.warehouse_id
        assert warehouse.lc_warehouse_code == "MDC-001"
        assert warehouse.lc_full_code == "WH-MDC-001"

    async def test_passwords_are_hashed(self, runner, session_factory):
        await runner.run_seeders(SeedOptions(tables=["users"]))
        async with session_factory() as session:
            user = (await session.execute(select(User).where(User.email == "admin@wms.com"))).scalar_one()
        assert user.password_hash.startswith("$2")

    async def test_rerun_skips_populated_tables(self, runner):
        await runner.run_seeders()
        summary = (await runner.run_seeders()).value
        assert summary.successful == 0
        assert summary.skipped == len(SEEDERS)
        assert summary.total_records_created == 0

    async def test_force_updates_but_keeps_immutable_fields(self, runner, session_factory):
        """A forced re-seed updates rows without resetting password hashes or setting values."""
        await runner.run_seeders()
        async with session_factory() as session:
            setting = (await session.execute(select(SystemSetting).where(SystemSetting.key == "app_name"))).scalar_one()
            setting.value = "Renamed"
            setting.description = "edited"
            user = (await session.execute(select(User).where(User.email == "admin@wms.com"))).scalar_one()
            original_hash = user.password_hash
            await session.commit()

        summary = (await runner.run_seeders(SeedOptions(force=True))).value
        assert summary.total_records_created == 0
        assert summary.total_records_updated > 0

        async with session_factory() as session:
            setting = (await session.execute(select(SystemSetting).where(SystemSetting.key == "app_name"))).scalar_one()
            user = (await session.execute(select(User).where(User.email == "admin@wms.com"))).scalar_one()
        assert setting.value == "Renamed"
        assert setting.description == "Application display name"
        assert user.password_hash == original_hash

    async def test_dry_run_writes_nothing(self, runner, session_factory):
        result = await runner.run_seeders(SeedOptions(domain="catalog", dry_run=True))
        assert result.is_success
        assert result.value.total_records_created > 0
        assert await count(session_factory, Product) == 0


class TestCustomData:
    """Test seeding from a custom data directory."""

    async def test_invalid_records_are_skipped_and_reported(self, session_factory, tmp_path):
        (tmp_path / "products.json").write_text(json.dumps([
            {"name": "Good", "sku": "GOOD-1", "price": 5},
            {"name": "Missing price", "sku": "BAD-1"},
            {"name": "Negative", "sku": "BAD-2", "price": 3, "stock_quantity": -1},
        ]))
        result = await ProductSeed(session_factory, data_dir=tmp_path).seed(SeedOptions())
        assert result.is_success
        seed_result = result.value
        assert seed_result.records_created == 1
        assert seed_result.records_skipped == 2
        assert any("missing required field 'price'" in e for e in seed_result.errors)
        assert any("stock_quantity cannot be negative" in e for e in seed_result.errors)

    async def test_short_password_rejected(self, session_factory, tmp_path):
        (tmp_path / "users.json").write_text(json.dumps([
            {"username": "short", "email": "short@example.com", "password": "abc"},
        ]))
        seed_result = (await UserSeed(session_factory, data_dir=tmp_path).seed(SeedOptions())).value
        assert seed_result.records_created == 0
        assert "password must be at least 8 characters" in seed_result.errors[0]

    async def test_missing_file_fails_the_seeder(self, session_factory, tmp_path):
        result = await RoleSeed(session_factory, data_dir=tmp_path).seed(SeedOptions())
        assert result.is_failure
        assert result.error_code == "SEED_FAILED"
        assert "Seed file not found" in result.error

    async def test_empty_file_fails_the_seeder(self, session_factory, tmp_path):
        (tmp_path / "roles.json").write_text("[]")
        result = await RoleSeed(session_factory, data_dir=tmp_path).seed(SeedOptions())
        assert result.is_failure
        assert "contains no records" in result.error


class TestCommandLine:
    """Test argument parsing and container wiring of the seeding CLI."""

    def test_parse_options(self):
        args = build_parser().parse_args(["--force", "--dry-run", "--domain", "auth", "--tables", "roles, users"])
        options = parse_options(args)
        assert options.force and options.dry_run
        assert options.domain == "auth"
        assert options.tables == ["roles", "users"]

    def test_defaults(self):
        options = parse_options(build_parser().parse_args([]))
        assert options == SeedOptions()

    async def test_container_builds_runner_with_registered_session_factory(self, session_factory):
        container = Container()
        container.register_value("session_factory", session_factory)
        configure_container(container)

        runner = container.resolve("seed_runner")
        assert runner is container.resolve("seed_runner")
        assert set(runner.get_registered_seeders()) == {seed.name for seed in SEEDERS}
        assert await run(SeedOptions(), container, list_only=True) == 0
