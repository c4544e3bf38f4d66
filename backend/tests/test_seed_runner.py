"""Unit tests for the seed runner: selection, ordering and failure handling."""

import pytest

from wms.core.result import Result
from wms.seeds.base import BaseSeed, SeedOptions, SeedResult
from wms.seeds.runner import CircularDependencyError, SeederRegistration, SeedRunner


class FakeSeed(BaseSeed):
    """Seeder that records its execution instead of touching a database."""

    def __init__(self, name, calls, created=1, fail=False, explode=False):
        super().__init__(session_factory=None)
        self.name = name
        self.calls = calls
        self.created = created
        self.fail = fail
        self.explode = explode
        self.cleaned_up = False

    async def has_existing_data(self, session):
        return False

    async def run(self, session, options):
        return SeedResult(success=True, records_created=self.created)

    async def seed(self, options):
        self.calls.append(self.name)
        if self.explode:
            raise RuntimeError("kaboom")
        if self.fail:
            return Result.fail(f"{self.name}: broken", "SEED_FAILED")
        return Result.ok(SeedResult(success=True, records_created=self.created))

    async def cleanup(self):
        self.calls.append(f"cleanup:{self.name}")


def build_runner(calls, specs):
    """specs: name -> (domain, dependencies, FakeSeed kwargs)"""
    runner = SeedRunner()
    for name, (domain, dependencies, kwargs) in specs.items():
        runner.register_seeder(
            name, domain,
            lambda name=name, kwargs=kwargs: FakeSeed(name, calls, **kwargs),
            dependencies,
        )
    return runner


def executed(calls):
    return [c for c in calls if not c.startswith("cleanup:")]


class TestOrdering:
    """Test dependency ordering of seeders."""

    async def test_dependencies_run_first(self):
        """A seeder registered before its dependency still runs after it."""
        calls = []
        runner = build_runner(calls, {
            "bins": ("warehouse", ["locations"], {}),
            "locations": ("warehouse", ["warehouses"], {}),
            "warehouses": ("warehouse", [], {}),
        })
        result = await runner.run_seeders()
        assert result.is_success
        assert executed(calls) == ["warehouses", "locations", "bins"]
        assert result.value.order == ["warehouses", "locations", "bins"]

    def test_cycle_is_detected(self):
        registrations = [
            SeederRegistration("a", "x", lambda: None, ["b"]),
            SeederRegistration("b", "x", lambda: None, ["a"]),
        ]
        with pytest.raises(CircularDependencyError, match="Circular dependency detected involving"):
            SeedRunner.sort_by_dependencies(registrations)

    async def test_cycle_fails_the_run(self):
        calls = []
        runner = build_runner(calls, {
            "a": ("x", ["b"], {}),
            "b": ("x", ["a"], {}),
        })
        result = await runner.run_seeders()
        assert result.is_failure
        assert result.error_code == "CIRCULAR_DEPENDENCY"
        assert calls == []

    async def test_unselected_dependencies_are_ignored(self):
        """Filtering by table runs only that table even if it has dependencies."""
        calls = []
        runner = build_runner(calls, {
            "roles": ("auth", [], {}),
            "user_roles": ("auth", ["roles", "users"], {}),
            "users": ("auth", [], {}),
        })
        result = await runner.run_seeders(SeedOptions(tables=["user_roles"]))
        assert result.is_success
        assert executed(calls) == ["user_roles"]


class TestSelection:
    """Test domain and table filters."""

    async def test_domain_filter(self):
        calls = []
        runner = build_runner(calls, {
            "roles": ("auth", [], {}),
            "warehouses": ("warehouse", [], {}),
            "zones": ("warehouse", ["warehouses"], {}),
        })
        await runner.run_seeders(SeedOptions(domain="warehouse"))
        assert executed(calls) == ["warehouses", "zones"]

    async def test_domain_and_tables_combine(self):
        calls = []
        runner = build_runner(calls, {
            "roles": ("auth", [], {}),
            "warehouses": ("warehouse", [], {}),
            "zones": ("warehouse", ["warehouses"], {}),
        })
        await runner.run_seeders(SeedOptions(domain="warehouse", tables=["zones", "roles"]))
        assert executed(calls) == ["zones"]

    async def test_no_matching_seeders(self):
        runner = build_runner([], {"roles": ("auth", [], {})})
        result = await runner.run_seeders(SeedOptions(domain="catalog"))
        assert result.is_failure
        assert result.error == "No seeders found to run"
        assert result.error_code == "NO_SEEDERS"

    def test_seeders_grouped_by_domain(self):
        runner = build_runner([], {
            "roles": ("auth", [], {}),
            "users": ("auth", [], {}),
            "warehouses": ("warehouse", [], {}),
        })
        assert runner.get_seeders_by_domain() == {"auth": ["roles", "users"], "warehouse": ["warehouses"]}
        assert runner.get_registered_seeders() == ["roles", "users", "warehouses"]
        runner.clear()
        assert runner.get_registered_seeders() == []

    async def test_register_seeders_from_mapping(self):
        """Seeders can be registered in bulk as {name: {domain, factory, dependencies}}."""
        calls = []
        runner = SeedRunner()
        runner.register_seeders({
            "zones": {
                "domain": "warehouse",
                "factory": lambda: FakeSeed("zones", calls),
                "dependencies": ["warehouses"],
            },
            "warehouses": {"domain": "warehouse", "factory": lambda: FakeSeed("warehouses", calls)},
        })
        assert runner.get_seeders_by_domain() == {"warehouse": ["zones", "warehouses"]}

        result = await runner.run_seeders()
        assert result.is_success
        assert executed(calls) == ["warehouses", "zones"]


class TestFailures:
    """Test stop-on-failure and --force behaviour."""

    async def test_failure_stops_the_run(self):
        calls = []
        runner = build_runner(calls, {
            "first": ("x", [], {}),
            "second": ("x", ["first"], {"fail": True}),
            "third": ("x", ["second"], {}),
        })
        result = await runner.run_seeders()
        assert result.is_failure
        assert result.error_code == "SEEDING_FAILED"
        assert "second: broken" in result.error
        assert executed(calls) == ["first", "second"]
        assert runner.last_summary.failed == 1
        assert runner.last_summary.successful == 1

    async def test_force_continues_after_failure(self):
        """With force, every seeder runs and the run still succeeds."""
        calls = []
        runner = build_runner(calls, {
            "first": ("x", [], {"fail": True}),
            "second": ("x", ["first"], {}),
        })
        result = await runner.run_seeders(SeedOptions(force=True))
        assert result.is_success
        assert executed(calls) == ["first", "second"]
        assert result.value.failed == 1
        assert result.value.errors == ["first: broken"]

    async def test_exception_becomes_failure_and_cleanup_runs(self):
        calls = []
        runner = build_runner(calls, {"boom": ("x", [], {"explode": True})})
        result = await runner.run_seeders()
        assert result.is_failure
        assert "kaboom" in result.error
        assert "cleanup:boom" in calls

    async def test_seeders_without_changes_count_as_skipped(self):
        calls = []
        runner = build_runner(calls, {
            "empty": ("x", [], {"created": 0}),
            "full": ("x", [], {"created": 3}),
        })
        summary = (await runner.run_seeders()).value
        assert summary.successful == 1
        assert summary.skipped == 1
        assert summary.total_records_created == 3
        assert summary.total_seeders == 2
