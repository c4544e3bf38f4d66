"""
Runs registered seeders in dependency order.

Seeders are selected by domain and then by name, sorted so that every
seeder runs after the dependencies that are part of the same selection,
and executed one at a time. The first failure stops the run unless
`force` is set.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from wms.core.logging_config import get_logger
from wms.core.result import Result
from wms.seeds.base import BaseSeed, SeedOptions, SeedResult


class CircularDependencyError(Exception):
    pass


@dataclass
class SeederRegistration:
    name: str
    domain: str
    factory: Callable[[], BaseSeed]
    dependencies: List[str] = field(default_factory=list)


@dataclass
class SeedingSummary:
    total_seeders: int = 0
    successful: int = 0
    failed: int = 0
    skipped: int = 0
    total_records_created: int = 0
    total_records_updated: int = 0
    total_records_skipped: int = 0
    total_duration_ms: float = 0.0
    results: Dict[str, SeedResult] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)
    order: List[str] = field(default_factory=list)


class SeedRunner:
    def __init__(self, logger=None):
        self.logger = logger or get_logger(__name__)
        self._seeders: Dict[str, SeederRegistration] = {}
        self.last_summary: Optional[SeedingSummary] = None

    def register_seeder(
        self,
        name: str,
        domain: str,
        factory: Callable[[], BaseSeed],
        dependencies: Sequence[str] = ()) -> None:
        self._seeders[name] = SeederRegistration(name, domain, factory, list(dependencies))

    def register_seeders(self, seeders: Mapping[str, Mapping[str, Any]]) -> None:
        """Register many seeders from `{name: {domain, factory, dependencies}}`."""
        for name, config in seeders.items():
            self.register_seeder(name, config["domain"], config["factory"], config.get("dependencies", ()))

    def get_registered_seeders(self) -> List[str]:
        return list(self._seeders)

    def get_seeders_by_domain(self) -> Dict[str, List[str]]:
        domains: Dict[str, List[str]] = {}
        for registration in self._seeders.values():
            domains.setdefault(registration.domain, []).append(registration.name)
        return domains

    def clear(self) -> None:
        self._seeders.clear()
        self.last_summary = None

    def select(self, options: SeedOptions) -> List[SeederRegistration]:
        selected = list(self._seeders.values())
        if options.domain:
            selected = [s for s in selected if s.domain == options.domain]
        if options.tables:
            wanted = set(options.tables)
            selected = [s for s in selected if s.name in wanted]
        return selected

    @staticmethod
    def sort_by_dependencies(selected: List[SeederRegistration]) -> List[SeederRegistration]:
        """Depth-first topological sort; dependencies outside `selected` are ignored."""
        by_name = {s.name: s for s in selected}
        visited = set()
        visiting = set()
        ordered: List[SeederRegistration] = []

        def visit(registration: SeederRegistration) -> None:
            if registration.name in visited:
                return
            if registration.name in visiting:
                raise CircularDependencyError(
                    f"Circular dependency detected involving {registration.name}"
                )
            visiting.add(registration.name)
            for dependency in registration.dependencies:
                if dependency in by_name:
                    visit(by_name[dependency])
            visiting.discard(registration.name)
            visited.add(registration.name)
            ordered.append(registration)

        for registration in selected:
            visit(registration)
        return ordered

    async def run_seeders(self, options: Optional[SeedOptions] = None) -> Result[SeedingSummary]:
        options = options or SeedOptions()
        start = time.perf_counter()

        selected = self.select(options)
        if not selected:
            return Result.fail("No seeders found to run", "NO_SEEDERS")

        try:
            ordered = self.sort_by_dependencies(selected)
        except CircularDependencyError as e:
            self.logger.error(f"❌ {e}")
            return Result.fail(str(e), "CIRCULAR_DEPENDENCY")

        summary = SeedingSummary(total_seeders=len(ordered), order=[s.name for s in ordered])
        self.last_summary = summary
        if options.dry_run:
            self.logger.info("🔍 Dry run: changes will be rolled back")
        self.logger.info(f"🌱 Running {len(ordered)} seeder(s): {', '.join(summary.order)}")

        for registration in ordered:
            outcome = await self._run_one(registration, options)
            if outcome.is_failure:
                summary.failed += 1
                summary.errors.append(outcome.error)
                if not options.force:
                    self.logger.error(f"🛑 Stopping after {registration.name} failed (use --force to continue)")
                    break
                continue

            seed_result = outcome.value
            summary.results[registration.name] = seed_result
            summary.total_records_created += seed_result.records_created
            summary.total_records_updated += seed_result.records_updated
            summary.total_records_skipped += seed_result.records_skipped
            if seed_result.records_created + seed_result.records_updated > 0:
                summary.successful += 1
            else:
                summary.skipped += 1

        summary.total_duration_ms = (time.perf_counter() - start) * 1000
        self.log_summary(summary)

        if summary.failed > 0 and not options.force:
            return Result.fail(f"Seeding failed: {'; '.join(summary.errors)}", "SEEDING_FAILED")
        return Result.ok(summary)

    async def _run_one(self, registration: SeederRegistration, options: SeedOptions) -> Result[SeedResult]:
        seeder = None
        try:
            seeder = registration.factory()
            self.logger.info(f"▶️  {registration.name} ({registration.domain})")
            return await seeder.seed(options)
        except Exception as e:
            self.logger.exception(f"Seeder {registration.name} raised")
            return Result.fail(f"{registration.name}: {e}", "SEEDER_EXCEPTION")
        finally:
            if seeder is not None:
                await seeder.cleanup()

    def log_summary(self, summary: SeedingSummary) -> None:
        lines = [
            "=" * 50,
            "SEEDING SUMMARY",
            "=" * 50,
            f"Total seeders:   {summary.total_seeders}",
            f"Successful:      {summary.successful}",
            f"Failed:          {summary.failed}",
            f"Skipped:         {summary.skipped}",
            f"Records created: {summary.total_records_created}",
            f"Records updated: {summary.total_records_updated}",
            f"Records skipped: {summary.total_records_skipped}",
            f"Duration:        {summary.total_duration_ms:.0f}ms",
            "=" * 50,
        ]
        for line in lines:
            self.logger.info(line)
        for error in summary.errors:
            self.logger.error(f"  - {error}")
