"""
Seeder base classes.

A seeder fills one table. `seed()` never raises for expected failures;
it returns a Result wrapping a SeedResult so the runner can decide whether
to continue.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from wms.core.logging_config import get_logger
from wms.core.result import Result
from wms.seeds.json_reader import SeedFileError, read_seed_file


class SeedDataError(Exception):
    """A record that cannot be seeded (bad field, missing reference ...)."""


@dataclass
class SeedOptions:
    force: bool = False
    domain: Optional[str] = None
    tables: Optional[List[str]] = None
    dry_run: bool = False
    verbose: bool = False


@dataclass
class SeedResult:
    success: bool
    records_created: int = 0
    records_updated: int = 0
    records_skipped: int = 0
    duration_ms: float = 0.0
    message: str = ""
    errors: List[str] = field(default_factory=list)


class BaseSeed(ABC):
    name: str = ""
    domain: str = ""
    dependencies: Sequence[str] = ()

    def __init__(self, session_factory: Callable[[], AsyncSession], logger=None):
        self.session_factory = session_factory
        self.logger = logger or get_logger(f"wms.seeds.{self.name or self.__class__.__name__}")

    @abstractmethod
    async def has_existing_data(self, session: AsyncSession) -> bool:
        ...

    @abstractmethod
    async def run(self, session: AsyncSession, options: SeedOptions) -> SeedResult:
        ...

    async def should_skip(self, session: AsyncSession, options: SeedOptions) -> bool:
        if options.force:
            return False
        return await self.has_existing_data(session)

    async def seed(self, options: SeedOptions) -> Result[SeedResult]:
        start = time.perf_counter()
        try:
            async with self.session_factory() as session:
                if await self.should_skip(session, options):
                    self.log_progress(f"{self.name} already has data, skipping (use --force to update)")
                    return Result.ok(SeedResult(
                        success=True,
                        duration_ms=self._elapsed(start),
                        message=f"{self.name} skipped: data already exists",
                    ))

                result = await self.run(session, options)
                if options.dry_run:
                    await session.rollback()
                    result.message = f"[dry run] {result.message}"
                else:
                    await session.commit()
        except (SQLAlchemyError, SeedFileError, SeedDataError) as e:
            self.log_error(f"{self.name} failed", e)
            return Result.fail(f"{self.name}: {e}", "SEED_FAILED")

        result.duration_ms = self._elapsed(start)
        self.log_success(result)
        return Result.ok(result)

    async def cleanup(self) -> None:
        """Hook for seeders holding resources; nothing to release by default."""

    @staticmethod
    def validate_data(data: Any) -> bool:
        return isinstance(data, list) and len(data) > 0

    def log_progress(self, message: str) -> None:
        self.logger.info(f"🌱 {message}")

    def log_error(self, message: str, error: Optional[BaseException] = None) -> None:
        if error is not None:
            self.logger.error(f"❌ {message}: {error}")
        else:
            self.logger.error(f"❌ {message}")

    def log_success(self, result: SeedResult) -> None:
        self.logger.info(
            f"✅ {self.name}: {result.records_created} created, {result.records_updated} updated, "
            f"{result.records_skipped} skipped ({result.duration_ms:.0f}ms)"
        )

    @staticmethod
    def _elapsed(start: float) -> float:
        return (time.perf_counter() - start) * 1000


class JsonSeed(BaseSeed):
    """
    Upserts the records of one JSON file into `model`.

    Subclasses set `data_file`, `model` and `natural_key` (the columns that
    identify an existing row) and may override `validate_record` and
    `prepare` to check and transform each record.
    """
    data_file: str = ""
    model: Any = None
    natural_key: Tuple[str, ...] = ()
    required_fields: Tuple[str, ...] = ()
    # fields kept when an existing row is updated under --force
    immutable_fields: Tuple[str, ...] = ()

    def __init__(self, session_factory, logger=None, data_dir=None):
        super().__init__(session_factory, logger)
        self.data_dir = data_dir

    def load_data(self) -> List[Dict[str, Any]]:
        return read_seed_file(self.data_file, self.data_dir)

    async def load_records(self, session: AsyncSession) -> List[Dict[str, Any]]:
        """Records to upsert; override when they depend on rows already in the database."""
        return self.load_data()

    async def has_existing_data(self, session: AsyncSession) -> bool:
        count = await session.execute(select(func.count()).select_from(self.model))
        return (count.scalar() or 0) > 0

    def validate_record(self, record: Dict[str, Any]) -> List[str]:
        return [f"missing required field '{f}'" for f in self.required_fields if record.get(f) in (None, "")]

    async def prepare(self, session: AsyncSession, record: Dict[str, Any]) -> Dict[str, Any]:
        """Turn a JSON record into model column values."""
        return dict(record)

    async def find_existing(self, session: AsyncSession, values: Dict[str, Any]):
        query = select(self.model)
        for column in self.natural_key:
            query = query.where(getattr(self.model, column) == values.get(column))
        return (await session.execute(query)).scalars().first()

    @staticmethod
    def record_label(record: Dict[str, Any], index: int) -> str:
        return f"record #{index + 1}"

    async def run(self, session: AsyncSession, options: SeedOptions) -> SeedResult:
        records = await self.load_records(session)
        if not self.validate_data(records):
            raise SeedDataError(f"{self.data_file} contains no records")

        result = SeedResult(success=True)
        for index, record in enumerate(records):
            label = self.record_label(record, index)
            problems = self.validate_record(record)
            if problems:
                result.records_skipped += 1
                result.errors.append(f"{label}: {', '.join(problems)}")
                continue
            try:
                values = await self.prepare(session, record)
            except SeedDataError as e:
                result.records_skipped += 1
                result.errors.append(f"{label}: {e}")
                continue

            existing = await self.find_existing(session, values)
            if existing is None:
                session.add(self.model(**values))
                result.records_created += 1
            elif options.force:
                for column, value in values.items():
                    if column not in self.immutable_fields:
                        setattr(existing, column, value)
                result.records_updated += 1
            else:
                result.records_skipped += 1

            if options.verbose:
                self.log_progress(f"{self.name}: processed {label}")
            await session.flush()

        for problem in result.errors:
            self.logger.warning(f"⚠️  {self.name}: {problem}")
        result.message = (
            f"{self.name}: {result.records_created} created, "
            f"{result.records_updated} updated, {result.records_skipped} skipped"
        )
        return result
