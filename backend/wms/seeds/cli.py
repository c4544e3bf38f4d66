"""
Command-line entry point for database seeding.

    wms-seed [--force] [--verbose] [--dry-run] [--domain=warehouse] [--tables=roles,users]
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from wms.core.config import settings
from wms.core.container import Container
from wms.core.logging_config import get_logger, setup_logging
from wms.seeds.base import SeedOptions
from wms.seeds.runner import SeedRunner
from wms.seeds.seeders import default_registrations


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wms-seed", description="Seed the WMS database")
    parser.add_argument("--force", action="store_true", help="update existing rows and keep going after failures")
    parser.add_argument("--verbose", action="store_true", help="log every processed record")
    parser.add_argument("--dry-run", action="store_true", help="run every seeder and roll back")
    parser.add_argument("--domain", help="only run seeders of this domain (auth, warehouse, catalog, system)")
    parser.add_argument("--tables", help="comma-separated seeder names, e.g. roles,users")
    parser.add_argument("--list", action="store_true", help="list registered seeders and exit")
    return parser


def parse_options(args: argparse.Namespace) -> SeedOptions:
    tables = [t.strip() for t in args.tables.split(",") if t.strip()] if args.tables else None
    return SeedOptions(
        force=args.force,
        domain=args.domain,
        tables=tables,
        dry_run=args.dry_run,
        verbose=args.verbose,
    )


def configure_container(container: Container) -> Container:
    """Register the seeding services; session_factory may be pre-registered (tests)."""
    if not container.has("session_factory"):
        from wms.db.session import SessionLocal
        container.register_value("session_factory", SessionLocal)
    container.register_value("seed_data_dir", settings.SEED_DATA_DIR)
    container.register("logger", lambda: get_logger("wms.seeds"), singleton=True)

    def build_runner(session_factory, data_dir, logger):
        runner = SeedRunner(logger)
        runner.register_seeders(default_registrations(session_factory, data_dir))
        return runner

    container.register(
        "seed_runner", build_runner, singleton=True,
        dependencies=["session_factory", "seed_data_dir", "logger"],
    )
    return container


async def run(options: SeedOptions, container: Container, list_only: bool = False) -> int:
    runner: SeedRunner = container.resolve("seed_runner")
    logger = container.resolve("logger")

    if list_only:
        for domain, names in runner.get_seeders_by_domain().items():
            logger.info(f"{domain}: {', '.join(names)}")
        return 0

    from wms.db.init_db import ensure_tables_exist
    await ensure_tables_exist()

    result = await runner.run_seeders(options)
    if result.is_failure:
        logger.error(f"❌ {result.error}")
        return 1
    logger.info("🎉 Seeding completed")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.verbose else settings.LOG_LEVEL, settings.LOG_DIR)
    container = configure_container(Container.get_instance())
    return asyncio.run(run(parse_options(args), container, list_only=args.list))


if __name__ == "__main__":
    sys.exit(main())
