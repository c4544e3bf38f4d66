"""Dependency-ordered database seeding."""

from wms.seeds.base import BaseSeed, JsonSeed, SeedDataError, SeedOptions, SeedResult
from wms.seeds.runner import SeedRunner, SeedingSummary

__all__ = [
    "BaseSeed", "JsonSeed", "SeedDataError", "SeedOptions", "SeedResult",
    "SeedRunner", "SeedingSummary",
]
