import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from wms.core.config import settings

DEFAULT_DATA_DIR = Path(__file__).resolve().parent / "data"


class SeedFileError(Exception):
    pass


def data_dir() -> Path:
    return Path(settings.SEED_DATA_DIR) if settings.SEED_DATA_DIR else DEFAULT_DATA_DIR


def read_seed_file(filename: str, directory: Optional[Union[str, Path]] = None) -> List[Dict[str, Any]]:
    """Load a JSON array of records from the seed data directory."""
    path = Path(directory) if directory else data_dir()
    path = path / filename
    if not path.is_file():
        raise SeedFileError(f"Seed file not found: {path}")

    try:
        with path.open(encoding="utf-8") as f:
            records = json.load(f)
    except json.JSONDecodeError as e:
        raise SeedFileError(f"Invalid JSON in {path.name}: {e}")

    if not isinstance(records, list):
        raise SeedFileError(f"{path.name} must contain a JSON array")
    return records
