import re


def slugify(text: str) -> str:
    """Lower-case, hyphen-separated ASCII slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug or "item"


def warehouse_codes(code: str):
    """(lc_warehouse_code, lc_full_code) for a raw warehouse code."""
    upper = code.strip().upper()
    return upper, f"WH-{upper}"
