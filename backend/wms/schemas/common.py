"""Helpers shared by the partial-update schemas."""

from pydantic import field_validator


def _reject_null(cls, value, info):
    if value is None:
        raise ValueError(f"{info.field_name} may not be null")
    return value


def not_null(*fields: str):
    """Validator for update fields backed by NOT NULL columns.

    Omitting such a field leaves the stored value alone; sending an explicit
    null is a validation error.
    """
    return field_validator(*fields, mode="before")(_reject_null)
