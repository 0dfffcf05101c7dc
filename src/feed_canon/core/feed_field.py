"""Module for creating fields with relational metadata."""
from typing import Any

from pydantic import Field


def feed_field(
    *,
    unique: bool = False,
    fk_to: str | None = None,
    strict_fk: bool = True,
    **field_kwargs: Any,  # noqa: ANN401
) -> Any:  # noqa: ANN401
    """Create a Field with relational metadata.

    This is a wrapper function used to annotate fields in feed models
    with metadata describing identifiers and the links between tables.
    The model index and the reference checks read it back to know which
    column identifies a record and which columns point to other tables.

    Args:
        unique: Whether this field is the identifier of the record.
                Used to build lookups and detect duplicate identifiers.
        fk_to: Referenced column in "table.column" format.
        strict_fk: Whether a dangling value is a broken reference.
                   Optional links (e.g. a trip's shape) set this to False
                   and are checked by a dedicated rule instead.
        **field_kwargs: All other Field parameters (ge, le, default, etc.)

    Returns:
        Field instance with relational metadata attached

    Example:
        >>> # Record identifier
        >>> stop_id: str = feed_field(unique=True, default="")

        >>> # Mandatory link to another table
        >>> route_id: str = feed_field(fk_to="routes.route_id", default="")

        >>> # Optional link checked separately
        >>> shape_id: str | None = feed_field(
        ...     fk_to="shapes.shape_id", strict_fk=False, default=None
        ... )
    """
    if "json_schema_extra" not in field_kwargs:
        field_kwargs["json_schema_extra"] = {}

    if unique:
        field_kwargs["json_schema_extra"]["unique"] = True

    if fk_to:
        if "." not in fk_to:
            msg = f"Invalid fk_to format: '{fk_to}'. Expected 'table.column'"
            raise ValueError(msg)
        field_kwargs["json_schema_extra"]["fk_to"] = fk_to
        field_kwargs["json_schema_extra"]["strict_fk"] = strict_fk

    return Field(**field_kwargs)


def get_unique_field(model: type) -> str | None:
    """Get the field marked as the record identifier.

    Args:
        model: Pydantic model class

    Returns:
        Field name, or None if the model has no identifier
    """
    for field_name, field_info in model.model_fields.items():
        extra = field_info.json_schema_extra or {}
        if extra.get("unique", False):
            return field_name
    return None


def get_foreign_key_fields(
    model: type,
    *,
    strict_only: bool = False,
) -> dict[str, tuple[str, str]]:
    """Extract foreign key relationships from model metadata.

    Args:
        model: Pydantic model class
        strict_only: Only return links whose dangling values are broken
                     references

    Returns:
        Dict mapping child field name to (parent_table, parent_column)
        Example: {"route_id": ("routes", "route_id")}
    """
    fk_fields = {}

    for field_name, field_info in model.model_fields.items():
        extra = field_info.json_schema_extra or {}
        fk_to = extra.get("fk_to")
        if not fk_to:
            continue
        if strict_only and not extra.get("strict_fk", True):
            continue
        parent_table, parent_column = fk_to.split(".", 1)
        fk_fields[field_name] = (parent_table, parent_column)

    return fk_fields


__all__ = ["feed_field", "get_foreign_key_fields", "get_unique_field"]
