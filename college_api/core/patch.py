"""
Partial updates of nested record values.

Every partial-update endpoint goes through ``apply_patch``: the supplied
sub-fields are shallow-merged onto the stored value (supplied keys win,
everything else is kept) and the merged result is validated against the full
value type before it is written back.
"""

from typing import Any, Dict, Mapping, Optional, Type

from pydantic import BaseModel, ValidationError

from .exceptions import ValidationFailed


def merge_patch(current: Optional[Mapping[str, Any]], changes: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Shallow merge: keys present in ``changes`` override ``current``."""
    merged = dict(current or {})
    merged.update(changes or {})
    return merged


def patch_changes(patch: Any) -> Dict[str, Any]:
    """Only the fields the caller actually sent."""
    if patch is None:
        return {}
    if isinstance(patch, BaseModel):
        return patch.model_dump(exclude_unset=True)
    return dict(patch)


def apply_patch(
    value_type: Type[BaseModel],
    current: Optional[Mapping[str, Any]],
    patch: Any,
    field: str = "",
) -> Dict[str, Any]:
    """Merge ``patch`` onto ``current`` and return the validated value for storage."""
    merged = merge_patch(current, patch_changes(patch))
    try:
        value = value_type.model_validate(merged)
    except ValidationError as exc:
        raise ValidationFailed(errors=validation_errors(exc, prefix=field))
    return value.model_dump(mode="json")


def validation_errors(exc: ValidationError, prefix: str = "") -> list:
    """Flatten pydantic errors into ``[{"field": ..., "message": ...}]``."""
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ())]
        if prefix:
            location.insert(0, prefix)
        errors.append({"field": ".".join(location), "message": error.get("msg", "Invalid value")})
    return errors
