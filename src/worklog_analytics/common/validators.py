from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def parse_int(value: Optional[str], field_name: str, *, default: Optional[int] = None) -> Optional[int]:
    if value is None or str(value).strip() == "":
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be an integer", field=field_name)


def require_in_range(value: int, field_name: str, *, minimum: int, maximum: Optional[int] = None) -> int:
    if value < minimum or (maximum is not None and value > maximum):
        bound = f"between {minimum} and {maximum}" if maximum is not None else f"at least {minimum}"
        raise ValidationError(f"{field_name} must be {bound}", field=field_name)
    return value


def split_csv_ids(value: Optional[str], field_name: str) -> list[int]:
    """Split a comma-separated id list. Blank items are dropped; an empty result means "absent"."""

    if value is None:
        return []
    ids: list[int] = []
    for item in str(value).split(","):
        item = item.strip()
        if not item:
            continue
        try:
            ids.append(int(item))
        except ValueError:
            raise ValidationError(f"{field_name} contains an invalid id: {item!r}", field=field_name)
    return ids
