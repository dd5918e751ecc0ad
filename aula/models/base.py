from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, ValidationError

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def aliases(*names: str) -> AliasChoices:
    return AliasChoices(*names)


def coerce_enum(enum_cls: type[E], value: Any, default: E) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        return default


def nested(data: dict, key: str, field: str) -> Any:
    value = data.get(key)
    if isinstance(value, dict):
        return value.get(field)
    return None


def parse_timestamp(value: Any) -> datetime | None:
    """ISO-8601 string -> aware datetime (UTC when no offset). ``None`` if unparseable."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value.strip():
        try:
            dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


class Payload(BaseModel):
    """Base for every upstream entity: ignores unknown keys, accepts int or str ids."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    @classmethod
    def from_payload(cls, data: Any):
        return cls.model_validate(data if isinstance(data, dict) else {})

    @classmethod
    def from_list(cls, items: list) -> list:
        """Map every dict in ``items``; one the model cannot read is logged and skipped."""
        out = []
        for item in items:
            if not isinstance(item, dict):
                continue
            try:
                out.append(cls.model_validate(item))
            except ValidationError as exc:
                logger.warning(
                    "skipping unreadable %s (id=%s): %d error(s)", cls.__name__, item.get("id"), exc.error_count()
                )
        return out

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")
