"""
Shared configuration for backend record mirrors.
"""
from datetime import date
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BackendModel(BaseModel):
    """Base for records exchanged with the backend in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


def record_id(**kwargs):
    """Field for the backend's `_id` (some endpoints send `id`)."""
    return Field(validation_alias=AliasChoices("_id", "id"), **kwargs)


def parse_day(value: Optional[str]) -> Optional[date]:
    """Calendar day of a backend date or datetime string."""
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None
