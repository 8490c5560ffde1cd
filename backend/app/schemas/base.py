"""Shared schema base: snake_case in Python, camelCase on the wire."""

from datetime import datetime, timezone
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


# Accounts are keyed by lower-cased email
NormalizedEmail = Annotated[EmailStr, AfterValidator(lambda value: value.strip().lower())]
Password = Annotated[str, Field(min_length=6, max_length=128)]
DisplayName = Annotated[str | None, Field(max_length=255)]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def as_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class MessageResponse(BaseModel):
    message: str
