"""Category and topic management schemas."""

from pydantic import BaseModel, Field

from app.schemas.base import CamelModel


class TaxonomyItem(CamelModel):
    name: str
    question_count: int


class RenameRequest(CamelModel):
    old_name: str = Field(..., min_length=1)
    new_name: str = Field(..., min_length=1)


class UpdatedCountResponse(BaseModel):
    message: str
    updated: int
