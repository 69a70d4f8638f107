"""Chapter Pydantic models."""
from pydantic import BaseModel, Field


class ChapterCreate(BaseModel):
    """Model for creating a chapter."""

    name: str = Field(..., min_length=1)
    slug: str | None = None
    subject: str = Field(..., min_length=1)
    skillTags: list[str] = Field(default_factory=list)


class SkillTagCreate(BaseModel):
    tag: str = Field(..., min_length=1)


class SkillTagRename(BaseModel):
    old: str = Field(..., min_length=1)
    new: str = Field(..., min_length=1)
