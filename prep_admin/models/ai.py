"""AI helper request models."""
from pydantic import BaseModel, Field


class SkillTagRequest(BaseModel):
    text: str = ""
    chapterId: str | None = None
    vocabulary: list[str] | None = None
    limit: int = Field(3, ge=1, le=10)


class QuestionTextRequest(BaseModel):
    text: str = ""


class GenerateAllRequest(BaseModel):
    questionText: str = ""
    detailedAnswer: str = ""
    chapterId: str | None = None
    vocabulary: list[str] | None = None
