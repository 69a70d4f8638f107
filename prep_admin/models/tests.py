"""Mock-test Pydantic models."""
from enum import Enum

from pydantic import BaseModel, Field

from prep_admin.models.questions import ExamType, QuestionType


class TestStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class TestCounts(BaseModel):
    """Aggregates over a test's items."""

    totalQuestions: int = 0
    byType: dict[str, int] = Field(default_factory=dict)
    byDifficulty: dict[str, int] = Field(default_factory=dict)
    totalMarks: float = 0


class BuilderBasics(BaseModel):
    """Stage-one fields of the test builder."""

    name: str | None = None
    description: str | None = None
    exam: ExamType | None = None
    durationSec: int | None = Field(None, gt=0)
    shuffleQuestions: bool | None = None
    shuffleOptions: bool | None = None
    marksCorrectDefault: float | None = None
    marksWrongDefault: float | None = None
    syllabusChapters: list[str] | None = None


class BuilderStartRequest(BaseModel):
    """Start an empty builder, or load an existing test into one."""

    testId: str | None = None


class CandidateQuery(BaseModel):
    """Filters for the candidate pool, on top of the builder's exam and status."""

    chapterIds: list[str] | None = None
    types: list[QuestionType] | None = None
    skillTags: list[str] | None = None
    search: str | None = None


class AddItemRequest(BaseModel):
    refPath: str = Field(..., min_length=1)


class ItemMarksRequest(BaseModel):
    """Per-item mark overrides; absent values clear the override."""

    marksCorrect: float | None = None
    marksWrong: float | None = None


class SaveRequest(BaseModel):
    publish: bool = False


class StatusRequest(BaseModel):
    status: TestStatus
