"""Question enums and the partial-marking scheme models."""
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class QuestionType(str, Enum):
    """Answer kind of a question."""

    MCQ = "MCQ"
    MULTIPLE_ANSWER = "MultipleAnswer"
    NUMERICAL = "Numerical"


class ExamType(str, Enum):
    JEE_MAIN = "JEE Main"
    JEE_ADVANCED = "JEE Advanced"
    NEET = "NEET"


class DifficultyBand(str, Enum):
    EASY = "easy"
    MODERATE = "moderate"
    TOUGH = "tough"


class QuestionStatus(str, Enum):
    ACTIVE = "ACTIVE"
    RETIRED = "RETIRED"


class QuestionBank(str, Enum):
    """Question banks kept per chapter."""

    DIAGNOSTIC = "Diagnostic"
    PRACTICE = "Practice"
    TEST = "Test"

    @property
    def suffix(self) -> str:
        return f"{self.value}-Questions"

    @classmethod
    def parse(cls, value: str) -> "QuestionBank":
        """Accept `test`, `Test` or `Test-Questions`."""
        cleaned = (value or "").strip().lower().removesuffix("-questions")
        for bank in cls:
            if bank.value.lower() == cleaned:
                return bank
        raise ValueError(f"Unknown question bank: {value!r}")


class NoPartialScheme(BaseModel):
    mode: Literal["none"] = "none"


class PerCorrectScheme(BaseModel):
    mode: Literal["per_correct"]
    marksPerOption: float = Field(..., gt=0)


class AllOrNothingScheme(BaseModel):
    mode: Literal["all_or_nothing"]


class FlatDeductionScheme(BaseModel):
    mode: Literal["flat_deduction"]
    deductionPerIncorrect: float = Field(..., ge=0)


PartialScheme = Annotated[
    Union[NoPartialScheme, PerCorrectScheme, AllOrNothingScheme, FlatDeductionScheme],
    Field(discriminator="mode"),
]

# Fields only Test-bank questions carry
TEST_ONLY_FIELDS = (
    "marksCorrect",
    "marksWrong",
    "timeSuggestedSec",
    "optionShuffle",
    "partialScheme",
)

MIN_CHOICES = 2
MAX_CHOICES = 6
