"""Breakdown slide models.

A slide is either a theory slide or a question slide, discriminated on
``kind``. Stored documents also carry an integer ``order``.
"""
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from prep_admin.models.questions import QuestionType


class TheorySlide(BaseModel):
    kind: Literal["theory"] = "theory"
    title: str = Field(..., min_length=1)
    content: str = ""
    imageUrl: str | None = None
    hint: str | None = None


class QuestionSlide(BaseModel):
    kind: Literal["question"]
    title: str = Field(..., min_length=1)
    content: str = ""
    imageUrl: str | None = None
    hint: str = ""
    detailedAnswer: str = ""
    questionText: str = ""
    skillTag: str = ""
    skillTags: list[str] = Field(default_factory=list)
    type: QuestionType = QuestionType.MCQ
    choices: list[str] | None = None
    answerIndex: int | None = None
    answerIndices: list[int] | None = None
    range: dict[str, float] | None = None


Slide = Annotated[Union[TheorySlide, QuestionSlide], Field(discriminator="kind")]

slide_adapter = TypeAdapter(Slide)
