"""Pydantic models."""
from prep_admin.models.auth import (
    AdminBootstrap,
    AdminLogin,
    AdminProfile,
    MessageResponse,
    TokenResponse,
)
from prep_admin.models.breakdowns import QuestionSlide, TheorySlide, slide_adapter
from prep_admin.models.chapters import ChapterCreate, SkillTagCreate, SkillTagRename
from prep_admin.models.questions import (
    DifficultyBand,
    ExamType,
    QuestionBank,
    QuestionStatus,
    QuestionType,
)
from prep_admin.models.tests import TestCounts, TestStatus

__all__ = [
    "AdminBootstrap",
    "AdminLogin",
    "AdminProfile",
    "ChapterCreate",
    "DifficultyBand",
    "ExamType",
    "MessageResponse",
    "QuestionBank",
    "QuestionSlide",
    "QuestionStatus",
    "QuestionType",
    "SkillTagCreate",
    "SkillTagRename",
    "TestCounts",
    "TestStatus",
    "TheorySlide",
    "TokenResponse",
    "slide_adapter",
]
