"""Difficulty bands and default marking for Test-bank questions."""
from collections.abc import Mapping

from prep_admin.models.questions import DifficultyBand, ExamType, QuestionType

DEFAULT_DIFFICULTY = 5
DEFAULT_TIME_SUGGESTED_SEC = 120


def band_from_difficulty(difficulty: float | None) -> str:
    """Map a 1..10 difficulty to easy / moderate / tough; None counts as moderate."""
    if difficulty is None:
        return DifficultyBand.MODERATE.value
    if difficulty <= 3:
        return DifficultyBand.EASY.value
    if difficulty <= 7:
        return DifficultyBand.MODERATE.value
    return DifficultyBand.TOUGH.value


def default_marks(exam: str, question_type: str) -> tuple[int, int]:
    """Return (marks for correct, marks for wrong) for an exam and question kind."""
    if exam == ExamType.JEE_ADVANCED.value:
        return 3, 0
    # JEE Main and NEET
    wrong = 0 if question_type == QuestionType.NUMERICAL.value else -1
    return 4, wrong


def with_computed_fields(question: Mapping[str, object]) -> dict[str, object]:
    """Fill the derived Test-bank fields that are absent; present values are kept."""
    result = dict(question)
    exam = result.get("exam") or ExamType.JEE_MAIN.value
    question_type = result.get("type") or QuestionType.MCQ.value
    correct, wrong = default_marks(str(exam), str(question_type))
    difficulty = result.get("difficulty")
    if difficulty is None:
        difficulty = DEFAULT_DIFFICULTY

    defaults = {
        "difficultyBand": band_from_difficulty(difficulty),
        "marksCorrect": correct,
        "marksWrong": wrong,
        "timeSuggestedSec": DEFAULT_TIME_SUGGESTED_SEC,
        "optionShuffle": True,
        "status": "ACTIVE",
        "partialScheme": {"mode": "none"},
    }
    for key, value in defaults.items():
        if result.get(key) is None:
            result[key] = value
    return result
