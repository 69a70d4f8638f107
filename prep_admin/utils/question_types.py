"""Mapping between UI labels and stored question types."""
import re

_UI_LABELS = {
    "MCQ": "Multiple Choice (Single Answer)",
    "MultipleAnswer": "Multiple Choice (Multiple Answers)",
    "Numerical": "Numerical",
}
_FROM_LABEL = {label: kind for kind, label in _UI_LABELS.items()}


def map_question_type(ui_value: str) -> str:
    """Map a UI display value (or stored value) to a question type."""
    value = ui_value or ""
    if value in _UI_LABELS:
        return value
    if value in _FROM_LABEL:
        return _FROM_LABEL[value]
    if re.search(r"multiple", value, re.I) and re.search(r"answer|correct|multi", value, re.I):
        return "MultipleAnswer"
    if re.search(r"numerical", value, re.I):
        return "Numerical"
    return "MCQ"


def map_question_type_to_ui(question_type: str) -> str:
    return _UI_LABELS.get(question_type, _UI_LABELS["MCQ"])
