"""Pydantic schemas for answers, questionnaire fragments and tasks.

This package contains all Pydantic models the navigation engine consumes
and produces.
"""

from enablewhen.schemas.answer import (
    DEFAULT_CODING_SYSTEM,
    AnswerValue,
    BooleanAnswer,
    CodedAnswer,
)
from enablewhen.schemas.fhir import (
    ENABLE_WHEN_URL,
    Coding,
    Extension,
    QuestionnaireItem,
    Questionnaire,
)
from enablewhen.schemas.task import (
    Satisfaction,
    Requirement,
    ConditionalStep,
    OrderedTask,
)

__all__ = [
    "DEFAULT_CODING_SYSTEM",
    "AnswerValue",
    "BooleanAnswer",
    "CodedAnswer",
    "ENABLE_WHEN_URL",
    "Coding",
    "Extension",
    "QuestionnaireItem",
    "Questionnaire",
    "Satisfaction",
    "Requirement",
    "ConditionalStep",
    "OrderedTask",
]
