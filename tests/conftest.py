"""Pytest configuration and shared fixtures.

This module provides fixtures and configuration used across all tests.
"""

import os
from typing import Any, Callable, Optional

import pytest

# Set environment for tests BEFORE importing enablewhen modules
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from enablewhen.config import get_settings
from enablewhen.schemas.answer import BooleanAnswer
from enablewhen.schemas.fhir import ENABLE_WHEN_URL
from enablewhen.schemas.task import ConditionalStep, OrderedTask, Requirement


@pytest.fixture(autouse=True)
def fresh_settings():
    """Reload settings for every test so monkeypatched env vars apply."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def enable_when() -> Callable[..., dict[str, Any]]:
    """Factory for raw enableWhen extension dicts.

    Returns:
        Callable building an extension from a question ID and answer value
        fields, e.g. enable_when("q1", valueBoolean=True)
    """
    def _build(question: Optional[str] = None, **answer_value: Any) -> dict[str, Any]:
        sub_extensions = []
        if question is not None:
            sub_extensions.append({"url": "#question", "valueString": question})
        if answer_value:
            sub_extensions.append({"url": "#answer", **answer_value})
        return {"url": ENABLE_WHEN_URL, "extension": sub_extensions}

    return _build


@pytest.fixture
def linear_task() -> OrderedTask:
    """Task A -> B -> C where B requires A == true.

    Returns:
        OrderedTask with one conditional step in the middle
    """
    return OrderedTask(
        identifier="linear",
        steps=[
            ConditionalStep(identifier="A", text="Do you smoke?", item_type="boolean"),
            ConditionalStep(
                identifier="B",
                text="How many per day?",
                item_type="integer",
                requirements=[
                    Requirement(question_identifier="A", expected=BooleanAnswer(value=True))
                ],
            ),
            ConditionalStep(identifier="C", text="Thank you!", item_type="display"),
        ],
    )
