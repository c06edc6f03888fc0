"""Unit tests for task structure validation."""

import pytest

from enablewhen.schemas.answer import BooleanAnswer
from enablewhen.schemas.task import ConditionalStep, OrderedTask, Requirement
from enablewhen.services.task_validator import TaskStructureError, TaskValidator


def requires(question):
    return [Requirement(question_identifier=question, expected=BooleanAnswer(value=True))]


class TestTaskValidator:
    """Tests for TaskValidator class."""

    def test_valid_task(self, linear_task):
        """Test that backward references produce no warnings."""
        assert TaskValidator.validate(linear_task) == []

    def test_self_reference_raises(self):
        """Test that a step gated on itself is rejected."""
        task = OrderedTask(identifier="loop", steps=[
            ConditionalStep(identifier="a", requirements=requires("a")),
        ])

        with pytest.raises(TaskStructureError, match="themselves"):
            TaskValidator.validate(task)

    def test_unknown_reference_warns(self):
        """Test that references to missing steps are reported."""
        task = OrderedTask(steps=[
            ConditionalStep(identifier="a", requirements=requires("ghost")),
        ])

        warnings = TaskValidator.validate(task)

        assert warnings == ["Step a depends on unknown step ghost"]

    def test_forward_reference_warns(self):
        """Test that references to later steps are reported."""
        task = OrderedTask(steps=[
            ConditionalStep(identifier="a", requirements=requires("b")),
            ConditionalStep(identifier="b"),
        ])

        warnings = TaskValidator.validate(task)

        assert warnings == ["Step a depends on later step b"]
