"""Pydantic schemas for conditional steps and the ordered task they form.

Steps and tasks are built once, when a questionnaire is assembled, and are
immutable afterwards. A task only knows the serial order of its steps; which
steps are visible is decided by the navigator.
"""

from enum import Enum
from typing import Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator

from enablewhen.schemas.answer import AnswerValue


class Satisfaction(str, Enum):
    """Outcome of evaluating a step's requirements against recorded answers."""
    NOT_APPLICABLE = "not_applicable"
    SATISFIED = "satisfied"
    UNSATISFIED = "unsatisfied"


class Requirement(BaseModel):
    """A single enableWhen condition.

    The step identified by question_identifier must have produced an answer
    equal to expected for the owning step to be shown.

    Attributes:
        question_identifier: Identifier of the step whose answer is checked
        expected: Answer that must have been recorded
    """
    model_config = ConfigDict(frozen=True)

    question_identifier: str = Field(..., min_length=1, description="Prerequisite step ID")
    expected: AnswerValue = Field(..., description="Required answer")


class ConditionalStep(BaseModel):
    """A step in a linear task, optionally gated by requirements.

    All requirements must hold for the step to be shown. A step without
    requirements is unconditional.

    Attributes:
        identifier: Unique identifier within the task
        text: Question or display text
        item_type: Questionnaire item type the step was built from
        requirements: Conditions gating the step, in declaration order
    """
    model_config = ConfigDict(frozen=True)

    identifier: str = Field(..., min_length=1, description="Unique step identifier")
    text: Optional[str] = Field(None, description="Question or display text")
    item_type: Optional[str] = Field(None, description="Source item type")
    requirements: tuple[Requirement, ...] = Field(default=(), description="Gating conditions")

    @property
    def is_conditional(self) -> bool:
        """Whether the step carries any requirement."""
        return len(self.requirements) > 0

    def add_requirement(self, requirement: Requirement) -> "ConditionalStep":
        """Return a copy of this step with one more requirement appended."""
        return self.add_requirements([requirement])

    def add_requirements(self, requirements: Iterable[Requirement]) -> "ConditionalStep":
        """Return a copy of this step with the given requirements appended."""
        return self.model_copy(
            update={"requirements": self.requirements + tuple(requirements)}
        )


StepRef = Union[ConditionalStep, str, None]


class OrderedTask(BaseModel):
    """The linear backbone of steps a navigation session walks over.

    Attributes:
        identifier: Identifier of the questionnaire the task was built from
        steps: Steps in serial order (identifiers must be unique)
    """
    model_config = ConfigDict(frozen=True)

    identifier: Optional[str] = Field(None, description="Task identifier")
    steps: tuple[ConditionalStep, ...] = Field(default=(), description="Steps in order")

    _index: dict[str, int] = PrivateAttr(default_factory=dict)

    @model_validator(mode="after")
    def validate_unique_identifiers(self):
        """Reject duplicate step identifiers."""
        step_ids = [step.identifier for step in self.steps]
        if len(step_ids) != len(set(step_ids)):
            duplicates = sorted({sid for sid in step_ids if step_ids.count(sid) > 1})
            raise ValueError(f"Duplicate step identifiers found: {duplicates}")

        return self

    def model_post_init(self, __context) -> None:
        self._index = {step.identifier: pos for pos, step in enumerate(self.steps)}

    def __len__(self) -> int:
        return len(self.steps)

    def index_of(self, step: StepRef) -> Optional[int]:
        """Position of a step (or step identifier), None if not in the task."""
        if step is None:
            return None
        identifier = step.identifier if isinstance(step, ConditionalStep) else step
        return self._index.get(identifier)

    def get_step(self, identifier: str) -> Optional[ConditionalStep]:
        """Get step by identifier.

        Args:
            identifier: Step identifier

        Returns:
            ConditionalStep if found, None otherwise
        """
        position = self._index.get(identifier)
        if position is None:
            return None
        return self.steps[position]

    def step_after(self, step: StepRef) -> Optional[ConditionalStep]:
        """Serial successor, ignoring requirements.

        None stands for "before the first step", so step_after(None) is the
        first step. Returns None past the end or for an unknown step.
        """
        if step is None:
            return self.steps[0] if self.steps else None
        position = self.index_of(step)
        if position is None or position + 1 >= len(self.steps):
            return None
        return self.steps[position + 1]

    def step_before(self, step: StepRef) -> Optional[ConditionalStep]:
        """Serial predecessor, ignoring requirements.

        None stands for "after the last step", so step_before(None) is the
        last step. Returns None before the start or for an unknown step.
        """
        if step is None:
            return self.steps[-1] if self.steps else None
        position = self.index_of(step)
        if position is None or position == 0:
            return None
        return self.steps[position - 1]
