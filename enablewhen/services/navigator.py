"""Conditional step navigation.

Given an ordered task and the answers recorded so far, works out which step
comes next or previous, skipping every step whose enableWhen requirements
are not met. All operations are pure functions of their arguments.
"""

from typing import Callable, Optional

from enablewhen.schemas.task import ConditionalStep, OrderedTask, Satisfaction, StepRef
from enablewhen.services.result_store import ResultStore
from enablewhen.logging_config import get_logger

logger = get_logger(__name__)


class StepNavigator:
    """Service for walking an ordered task while honouring step requirements."""

    @staticmethod
    def is_satisfied(step: ConditionalStep, store: ResultStore) -> Satisfaction:
        """Evaluate a step's requirements against recorded answers.

        Every requirement must be met: the prerequisite step must hold at
        least one answer equal to the expected one. An unanswered
        prerequisite counts as unmet.

        Args:
            step: Step to evaluate
            store: Recorded answers

        Returns:
            NOT_APPLICABLE for a step without requirements, otherwise
            SATISFIED or UNSATISFIED

        Example:
            >>> StepNavigator.is_satisfied(ConditionalStep(identifier="a"), InMemoryResultStore())
            <Satisfaction.NOT_APPLICABLE: 'not_applicable'>
        """
        if not step.requirements:
            return Satisfaction.NOT_APPLICABLE

        for requirement in step.requirements:
            answers = store.get_answers(requirement.question_identifier)
            if not answers:
                logger.debug(
                    f"Step {step.identifier} depends on {requirement.question_identifier}, "
                    f"which has no answer yet"
                )
                return Satisfaction.UNSATISFIED
            if not any(answer == requirement.expected for answer in answers):
                return Satisfaction.UNSATISFIED

        return Satisfaction.SATISFIED

    @staticmethod
    def next_step(
        task: OrderedTask,
        current: StepRef,
        store: ResultStore
    ) -> Optional[ConditionalStep]:
        """Find the next visible step.

        Args:
            task: Task being walked
            current: Current step or its identifier; None means before the first step
            store: Recorded answers

        Returns:
            The next step whose requirements are met or absent, None when the
            task is complete
        """
        return StepNavigator._walk(task, current, store, task.step_after)

    @staticmethod
    def previous_step(
        task: OrderedTask,
        current: StepRef,
        store: ResultStore
    ) -> Optional[ConditionalStep]:
        """Find the previous visible step.

        Args:
            task: Task being walked
            current: Current step or its identifier; None means after the last step
            store: Recorded answers

        Returns:
            The previous step whose requirements are met or absent, None at
            the start of the task
        """
        return StepNavigator._walk(task, current, store, task.step_before)

    @staticmethod
    def visible_steps(task: OrderedTask, store: ResultStore) -> list[ConditionalStep]:
        """All steps currently visible, in task order."""
        return [
            step for step in task.steps
            if StepNavigator.is_satisfied(step, store) != Satisfaction.UNSATISFIED
        ]

    @staticmethod
    def _walk(
        task: OrderedTask,
        current: StepRef,
        store: ResultStore,
        neighbour: Callable[[StepRef], Optional[ConditionalStep]]
    ) -> Optional[ConditionalStep]:
        """Follow serial neighbours until one is visible.

        Iterative, so a long run of hidden steps does not grow the stack.
        Each hop moves one position, hence at most len(task) iterations.
        """
        if current is not None and task.index_of(current) is None:
            identifier = current.identifier if isinstance(current, ConditionalStep) else current
            logger.warning(f"Step {identifier} is not part of task {task.identifier}")
            return None

        candidate = neighbour(current)
        while candidate is not None:
            if StepNavigator.is_satisfied(candidate, store) != Satisfaction.UNSATISFIED:
                return candidate
            logger.debug(f"Skipping step {candidate.identifier}, requirements not met")
            candidate = neighbour(candidate)

        return None
