"""Structural validation of assembled tasks.

This module checks the requirements of an ordered task for references that
can never be satisfied during a forward walk:
- A step requiring an answer to itself (never shown, so never answered)
- Requirements on steps that are not part of the task
- Requirements on steps that only come later in the order
"""

from enablewhen.schemas.task import OrderedTask
from enablewhen.logging_config import get_logger

logger = get_logger(__name__)


class TaskStructureError(Exception):
    """Raised when task structure is invalid."""
    pass


class TaskValidator:
    """Service for validating the requirement graph of a task."""

    @staticmethod
    def validate(task: OrderedTask) -> list[str]:
        """Validate task structure.

        Args:
            task: Task to validate

        Returns:
            Warnings about requirements that reference unknown or later steps

        Raises:
            TaskStructureError: If a step requires an answer to itself. Tasks
                from TaskBuilder never do; it makes such steps unconditional.

        Example:
            >>> warnings = TaskValidator.validate(task)  # Raises if unusable
        """
        self_referencing = [
            step.identifier for step in task.steps
            if any(req.question_identifier == step.identifier for req in step.requirements)
        ]
        if self_referencing:
            raise TaskStructureError(
                f"Steps require an answer to themselves: {self_referencing}"
            )

        warnings: list[str] = []
        for position, step in enumerate(task.steps):
            for requirement in step.requirements:
                target = task.index_of(requirement.question_identifier)
                if target is None:
                    problem = "unknown"
                elif target > position:
                    problem = "later"
                else:
                    continue

                warning = (
                    f"Step {step.identifier} depends on {problem} step "
                    f"{requirement.question_identifier}"
                )
                logger.warning(
                    warning,
                    extra={"questionnaire_id": task.identifier, "step_id": step.identifier},
                )
                warnings.append(warning)

        logger.info(f"Task {task.identifier} validated with {len(warnings)} warning(s)")
        return warnings
