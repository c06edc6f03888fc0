"""Assembly of an ordered task from a FHIR Questionnaire.

Every item with a linkId becomes a step, in document order. Requirements
declared on an enclosing item (typically a group) also gate every item
nested inside it. Items whose rules cannot be used (malformed, or gated on
their own answer) are shown unconditionally.
"""

from typing import Optional

from enablewhen.config import get_settings
from enablewhen.schemas.fhir import Questionnaire, QuestionnaireItem
from enablewhen.schemas.task import ConditionalStep, OrderedTask, Requirement
from enablewhen.services.requirements import ExtractionError, RequirementExtractor
from enablewhen.logging_config import get_logger

logger = get_logger(__name__)


class TaskBuilder:
    """Service for turning a questionnaire into an OrderedTask."""

    def __init__(self, strict: Optional[bool] = None):
        """Initialize the builder.

        Args:
            strict: Fail-fast extraction per item (defaults to the
                strict_extraction setting). A failing item is then shown
                unconditionally; when not strict, its valid entries are kept.
        """
        if strict is None:
            strict = get_settings().strict_extraction
        self.strict = strict

    def build(self, questionnaire: Questionnaire) -> OrderedTask:
        """Build the task for a questionnaire.

        Args:
            questionnaire: Parsed questionnaire

        Returns:
            OrderedTask with one step per identified item

        Raises:
            pydantic.ValidationError: If two items share a linkId
        """
        steps: list[ConditionalStep] = []
        # (item, requirements inherited from enclosing items)
        stack: list[tuple[QuestionnaireItem, tuple[Requirement, ...]]] = [
            (item, ()) for item in reversed(questionnaire.item)
        ]

        while stack:
            item, inherited = stack.pop()
            own = tuple(self.requirements_for(item, questionnaire.id))
            requirements = own + inherited

            if any(req.question_identifier == item.link_id for req in requirements):
                logger.warning(
                    f"{item} requires an answer to itself, showing it unconditionally",
                    extra={"questionnaire_id": questionnaire.id, "step_id": item.link_id},
                )
                requirements = ()

            if item.link_id:
                steps.append(ConditionalStep(
                    identifier=item.link_id,
                    text=item.text,
                    item_type=item.type,
                    requirements=requirements,
                ))
            else:
                logger.warning(f"Skipping {item} without linkId in questionnaire {questionnaire.id}")

            for child in reversed(item.item or []):
                stack.append((child, requirements))

        task = OrderedTask(identifier=questionnaire.id, steps=steps)
        conditional = sum(1 for step in task.steps if step.is_conditional)
        logger.info(
            f"Built task {questionnaire.id} with {len(task)} steps "
            f"({conditional} conditional)"
        )
        return task

    def requirements_for(
        self,
        item: QuestionnaireItem,
        questionnaire_id: Optional[str] = None
    ) -> list[Requirement]:
        """Requirements declared directly on an item, never raising.

        Extraction failures are logged and degrade to "no constraint".
        """
        extra = {"questionnaire_id": questionnaire_id, "step_id": item.link_id}

        if not self.strict:
            requirements, errors = RequirementExtractor.extract_requirements_lenient(item)
            for error in errors:
                logger.warning(f"Ignoring malformed enableWhen entry: {error}", extra=extra)
            return requirements or []

        try:
            return RequirementExtractor.extract_requirements(item) or []
        except ExtractionError as e:
            logger.warning(
                f"Could not extract enableWhen for {item}, showing it unconditionally: {e}",
                extra=extra,
            )
            return []
