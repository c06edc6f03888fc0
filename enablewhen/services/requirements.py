"""Extraction of enableWhen requirements from questionnaire items.

An item may carry any number of enableWhen extensions. Each one nests a
"#question" sub-extension naming the step it depends on and an "#answer"
sub-extension holding the answer that step must have produced.
"""

from typing import Optional

from enablewhen.schemas.answer import AnswerValue, BooleanAnswer, CodedAnswer
from enablewhen.schemas.fhir import ENABLE_WHEN_URL, Extension, QuestionnaireItem
from enablewhen.schemas.task import Requirement
from enablewhen.logging_config import get_logger

logger = get_logger(__name__)


class ExtractionError(Exception):
    """Raised when an enableWhen extension cannot be turned into a requirement."""

    def __init__(self, message: str, element: Optional[str] = None):
        super().__init__(message)
        self.element = element


class ExtensionInvalidInContext(ExtractionError):
    """Raised when a sub-extension is used where its URL fragment does not fit."""
    pass


class ExtensionIncomplete(ExtractionError):
    """Raised when the question identifier or the answer is missing."""
    pass


class UnsupportedAnswerType(ExtractionError):
    """Raised when the answer value kind has no answer conversion."""
    pass


class RequirementExtractor:
    """Service turning enableWhen extensions into Requirement objects."""

    @staticmethod
    def extract_requirements(element: QuestionnaireItem) -> Optional[list[Requirement]]:
        """Extract the requirements gating an item.

        Fails fast: the first malformed entry aborts extraction for the whole
        item.

        Args:
            element: Questionnaire item that may carry enableWhen extensions

        Returns:
            None if the item has no enableWhen extension, otherwise the
            requirements in declaration order

        Raises:
            ExtensionInvalidInContext: If an answer sub-extension is misplaced
            ExtensionIncomplete: If an entry lacks its question or answer
            UnsupportedAnswerType: If an answer is neither boolean nor coding

        Example:
            >>> item = QuestionnaireItem.model_validate({
            ...     "linkId": "q2",
            ...     "extension": [{
            ...         "url": ENABLE_WHEN_URL,
            ...         "extension": [
            ...             {"url": "#question", "valueString": "q1"},
            ...             {"url": "#answer", "valueBoolean": True},
            ...         ],
            ...     }],
            ... })
            >>> RequirementExtractor.extract_requirements(item)[0].question_identifier
            'q1'
        """
        enable_when = element.extensions_for_url(ENABLE_WHEN_URL)
        if enable_when is None:
            return None

        requirements = [
            RequirementExtractor._requirement_from_entry(entry, element)
            for entry in enable_when
        ]
        logger.debug(f"Extracted {len(requirements)} requirement(s) for {element}")
        return requirements

    @staticmethod
    def extract_requirements_lenient(
        element: QuestionnaireItem
    ) -> tuple[Optional[list[Requirement]], list[ExtractionError]]:
        """Extract requirements, skipping malformed entries instead of failing.

        Args:
            element: Questionnaire item that may carry enableWhen extensions

        Returns:
            Tuple of (requirements or None, errors of the skipped entries)
        """
        enable_when = element.extensions_for_url(ENABLE_WHEN_URL)
        if enable_when is None:
            return None, []

        requirements: list[Requirement] = []
        errors: list[ExtractionError] = []
        for entry in enable_when:
            try:
                requirements.append(
                    RequirementExtractor._requirement_from_entry(entry, element)
                )
            except ExtractionError as e:
                logger.warning(f"Skipping enableWhen entry: {e}")
                errors.append(e)

        return requirements, errors

    @staticmethod
    def desired_answer(answer: Extension, element: QuestionnaireItem) -> AnswerValue:
        """Convert an "#answer" sub-extension into the answer it requires.

        Supports valueBoolean and valueCoding.

        Args:
            answer: The "#answer" sub-extension
            element: Owning item, named in error messages

        Returns:
            BooleanAnswer or CodedAnswer

        Raises:
            ExtensionInvalidInContext: If the sub-extension is not "#answer"
            ExtensionIncomplete: If a coding has no code
            UnsupportedAnswerType: For any other value kind
        """
        label = element.describe()
        if answer.fragment != "answer":
            raise ExtensionInvalidInContext(
                f"{label} enableWhen expected #answer but got '{answer.url}'",
                element=label,
            )

        if answer.value_boolean is not None:
            return BooleanAnswer(value=answer.value_boolean)

        if answer.value_coding is not None:
            coding = answer.value_coding
            if not coding.code:
                raise ExtensionIncomplete(
                    f"{label} coded answer missing code",
                    element=label,
                )
            return CodedAnswer(system=coding.system, code=coding.code)

        kinds = ", ".join(answer.value_kinds()) or "no value"
        raise UnsupportedAnswerType(
            f"{label} enableWhen answer of type {kinds} is not supported",
            element=label,
        )

    @staticmethod
    def _requirement_from_entry(entry: Extension, element: QuestionnaireItem) -> Requirement:
        """Build one requirement from a single enableWhen extension."""
        label = element.describe()
        question = entry.sub_extension("question")
        answer = entry.sub_extension("answer")

        if answer is None:
            raise ExtensionIncomplete(f"{label} enableWhen has no #answer", element=label)

        question_identifier = question.value_string if question is not None else None
        if not question_identifier:
            raise ExtensionIncomplete(
                f"{label} enableWhen has no #question identifier",
                element=label,
            )

        expected = RequirementExtractor.desired_answer(answer, element)
        return Requirement(question_identifier=question_identifier, expected=expected)
