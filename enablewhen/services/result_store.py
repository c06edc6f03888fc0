"""Recorded answers, keyed by step identifier.

The navigator only ever reads answers through the ResultStore protocol. The
in-memory store below is the writer side used by whatever records answers
(a presentation layer, a test).
"""

from typing import Iterable, Mapping, Optional, Protocol, Sequence

from enablewhen.schemas.answer import AnswerValue, CodedAnswer
from enablewhen.logging_config import get_logger

logger = get_logger(__name__)


class ResultStore(Protocol):
    """Read-only view of the answers recorded so far."""

    def get_answers(self, step_identifier: str) -> Sequence[AnswerValue]:
        """Answers recorded for a step, empty if it has not been answered."""
        ...


class InMemoryResultStore:
    """Dictionary-backed answer store.

    A step may hold several answers (e.g. a multiple-choice question).
    """

    def __init__(self, answers: Optional[Mapping[str, Iterable[AnswerValue]]] = None):
        """Initialize the store.

        Args:
            answers: Optional initial answers, step identifier -> answers
        """
        self._answers: dict[str, tuple[AnswerValue, ...]] = {}
        for step_identifier, values in (answers or {}).items():
            self._answers[step_identifier] = tuple(values)

    def get_answers(self, step_identifier: str) -> Sequence[AnswerValue]:
        return self._answers.get(step_identifier, ())

    def record(self, step_identifier: str, *answers: AnswerValue) -> None:
        """Append answers for a step.

        Example:
            >>> store = InMemoryResultStore()
            >>> store.record("smoker", BooleanAnswer(value=True))
            >>> store.get_answers("smoker")
            (BooleanAnswer(kind='boolean', value=True),)
        """
        self._answers[step_identifier] = self.get_answers(step_identifier) + tuple(answers)
        logger.debug(f"Recorded {len(answers)} answer(s) for step {step_identifier}")

    def record_choice(self, step_identifier: str, *tokens: str) -> None:
        """Append choice answers given as "system|code" tokens.

        Raises:
            ValueError: If a token has no code (nothing is recorded then)
        """
        self.record(step_identifier, *(CodedAnswer.from_token(token) for token in tokens))

    def replace(self, step_identifier: str, answers: Iterable[AnswerValue]) -> None:
        """Overwrite all answers of a step, e.g. when a question is re-answered."""
        self._answers[step_identifier] = tuple(answers)

    def clear(self, step_identifier: str) -> None:
        """Forget the answers of a step."""
        self._answers.pop(step_identifier, None)

    def snapshot(self) -> "InMemoryResultStore":
        """Detached copy that later writes to this store do not affect."""
        return InMemoryResultStore(self._answers)

    def __contains__(self, step_identifier: str) -> bool:
        return bool(self._answers.get(step_identifier))

    def __len__(self) -> int:
        return len(self._answers)
