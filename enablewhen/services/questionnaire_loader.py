"""Questionnaire loader service with caching and validation.

This module loads FHIR Questionnaire definitions from JSON or YAML files,
validates them against Pydantic schemas, and caches the results.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from enablewhen.config import get_settings
from enablewhen.schemas.fhir import Questionnaire
from enablewhen.schemas.task import OrderedTask
from enablewhen.services.task_builder import TaskBuilder
from enablewhen.services.task_validator import TaskValidator
from enablewhen.logging_config import get_logger

logger = get_logger(__name__)

SUPPORTED_SUFFIXES = (".json", ".yaml", ".yml")


class QuestionnaireNotFoundError(Exception):
    """Raised when a questionnaire file is not found."""
    pass


class QuestionnaireValidationError(Exception):
    """Raised when a questionnaire fails parsing or validation."""
    pass


class QuestionnaireLoader:
    """Service for loading and caching questionnaire definitions.

    Questionnaires are read from the questionnaires directory, named after
    their identifier with a .json, .yaml or .yml suffix. JSON is parsed by
    the YAML parser, which accepts it as a subset.
    """

    def __init__(
        self,
        questionnaires_dir: Optional[str] = None,
        builder: Optional[TaskBuilder] = None
    ):
        """Initialize questionnaire loader.

        Args:
            questionnaires_dir: Path to questionnaires directory (defaults to
                the questionnaires_dir setting)
            builder: Task builder used by load_task
        """
        if questionnaires_dir is None:
            questionnaires_dir = get_settings().questionnaires_dir

        self.questionnaires_dir = Path(questionnaires_dir)
        self.builder = builder or TaskBuilder()

        if not self.questionnaires_dir.exists():
            logger.warning(f"Questionnaires directory not found: {self.questionnaires_dir}")

    @lru_cache(maxsize=128)
    def load_questionnaire(self, questionnaire_id: str) -> Questionnaire:
        """Load and validate a questionnaire file.

        Results are cached. Clear cache with clear_cache() if needed.

        Args:
            questionnaire_id: Questionnaire identifier (filename without suffix)

        Returns:
            Validated Questionnaire object

        Raises:
            QuestionnaireNotFoundError: If no matching file exists
            QuestionnaireValidationError: If the file is not a valid questionnaire

        Example:
            >>> loader = QuestionnaireLoader("./questionnaires")
            >>> questionnaire = loader.load_questionnaire("smoking")
            >>> print(questionnaire.title)
            'Smoking History'
        """
        path = self._find_file(questionnaire_id)
        if path is None:
            logger.error(f"Questionnaire file not found: {questionnaire_id}")
            raise QuestionnaireNotFoundError(
                f"Questionnaire '{questionnaire_id}' not found in {self.questionnaires_dir}"
            )

        try:
            with open(path, 'r', encoding='utf-8') as f:
                raw_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Parsing error for {questionnaire_id}: {e}")
            raise QuestionnaireValidationError(
                f"Invalid content in questionnaire '{questionnaire_id}': {e}"
            )
        except OSError as e:
            logger.error(f"Error reading questionnaire file {path}: {e}")
            raise QuestionnaireValidationError(
                f"Error reading questionnaire '{questionnaire_id}': {e}"
            )

        if not isinstance(raw_data, dict):
            raise QuestionnaireValidationError(
                f"Questionnaire '{questionnaire_id}' must be a mapping, "
                f"got {type(raw_data).__name__}"
            )

        try:
            questionnaire = Questionnaire.model_validate(raw_data)
        except ValidationError as e:
            logger.error(f"Validation error for questionnaire {questionnaire_id}: {e}")
            raise QuestionnaireValidationError(
                f"Validation failed for questionnaire '{questionnaire_id}': {e}"
            )

        if questionnaire.id is None:
            questionnaire = questionnaire.model_copy(update={"id": questionnaire_id})

        logger.info(f"Successfully loaded questionnaire: {questionnaire_id}")
        return questionnaire

    def load_task(self, questionnaire_id: str) -> OrderedTask:
        """Load a questionnaire and assemble its ordered task.

        Args:
            questionnaire_id: Questionnaire identifier

        Returns:
            Validated OrderedTask

        Raises:
            QuestionnaireNotFoundError: If no matching file exists
            QuestionnaireValidationError: If the questionnaire or its task is invalid
        """
        questionnaire = self.load_questionnaire(questionnaire_id)
        try:
            task = self.builder.build(questionnaire)
        except ValidationError as e:
            logger.error(f"Cannot build task for {questionnaire_id}: {e}")
            raise QuestionnaireValidationError(
                f"Invalid task structure in questionnaire '{questionnaire_id}': {e}"
            )

        TaskValidator.validate(task)
        return task

    def list_questionnaires(self) -> list[str]:
        """List all available questionnaire IDs.

        Returns:
            Sorted questionnaire IDs (filenames without suffix)
        """
        if not self.questionnaires_dir.exists():
            return []

        questionnaire_ids = {
            path.stem for path in self.questionnaires_dir.iterdir()
            if path.is_file() and path.suffix in SUPPORTED_SUFFIXES
        }

        logger.debug(f"Found {len(questionnaire_ids)} questionnaires: {questionnaire_ids}")
        return sorted(questionnaire_ids)

    def clear_cache(self):
        """Clear the questionnaire cache.

        Useful during development or when files change at runtime.
        """
        self.load_questionnaire.cache_clear()
        logger.info("Questionnaire cache cleared")

    def _find_file(self, questionnaire_id: str) -> Optional[Path]:
        for suffix in SUPPORTED_SUFFIXES:
            path = self.questionnaires_dir / f"{questionnaire_id}{suffix}"
            if path.exists():
                return path
        return None


# Global singleton instance
_loader_instance: Optional[QuestionnaireLoader] = None


def get_questionnaire_loader() -> QuestionnaireLoader:
    """Get global QuestionnaireLoader instance.

    Creates singleton instance on first call.

    Returns:
        Global QuestionnaireLoader instance
    """
    global _loader_instance
    if _loader_instance is None:
        _loader_instance = QuestionnaireLoader()
    return _loader_instance
