"""Pydantic schemas for the rule-bearing fragment of a FHIR Questionnaire.

Only what is needed to assemble a task is modelled: the item tree with its
link IDs and texts, and the extensions that carry enableWhen rules. Unknown
FHIR properties are kept as extras and otherwise ignored. Numbers are
accepted where strings are expected, since YAML reads unquoted linkIds such
as 1.1 as numbers.
"""

from typing import Literal, Optional
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, StrictBool

ENABLE_WHEN_URL = "http://hl7.org/fhir/StructureDefinition/questionnaire-enableWhen"

_KNOWN_VALUE_FIELDS = {
    "value_string": "valueString",
    "value_boolean": "valueBoolean",
    "value_coding": "valueCoding",
}


class Coding(BaseModel):
    """A FHIR Coding.

    Attributes:
        system: Code system URI (optional)
        code: Code within the system (optional in FHIR, required for answers)
        display: Human-readable representation
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow", coerce_numbers_to_str=True)

    system: Optional[str] = None
    code: Optional[str] = None
    display: Optional[str] = None


class Extension(BaseModel):
    """A FHIR Extension, possibly nesting further extensions.

    Value kinds other than string, boolean and coding are preserved as
    pydantic extras so they can be reported by name.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow", coerce_numbers_to_str=True)

    url: str = Field(..., min_length=1)
    value_string: Optional[str] = Field(None, alias="valueString")
    value_boolean: Optional[StrictBool] = Field(None, alias="valueBoolean")
    value_coding: Optional[Coding] = Field(None, alias="valueCoding")
    extension: Optional[list["Extension"]] = None

    @property
    def fragment(self) -> str:
        """URL fragment, e.g. "question" for a url of "#question"."""
        return urlsplit(self.url).fragment

    def value_kinds(self) -> list[str]:
        """Names of all value[x] properties present on this extension."""
        kinds = [
            alias for name, alias in _KNOWN_VALUE_FIELDS.items()
            if getattr(self, name) is not None
        ]
        for key, value in (self.model_extra or {}).items():
            if key.startswith("value") and value is not None:
                kinds.append(key)
        return kinds

    def sub_extension(self, fragment: str) -> Optional["Extension"]:
        """First nested extension whose URL fragment matches."""
        for sub in self.extension or []:
            if sub.fragment == fragment:
                return sub
        return None


class QuestionnaireItem(BaseModel):
    """A Questionnaire item: a question, a display text or a group.

    Attributes:
        link_id: Identifier unique within the questionnaire
        text: Question or display text
        type: FHIR item type (group, display, boolean, choice, ...)
        extension: Extensions attached to the item
        item: Nested items
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow", coerce_numbers_to_str=True)

    link_id: Optional[str] = Field(None, alias="linkId")
    text: Optional[str] = None
    type: Optional[str] = None
    extension: Optional[list[Extension]] = None
    item: Optional[list["QuestionnaireItem"]] = None

    def extensions_for_url(self, url: str) -> Optional[list[Extension]]:
        """All extensions with the given URL, None if there are none."""
        found = [ext for ext in self.extension or [] if ext.url == url]
        return found or None

    def describe(self) -> str:
        """Short description used in diagnostics."""
        if self.link_id:
            return f"item '{self.link_id}'"
        return f"unidentified {self.type or 'item'}"

    def __str__(self) -> str:
        return self.describe()


class Questionnaire(BaseModel):
    """A FHIR Questionnaire resource.

    Attributes:
        resource_type: Always "Questionnaire"
        id: Logical resource id
        title: Human-readable title
        status: Publication status
        item: Top-level items
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow", coerce_numbers_to_str=True)

    resource_type: Literal["Questionnaire"] = Field("Questionnaire", alias="resourceType")
    id: Optional[str] = None
    title: Optional[str] = None
    status: Optional[str] = None
    item: list[QuestionnaireItem] = Field(default_factory=list)
