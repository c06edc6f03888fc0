"""Pydantic schemas for comparable answer values.

An answer is either a boolean or a coded value. The two kinds form a closed,
discriminated union so that comparisons never have to guess at the type of a
loosely-typed answer object.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# System assumed for codings that do not name one
DEFAULT_CODING_SYSTEM = "https://fhir.smarthealthit.org"

# Separator between system and code in choice tokens ("system|code")
CODING_TOKEN_SEPARATOR = "|"


class BooleanAnswer(BaseModel):
    """A yes/no answer.

    Attributes:
        kind: Discriminator, always "boolean"
        value: The recorded or required flag
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["boolean"] = "boolean"
    value: bool


class CodedAnswer(BaseModel):
    """An answer drawn from a code system, e.g. a choice option.

    A missing system is replaced by DEFAULT_CODING_SYSTEM when the answer is
    created, so two codings that differ only in an omitted system are equal.

    Attributes:
        kind: Discriminator, always "coded"
        system: Code system URI
        code: Code within the system
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["coded"] = "coded"
    system: str = DEFAULT_CODING_SYSTEM
    code: str = Field(..., min_length=1)

    @field_validator("system", mode="before")
    @classmethod
    def default_system(cls, v):
        """Normalize a missing or empty system to the default system."""
        if v is None or v == "":
            return DEFAULT_CODING_SYSTEM
        return v

    @property
    def token(self) -> str:
        """Render as a single "system|code" choice token.

        Example:
            >>> CodedAnswer(system="http://x", code="c1").token
            'http://x|c1'
        """
        return f"{self.system}{CODING_TOKEN_SEPARATOR}{self.code}"

    @classmethod
    def from_token(cls, token: str) -> "CodedAnswer":
        """Parse a "system|code" choice token.

        A bare code uses the default system.

        Raises:
            ValueError: If the token has no code
        """
        system, sep, code = token.rpartition(CODING_TOKEN_SEPARATOR)
        if not sep:
            system, code = "", token
        if not code:
            raise ValueError(f"Choice token '{token}' has no code")
        return cls(system=system or None, code=code)


AnswerValue = Annotated[
    Union[BooleanAnswer, CodedAnswer],
    Field(discriminator="kind"),
]
