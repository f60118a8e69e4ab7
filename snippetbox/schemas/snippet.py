"""
Snippetbox — Pydantic Schemas
===============================

What:  The immutable record handed from the storage model to the handlers,
       and the validated shape of the create-snippet form.
How:   `SnippetRecord` is built from ORM rows (`from_attributes`);
       `SnippetCreateForm` validates raw form strings and raises
       pydantic's ValidationError, which the handler converts into the
       application's own ValidationError with per-field messages.

Schemas are kept separate from the SQLAlchemy model so that no caller
outside SnippetModel can hold (or mutate) a live ORM row.
"""

from datetime import datetime
from typing import Dict, FrozenSet

from pydantic import BaseModel, ConfigDict, Field, field_validator

from snippetbox.models.snippet import TITLE_MAX_LENGTH

# Day counts offered by the create form
PERMITTED_EXPIRES_DAYS: FrozenSet[int] = frozenset({1, 7, 365})
DEFAULT_EXPIRES_DAYS = 365


class SnippetRecord(BaseModel):
    """
    What:  Read-only view of one stored snippet.
    Who:   Returned by SnippetModel.get() and SnippetModel.latest(); consumed
           by the templates.
    """
    id: int = Field(description="Identifier assigned by storage")
    title: str
    content: str
    created: datetime = Field(description="Insertion time (UTC)")
    expires: datetime = Field(description="Expiry time (UTC)")

    model_config = ConfigDict(from_attributes=True, frozen=True)


class SnippetCreateForm(BaseModel):
    """
    What:  Validated POST /snippet/create body.

    Rules:
        title:    not blank, at most 100 characters
        content:  not blank
        expires:  one of 1, 7 or 365 (days)
    """
    title: str = ""
    content: str = ""
    expires: int = DEFAULT_EXPIRES_DAYS

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("This field cannot be blank")
        if len(v) > TITLE_MAX_LENGTH:
            raise ValueError(
                f"This field cannot be more than {TITLE_MAX_LENGTH} characters long"
            )
        return v

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("This field cannot be blank")
        return v

    @field_validator("expires", mode="before")
    @classmethod
    def validate_expires(cls, v: object) -> int:
        try:
            days = int(v)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            raise ValueError("This field must equal 1, 7 or 365") from None
        if days not in PERMITTED_EXPIRES_DAYS:
            raise ValueError("This field must equal 1, 7 or 365")
        return days


class FormState(BaseModel):
    """
    What:  What the create page re-displays: submitted values plus errors.
    Why:   A rejected submission should not make the user retype everything.
    """
    title: str = ""
    content: str = ""
    expires: str = str(DEFAULT_EXPIRES_DAYS)
    field_errors: Dict[str, str] = Field(default_factory=dict)
