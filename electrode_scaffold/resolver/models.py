"""Pydantic v2 models for configuration resolution.

Defines the enumerations shared by every stage, the parsed command-line
options, and the two shapes of project configuration: the ``PartialConfig``
that accumulates values while sources are merged, and the frozen
``ResolvedConfig`` the planner consumes.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class ServerType(str, Enum):
    """Server framework for the generated application."""
    HAPI = "HapiJS"
    EXPRESS = "ExpressJS"
    KOA = "KoaJS"


class QuoteStyle(str, Enum):
    """String quote style enforced by the generated lint ruleset."""
    DOUBLE = '"'
    SINGLE = "'"


# Order in which unresolved fields are prompted.
PROMPT_ORDER: tuple[str, ...] = (
    "name",
    "description",
    "homepage",
    "server_type",
    "author_name",
    "author_email",
    "author_url",
    "keywords",
    "pwa",
    "auto_ssr",
    "quote_style",
    "create_directory",
)


def unique_keywords(words: list[Any] | None) -> list[str]:
    """Drop falsy entries and duplicates, keeping first-seen order."""
    seen: list[str] = []
    for word in words or []:
        if word and str(word) not in seen:
            seen.append(str(word))
    return seen


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

class AuthorInfo(BaseModel):
    """Author identity split into the npm person fields."""
    name: Optional[str] = None
    email: Optional[str] = None
    url: Optional[str] = None


class ScaffoldOptions(BaseModel):
    """Already-parsed command-line options."""

    ci: bool = Field(default=True, description="Include a CI config")
    license: bool = Field(default=True, description="Include a license")
    name: Optional[str] = Field(default=None, description="Project name")
    github_account: Optional[str] = Field(
        default=None, description="GitHub username or organization"
    )
    project_root: str = Field(
        default="server", description="Relative path to the project code root"
    )
    readme: Optional[str] = Field(
        default=None, description="Content to insert in the README.md file"
    )
    server_type: Optional[ServerType] = Field(default=None)
    skip_install: bool = Field(default=False)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class PartialConfig(BaseModel):
    """Configuration under construction; ``None`` means unresolved."""

    name: Optional[str] = None
    description: Optional[str] = None
    homepage: Optional[str] = None
    author_name: Optional[str] = None
    author_email: Optional[str] = None
    author_url: Optional[str] = None
    server_type: Optional[ServerType] = None
    pwa: Optional[bool] = None
    auto_ssr: Optional[bool] = None
    quote_style: Optional[QuoteStyle] = None
    create_directory: Optional[bool] = None
    keywords: Optional[list[str]] = None
    github_account: Optional[str] = None

    def resolved(self) -> dict[str, Any]:
        """Return only the fields that have a value."""
        return self.model_dump(exclude_none=True)

    def unresolved(self, fields: tuple[str, ...] = PROMPT_ORDER) -> list[str]:
        """Return the names in *fields* that are still ``None``, in order."""
        return [f for f in fields if getattr(self, f) is None]

    def overlay(self, values: dict[str, Any]) -> "PartialConfig":
        """Return a copy with every non-``None`` entry of *values* applied."""
        update = {k: v for k, v in values.items() if v is not None}
        return self.model_validate({**self.resolved(), **update})


class ResolvedConfig(BaseModel):
    """The frozen set of decisions a generation plan is built from."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    homepage: str = ""
    author_name: str = ""
    author_email: str = ""
    author_url: str = ""
    server_type: ServerType = ServerType.HAPI
    pwa: bool = False
    auto_ssr: bool = False
    quote_style: QuoteStyle = QuoteStyle.DOUBLE
    create_directory: bool = False
    keywords: list[str] = Field(default_factory=list)
    github_account: str = ""

    @field_validator("keywords", mode="before")
    @classmethod
    def _dedupe_keywords(cls, value: Any) -> list[str]:
        return unique_keywords(value)

    @classmethod
    def from_partial(cls, partial: PartialConfig) -> "ResolvedConfig":
        """Freeze a partial configuration; missing fields take hard defaults."""
        return cls.model_validate(partial.resolved())

    @property
    def is_single_quote(self) -> bool:
        return self.quote_style is QuoteStyle.SINGLE
