"""Pydantic schemas for the chat pipeline and its stored records."""

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

Role = Literal["user", "assistant", "system"]


# ============================================================================
# Stored records
# ============================================================================


class OwnerProfile(BaseModel):
    """One represented individual (``owners`` table)."""

    owner_id: str = Field(..., description="Stable owner identifier")
    name: str = Field(..., min_length=1)
    age: int | None = None
    hobbies: list[str] = Field(default_factory=list)
    values: str = ""
    country: str | None = None
    birth: str | None = None

    @field_validator("owner_id", mode="before")
    @classmethod
    def _coerce_owner_id(cls, value: Any) -> Any:
        # owner_id is an integer column in some deployments
        return str(value) if isinstance(value, int) else value

    @field_validator("hobbies", mode="before")
    @classmethod
    def _null_hobbies(cls, value: Any) -> Any:
        return value or []


class Project(BaseModel):
    """Project belonging to an owner (``projects`` table)."""

    owner_id: str
    title: str
    description: str = ""
    tech_stack: list[str] = Field(default_factory=list)

    @field_validator("owner_id", mode="before")
    @classmethod
    def _coerce_owner_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @field_validator("tech_stack", mode="before")
    @classmethod
    def _null_stack(cls, value: Any) -> Any:
        return value or []


class Experience(BaseModel):
    """Work experience belonging to an owner (``experiences`` table)."""

    owner_id: str
    company: str
    position: str = ""
    period: str = ""
    description: str = ""

    @field_validator("owner_id", mode="before")
    @classmethod
    def _coerce_owner_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value


class KnowledgeSnippet(BaseModel):
    """Chunk of reference text with keyword tags (``pdf_chunks`` table)."""

    content: str
    keywords: list[str] = Field(default_factory=list)

    @field_validator("keywords", mode="before")
    @classmethod
    def _null_keywords(cls, value: Any) -> Any:
        return value or []


class ConversationTurn(BaseModel):
    """Persisted chat message (``chat_history`` table)."""

    role: Role
    content: str
    owner_id: str
    created_at: str | None = None

    @field_validator("owner_id", mode="before")
    @classmethod
    def _coerce_owner_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value


# ============================================================================
# Derived values
# ============================================================================


@dataclass(frozen=True)
class ScoredSnippet:
    """Snippet with its relevance score for one query."""

    snippet: KnowledgeSnippet
    score: int


@dataclass
class MentionedPerson:
    """Another profile named in a user message, resolved for grounding only."""

    name: str
    owner: OwnerProfile
    honorific: str
    projects: list[Project]
    experiences: list[Experience]


# ============================================================================
# HTTP bodies
# ============================================================================


class ChatMessage(BaseModel):
    """A single chat message from the client."""

    role: Role
    content: str


class ChatRequest(BaseModel):
    """Request to chat with the owner's clone."""

    messages: list[ChatMessage] = Field(..., min_length=1)


class ChatResponse(BaseModel):
    """Generated reply."""

    response: str


class ErrorResponse(BaseModel):
    """Generic failure body."""

    error: str
