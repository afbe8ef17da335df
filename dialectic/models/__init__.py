"""
models — API Request/Response Schemas

Pydantic models for the Dialectic HTTP API. Framework documents use
string identifiers for arguments, states and properties; the engines
themselves accept any hashable identifier.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


# ── Enums ────────────────────────────────────────────────────────

class GameName(str, Enum):
    SKEPTICAL = "skeptical"
    CREDULOUS = "credulous"
    ABDUCTIVE = "abductive"
    WEAK = "weak"


# ── Framework Documents ──────────────────────────────────────────

class FrameworkStateSpec(BaseModel):
    name: str
    expansion_of: Optional[str] = None
    arguments: list[str] = Field(default_factory=list)
    attacks: list[tuple[str, str]] = Field(default_factory=list)


class FrameworkDocument(BaseModel):
    """Declared facts of one framework."""
    arguments: list[str] = Field(default_factory=list)
    attacks: list[tuple[str, str]] = Field(default_factory=list)
    states: list[FrameworkStateSpec] = Field(default_factory=list)
    properties: list[str] = Field(default_factory=list)
    argument_properties: dict[str, list[str]] = Field(default_factory=dict)
    weights: dict[str, int] = Field(default_factory=dict)
    motivational_states: list[list[str]] = Field(default_factory=list)

    def to_document(self) -> dict:
        return self.model_dump(mode="json")


class RegisterFrameworkRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    framework: FrameworkDocument

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not all(c.isalnum() or c in "-_." for c in v):
            raise ValueError("Name may only contain letters, digits, '-', '_' and '.'")
        return v


class DialogueRequest(BaseModel):
    """Query: does a winning dialogue exist for ``claim``?"""
    claim: str = Field(..., min_length=1)
    framework_name: Optional[str] = None
    framework: Optional[FrameworkDocument] = None
    limit: int = Field(default=10, ge=1, le=1000)
    initial_state: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def exactly_one_framework(self) -> DialogueRequest:
        if (self.framework_name is None) == (self.framework is None):
            raise ValueError("Provide exactly one of 'framework_name' or 'framework'")
        return self


# ── Response Models ──────────────────────────────────────────────

class MoveRecord(BaseModel):
    speaker: str
    kind: str
    attacker: Optional[str] = None
    target: Optional[str] = None
    properties: list[str] = Field(default_factory=list)
    states: list[str] = Field(default_factory=list)


class DialogueRecord(BaseModel):
    claim: str
    game: GameName
    moves: list[MoveRecord] = Field(default_factory=list)
    trace: list[list] = Field(default_factory=list)
    active_states: Optional[list[str]] = None
    motivational_state: Optional[list[str]] = None
    disabled: Optional[list[list[str]]] = None
    enabled: Optional[list[list[str]]] = None


class DialogueResponse(BaseModel):
    request_id: str = Field(default_factory=lambda: f"dlg_req_{uuid.uuid4().hex[:8]}")
    game: GameName
    claim: str
    framework: str
    accepted: bool
    exhausted: bool = False
    dialogues: list[DialogueRecord] = Field(default_factory=list)
    search_ms: float = 0.0


class FrameworkInfo(BaseModel):
    name: str
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    content_hash: str
    num_arguments: int = 0
    num_attacks: int = 0
    num_states: int = 0
    num_properties: int = 0
    query_count: int = 0
    updated_at: float = 0.0


class HealthComponent(BaseModel):
    status: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "1.0.0"
    uptime_seconds: int = 0
    components: dict[str, HealthComponent] = Field(default_factory=dict)
