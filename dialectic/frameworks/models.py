"""
Framework Registry Models

A registered framework is a named framework document (see
``dialectic.argumentation.facts``) plus bookkeeping used by the
registry for deduplication and eviction.
"""

from __future__ import annotations

import hashlib
import json
import time
from dataclasses import dataclass, field


@dataclass
class FrameworkRecord:
    """A named, validated framework document."""
    name: str
    document: dict
    description: str = ""
    tags: list[str] = field(default_factory=list)
    created_at: float = field(default_factory=time.time)
    updated_at: float = field(default_factory=time.time)
    query_count: int = 0

    @property
    def content_hash(self) -> str:
        raw = json.dumps(self.document, sort_keys=True, default=str)
        return hashlib.sha256(raw.encode()).hexdigest()[:16]

    def summary(self) -> dict:
        doc = self.document
        return {
            "name": self.name,
            "description": self.description,
            "tags": self.tags,
            "content_hash": self.content_hash,
            "num_arguments": len(doc.get("arguments", [])),
            "num_attacks": len(doc.get("attacks", [])),
            "num_states": len(doc.get("states", [])),
            "num_properties": len(doc.get("properties", [])),
            "query_count": self.query_count,
            "updated_at": self.updated_at,
        }

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "document": self.document,
            "description": self.description,
            "tags": self.tags,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "query_count": self.query_count,
            "content_hash": self.content_hash,
        }

    @classmethod
    def from_dict(cls, data: dict) -> FrameworkRecord:
        return cls(
            name=data["name"],
            document=data["document"],
            description=data.get("description", ""),
            tags=data.get("tags", []),
            created_at=data.get("created_at", time.time()),
            updated_at=data.get("updated_at", time.time()),
            query_count=data.get("query_count", 0),
        )
