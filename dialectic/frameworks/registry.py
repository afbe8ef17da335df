"""
Framework Registry — Persistent Store of Named Frameworks

Frameworks are registered once and queried many times. Every document
is validated on registration by building its GraphModel, so a stored
framework is always searchable.

Storage: JSONL (append-only, one record or tombstone per line)
Retrieval: by name, with a per-name model cache
Capacity: configurable max frameworks with LRU eviction
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path

from ..argumentation import FactBridge, GraphModel, InvalidModel
from .models import FrameworkRecord

logger = logging.getLogger("dialectic.frameworks")


class FrameworkRegistry:
    """
    Named framework store.

    - Append-only JSONL for auditability
    - Re-registering an identical document only touches it
    - Models are built once per (name, content hash)
    """

    def __init__(
        self,
        storage_path: str = "data/frameworks.jsonl",
        max_entries: int = 1_000,
    ):
        self.storage_path = Path(storage_path)
        self.max_entries = max_entries
        self.bridge = FactBridge()

        self._records: dict[str, FrameworkRecord] = {}
        self._models: dict[str, tuple[str, GraphModel]] = {}

        self._load()

    # ── Public API ──────────────────────────────────────────────

    def register(self, record: FrameworkRecord) -> FrameworkRecord:
        """
        Validate and store a framework. Raises InvalidModel if the
        document does not describe a consistent model.
        """
        model = self.bridge.build_model_from_document(record.document)

        existing = self._records.get(record.name)
        if existing and existing.content_hash == record.content_hash:
            existing.updated_at = time.time()
            if record.description:
                existing.description = record.description
            self._persist(existing, mode="update")
            return existing

        if not existing and len(self._records) >= self.max_entries:
            self._evict_lru()

        if existing:
            record.created_at = existing.created_at
        self._records[record.name] = record
        self._models[record.name] = (record.content_hash, model)
        self._persist(record, mode="append")

        logger.info(
            f"Registered framework {record.name!r} "
            f"({len(model.arguments())} arguments, {len(model.attacks())} attacks)"
        )
        return record

    def get(self, name: str) -> FrameworkRecord | None:
        return self._records.get(name)

    def model(self, name: str) -> GraphModel:
        """GraphModel of a registered framework. Raises KeyError if unknown."""
        record = self._records.get(name)
        if record is None:
            raise KeyError(name)

        record.query_count += 1
        record.updated_at = time.time()

        cached = self._models.get(name)
        if cached and cached[0] == record.content_hash:
            return cached[1]

        model = self.bridge.build_model_from_document(record.document)
        self._models[name] = (record.content_hash, model)
        return model

    def remove(self, name: str) -> bool:
        record = self._records.pop(name, None)
        self._models.pop(name, None)
        if record is None:
            return False
        self._persist(record, mode="delete")
        logger.info(f"Removed framework {name!r}")
        return True

    def list_frameworks(self) -> list[dict]:
        return [r.summary() for r in sorted(self._records.values(), key=lambda r: r.name)]

    @property
    def stats(self) -> dict:
        return {
            "total_frameworks": len(self._records),
            "cached_models": len(self._models),
            "storage_path": str(self.storage_path),
        }

    # ── Internal Methods ────────────────────────────────────────

    def _evict_lru(self) -> None:
        """Evict the least recently used framework."""
        if not self._records:
            return

        oldest = min(self._records, key=lambda n: self._records[n].updated_at)
        self.remove(oldest)
        logger.debug(f"Evicted framework {oldest!r}")

    def _persist(self, record: FrameworkRecord, mode: str = "append") -> None:
        """Write record to JSONL storage."""
        self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.storage_path, "a") as f:
            line = record.to_dict()
            line["_mode"] = mode
            f.write(json.dumps(line) + "\n")

    def _load(self) -> None:
        """Replay JSONL storage on startup."""
        if not self.storage_path.exists():
            logger.info(f"Framework registry: no existing store at {self.storage_path}")
            return

        loaded = 0
        with open(self.storage_path, "r") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    data = json.loads(line)
                    mode = data.pop("_mode", "append")
                    data.pop("content_hash", None)
                    record = FrameworkRecord.from_dict(data)
                except (json.JSONDecodeError, KeyError, ValueError) as e:
                    logger.warning(f"Skipping malformed framework record: {e}")
                    continue

                if mode == "delete":
                    self._records.pop(record.name, None)
                else:
                    self._records[record.name] = record
                loaded += 1

        # A hand-edited or older store may hold documents that no longer build.
        for name, record in list(self._records.items()):
            try:
                model = self.bridge.build_model_from_document(record.document)
            except (InvalidModel, KeyError, TypeError, AttributeError) as e:
                logger.warning(f"Dropping stored framework {name!r}: {e}")
                del self._records[name]
                continue
            self._models[name] = (record.content_hash, model)

        logger.info(
            f"Framework registry replayed {loaded} records, "
            f"{len(self._records)} frameworks active"
        )
