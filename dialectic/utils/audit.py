"""
utils/audit.py — Query Audit Logging

Append-only log of acceptance queries with hash chaining for tamper
detection. Each entry links to the previous via SHA-256, so the record
of which claims were proven (and by how many dialogues) can be
verified after the fact.

Entries are written to an append-only JSONL file and echoed to the
``dialectic.audit`` logger. Searches run in the server's threadpool, so
chaining and appending happen under one lock: file order is chain order.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import threading
from datetime import datetime, timezone
from pathlib import Path

log = logging.getLogger("dialectic.audit")

AUDIT_LOG_PATH = os.environ.get("DIALECTIC_AUDIT_LOG", "audit.jsonl")
_previous_hash: str | None = None
_chain_lock = threading.Lock()


def log_query(
    request_id: str,
    framework: str,
    game: str,
    claim: str,
    accepted: bool,
    dialogues_returned: int = 0,
    limit: int = 0,
    search_ms: float = 0.0,
) -> dict:
    """
    Log an acceptance query to the audit trail.
    Returns the log entry dict.
    """
    global _previous_hash

    with _chain_lock:
        if _previous_hash is None:
            _previous_hash = _last_entry_hash()

        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "request_id": request_id,
            "framework": framework,
            "game": game,
            "claim": claim,
            "accepted": accepted,
            "dialogues_returned": dialogues_returned,
            "limit": limit,
            "search_ms": search_ms,
            "hash_chain_previous": _previous_hash,
        }

        entry_bytes = json.dumps(entry, sort_keys=True).encode()
        entry_hash = hashlib.sha256(entry_bytes).hexdigest()[:16]
        entry["entry_hash"] = entry_hash
        _previous_hash = entry_hash

        try:
            with open(AUDIT_LOG_PATH, "a") as f:
                f.write(json.dumps(entry) + "\n")
        except OSError as e:
            log.error(f"Failed to write audit log: {e}")

    log.info(
        f"QUERY | {request_id} | {framework} | {game} | claim={claim} "
        f"accepted={accepted} dialogues={dialogues_returned}"
    )

    return entry


def _last_entry_hash() -> str:
    """Hash of the newest entry on disk, so a restarted server extends the chain."""
    recent = get_recent_queries(limit=1)
    if recent and "entry_hash" in recent[0]:
        return recent[0]["entry_hash"]
    return "genesis"


def verify_chain(entries: list[dict]) -> bool:
    """Check that oldest-first ``entries`` form an unbroken hash chain."""
    previous = None
    for entry in entries:
        body = {k: v for k, v in entry.items() if k != "entry_hash"}
        digest = hashlib.sha256(json.dumps(body, sort_keys=True).encode()).hexdigest()[:16]
        if digest != entry.get("entry_hash"):
            return False
        if previous is not None and entry.get("hash_chain_previous") != previous:
            return False
        previous = entry["entry_hash"]
    return True


def get_recent_queries(limit: int = 50) -> list[dict]:
    """Read recent queries from the audit log file, newest first."""
    try:
        path = Path(AUDIT_LOG_PATH)
        if not path.exists():
            return []

        lines = path.read_text().strip().split("\n")
        entries = []
        for line in lines[-limit:]:
            try:
                entries.append(json.loads(line))
            except json.JSONDecodeError:
                continue
        return list(reversed(entries))
    except OSError:
        return []
