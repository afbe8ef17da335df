"""
app.py — Dialectic: Dialogue Games over HTTP

Answers "is this claim accepted?" by searching for a dialogue the
proponent wins, and returns those dialogues as proofs.

Games:
  skeptical — grounded semantics
  credulous — preferred/complete semantics
  abductive — which framework states explain skeptical acceptance
  weak      — weak acceptance under property-based preferences

Frameworks are either registered by name (persisted in the JSONL
registry) or sent inline with a query.

Usage:
  dialectic-server
  # or: python -m dialectic.app
"""

from __future__ import annotations

import logging
import os
import time
from contextlib import asynccontextmanager
from itertools import islice

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from dialectic import __version__
from dialectic.argumentation import (
    AbductiveDialogEngine,
    DialogEngine,
    FactBridge,
    GraphModel,
    InvalidModel,
    PropertyBasedDialogEngine,
)
from dialectic.frameworks import FrameworkRecord, FrameworkRegistry
from dialectic.middleware import RateLimiter
from dialectic.models import (
    DialogueRecord,
    DialogueRequest,
    DialogueResponse,
    FrameworkInfo,
    GameName,
    HealthComponent,
    HealthResponse,
    RegisterFrameworkRequest,
)
from dialectic.utils.audit import get_recent_queries, log_query, verify_chain

# ── Logging ──────────────────────────────────────────────────────

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(name)-14s │ %(levelname)-7s │ %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("dialectic.server")

# ── Configuration ────────────────────────────────────────────────

REGISTRY_PATH = os.environ.get("DIALECTIC_REGISTRY_PATH", "data/frameworks.jsonl")
MAX_DIALOGUES = int(os.environ.get("DIALECTIC_MAX_DIALOGUES", "100"))
RATE_LIMIT_ENABLED = os.environ.get("DIALECTIC_RATE_LIMIT", "true").lower() == "true"
HOST = os.environ.get("DIALECTIC_HOST", "0.0.0.0")
PORT = int(os.environ.get("DIALECTIC_PORT", "8787"))
SERVER_START_TIME = time.time()

registry = FrameworkRegistry(storage_path=REGISTRY_PATH)
bridge = FactBridge()


# ── App Lifecycle ────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("=" * 60)
    log.info("  Dialectic — dialogue games for argumentation")
    log.info(f"  Registry:      {REGISTRY_PATH}")
    log.info(f"  Frameworks:    {registry.stats['total_frameworks']}")
    log.info(f"  Max dialogues: {MAX_DIALOGUES}")
    log.info(f"  Rate limit:    {'on' if RATE_LIMIT_ENABLED else 'off'}")
    log.info("=" * 60)

    yield

    log.info("Dialectic server stopped.")


# ── FastAPI App ──────────────────────────────────────────────────

app = FastAPI(
    title="Dialectic API",
    description="Skeptical, credulous, abductive and weak acceptance by dialogue games.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)
app.add_middleware(RateLimiter, enabled=RATE_LIMIT_ENABLED)


# ═════════════════════════════════════════════════════════════════
#  ENDPOINTS
# ═════════════════════════════════════════════════════════════════


# ── Health ───────────────────────────────────────────────────────

@app.get("/v1/health", response_model=HealthResponse, tags=["System"])
async def health():
    stats = registry.stats
    components = {
        "registry": HealthComponent(
            status="ok",
            detail=f"{stats['total_frameworks']} frameworks at {stats['storage_path']}",
        ),
        "audit": HealthComponent(status="ok", detail="logging to audit.jsonl"),
    }
    return HealthResponse(
        status="ok",
        version=__version__,
        uptime_seconds=int(time.time() - SERVER_START_TIME),
        components=components,
    )


# ── Framework Registry ───────────────────────────────────────────

@app.post("/v1/frameworks", response_model=FrameworkInfo, tags=["Frameworks"])
async def register_framework(req: RegisterFrameworkRequest):
    record = FrameworkRecord(
        name=req.name,
        document=req.framework.to_document(),
        description=req.description,
        tags=req.tags,
    )
    try:
        stored = registry.register(record)
    except InvalidModel as e:
        log.warning(f"Rejected framework {req.name!r}: {e}")
        raise HTTPException(status_code=400, detail=f"Invalid framework: {e}")
    return FrameworkInfo(**stored.summary())


@app.get("/v1/frameworks", tags=["Frameworks"])
async def list_frameworks():
    frameworks = registry.list_frameworks()
    return {"frameworks": frameworks, "total": len(frameworks)}


@app.get("/v1/frameworks/{name}", tags=["Frameworks"])
async def get_framework(name: str):
    record = registry.get(name)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Unknown framework: {name}")
    return {**record.summary(), "framework": record.document}


@app.delete("/v1/frameworks/{name}", tags=["Frameworks"])
async def delete_framework(name: str):
    if not registry.remove(name):
        raise HTTPException(status_code=404, detail=f"Unknown framework: {name}")
    return {"removed": name}


# ── Dialogue Games ───────────────────────────────────────────────

@app.post("/v1/dialogues/{game}", response_model=DialogueResponse, tags=["Dialogues"])
def find_dialogues(game: GameName, req: DialogueRequest):
    """
    Search for dialogues won by the proponent. At most ``limit``
    dialogues are returned; ``accepted`` is true iff at least one exists.
    """
    limit = min(req.limit, MAX_DIALOGUES)

    if req.framework_name is not None:
        label = req.framework_name
        try:
            model = registry.model(req.framework_name)
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Unknown framework: {label}")
        except InvalidModel as e:
            log.error(f"Stored framework {label!r} no longer builds: {e}")
            raise HTTPException(status_code=400, detail=f"Invalid framework: {e}")
    else:
        label = "inline"
        try:
            model = bridge.build_model_from_document(req.framework.to_document())
        except InvalidModel as e:
            raise HTTPException(status_code=400, detail=f"Invalid framework: {e}")

    start = time.perf_counter()
    try:
        results = _search(game, model, req.claim, tuple(req.initial_state))
        found = list(islice(results, limit + 1))
    except InvalidModel as e:
        raise HTTPException(status_code=400, detail=str(e))
    elapsed = round((time.perf_counter() - start) * 1000, 3)

    exhausted = len(found) <= limit
    found = found[:limit]

    response = DialogueResponse(
        game=game,
        claim=req.claim,
        framework=label,
        accepted=bool(found),
        exhausted=exhausted,
        dialogues=[DialogueRecord.model_validate(d.to_dict()) for d in found],
        search_ms=elapsed,
    )

    log_query(
        request_id=response.request_id,
        framework=label,
        game=game.value,
        claim=req.claim,
        accepted=response.accepted,
        dialogues_returned=len(found),
        limit=limit,
        search_ms=elapsed,
    )
    return response


def _search(game: GameName, model: GraphModel, claim: str, initial_state: tuple):
    """Lazy iterator of dialogues (or explanations) for one game."""
    if game == GameName.SKEPTICAL:
        return DialogEngine(model).skeptical_dialogues(claim)
    if game == GameName.CREDULOUS:
        return DialogEngine(model).credulous_dialogues(claim)
    if game == GameName.ABDUCTIVE:
        return AbductiveDialogEngine(model).abductive_explanations(claim)
    return PropertyBasedDialogEngine(model, initial_state).weak_acceptance_dialogues(claim)


# ── Audit Log ────────────────────────────────────────────────────

@app.get("/v1/audit/queries", tags=["Audit"])
async def list_audit_queries(limit: int = 50):
    queries = get_recent_queries(limit=min(limit, 200))
    return {
        "queries": queries,
        "total": len(queries),
        "chain_ok": verify_chain(list(reversed(queries))),
    }


# ── Entrypoint ───────────────────────────────────────────────────

def main():
    uvicorn.run(
        "dialectic.app:app",
        host=HOST,
        port=PORT,
        log_level="info",
        reload=False,
    )


if __name__ == "__main__":
    main()
