# artifact_dao/api/health.py
from __future__ import annotations

"""
Health API for artifact_dao.

Routes
------
- GET /health
    Simple heartbeat endpoint.

- GET /health/summary
    Roles, current rules and counters from the engine.
"""

import time
from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..dao_executor import GovernanceEngine
from .governance import get_engine

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> Dict[str, Any]:
    return {"ok": True, "ts": int(time.time())}


@router.get("/health/summary")
def summary(eng: GovernanceEngine = Depends(get_engine)) -> Dict[str, Any]:
    return {"ok": True, **eng.status()}
