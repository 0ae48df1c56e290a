# artifact_dao/dao_runtime/__init__.py
from __future__ import annotations

"""
artifact_dao runtime package (lazy import)

The governance state machine lives in the submodules below. Nothing is
imported eagerly; attribute access loads the module on first use
(PEP 562), so `from artifact_dao import dao_runtime` stays cheap.
"""

from importlib import import_module
from typing import Any

__all__ = [
    "errors",
    "events",
    "rules",
    "snapshot",
    "suggestions",
    "votes",
    "proposals",
    "tally",
    "token_view",
]

_LAZY_MAP = {
    "errors": "artifact_dao.dao_runtime.errors",
    "events": "artifact_dao.dao_runtime.events",
    "rules": "artifact_dao.dao_runtime.rules",
    "snapshot": "artifact_dao.dao_runtime.snapshot",
    "suggestions": "artifact_dao.dao_runtime.suggestions",
    "votes": "artifact_dao.dao_runtime.votes",
    "proposals": "artifact_dao.dao_runtime.proposals",
    "tally": "artifact_dao.dao_runtime.tally",
    "token_view": "artifact_dao.dao_runtime.token_view",
}


def __getattr__(name: str) -> Any:
    mod_path = _LAZY_MAP.get(name)
    if not mod_path:
        raise AttributeError(name)
    return import_module(mod_path)


def __dir__() -> list[str]:
    return sorted(set(globals().keys()) | set(_LAZY_MAP.keys()))
