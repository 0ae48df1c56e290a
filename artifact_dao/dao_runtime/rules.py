# artifact_dao/dao_runtime/rules.py
from __future__ import annotations

"""
Voting rules for artifact_dao.

Two knobs only:

1. **quorum_threshold** - total cast weight (summed over every suggestion)
   a proposal must strictly exceed to pass.
2. **debate_period** - seconds between proposal creation and the earliest
   moment the owner may execute it.

Rules are read when a proposal is created (deadline) and when it is
executed (quorum). Replacing them never rewrites the deadline already
stored on an existing proposal.
"""

from dataclasses import dataclass
from typing import Any, Dict

from .errors import InvalidArgument

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_RULES: Dict[str, Any] = {
    "quorum": 0,
    "debate_period_sec": 3600,
}


@dataclass(frozen=True)
class RulesConfig:
    quorum_threshold: int = DEFAULT_RULES["quorum"]
    debate_period: int = DEFAULT_RULES["debate_period_sec"]

    def __post_init__(self) -> None:
        if int(self.quorum_threshold) < 0:
            raise InvalidArgument("quorum must be >= 0")
        if int(self.debate_period) < 0:
            raise InvalidArgument("debate period must be >= 0")

    def deadline_from(self, now: float) -> float:
        return float(now) + int(self.debate_period)

    def meets_quorum(self, total_cast: int) -> bool:
        return int(total_cast) > int(self.quorum_threshold)

    def to_dict(self) -> Dict[str, int]:
        return {
            "quorum": int(self.quorum_threshold),
            "debate_period_sec": int(self.debate_period),
        }

    @classmethod
    def from_any(cls, obj: object) -> "RulesConfig":
        if isinstance(obj, RulesConfig):
            return obj
        if isinstance(obj, dict):
            return cls(
                quorum_threshold=int(obj.get("quorum", DEFAULT_RULES["quorum"])),
                debate_period=int(
                    obj.get("debate_period_sec", DEFAULT_RULES["debate_period_sec"])
                ),
            )
        return cls()
