# artifact_dao/dao_runtime/proposals.py
from __future__ import annotations

"""
ProposalStore - ordered, append-only collection of proposals.

A proposal owns its balance snapshot, its suggestions and its votes.
Once `executed` flips to True the record is frozen: every mutating path
goes through `require_active_member`, which rejects frozen proposals.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import AlreadyExecuted, Forbidden, InvalidArgument, NotFound
from .rules import RulesConfig
from .snapshot import BalanceSnapshot
from .suggestions import SuggestionLedger
from .tally import TallyResult, tally
from .token_view import TokenView
from .votes import VoteLedger


@dataclass
class Proposal:
    id: int
    artifact_ref: str
    description: str
    snapshot: BalanceSnapshot
    min_execution_time: float
    created_at: float
    suggestions: SuggestionLedger = field(default_factory=SuggestionLedger)
    votes: VoteLedger = field(default_factory=VoteLedger)
    executed: bool = False
    passed: bool = False
    final_result: int = 0
    winning_suggestion_id: Optional[int] = None

    def weight_of(self, voter: str) -> int:
        return self.snapshot.weight_of(voter)

    # ----- voting, weight always read from the snapshot -----

    def cast_vote(self, voter: str, suggestion_id: int) -> int:
        return self.votes.cast(voter, self.suggestions, suggestion_id, self.weight_of(voter))

    def change_vote(self, voter: str, new_suggestion_id: int) -> int:
        return self.votes.change(voter, self.suggestions, new_suggestion_id, self.weight_of(voter))

    def has_voted_for(self, voter: str, suggestion_id: int) -> bool:
        self.suggestions.get(suggestion_id)
        return self.votes.has_voted_for(voter, suggestion_id)

    # ----- execution -----

    def finalize(self, rules: RulesConfig) -> TallyResult:
        if self.executed:
            raise AlreadyExecuted(f"proposal {self.id} already executed")
        result = tally(self.suggestions, rules)
        self.executed = True
        self.winning_suggestion_id = result.winning_suggestion_id
        if result.passed:
            self.passed = True
            self.final_result = result.final_result
        return result

    def total_cast(self) -> int:
        return sum(s.total_weight for s in self.suggestions)

    def to_dict(self, include_voters: bool = False) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "artifact_ref": self.artifact_ref,
            "description": self.description,
            "created_at": self.created_at,
            "min_execution_time": self.min_execution_time,
            "executed": self.executed,
            "passed": self.passed,
            "final_result": self.final_result,
            "voter_count": len(self.votes),
            "suggestions": [],
        }
        for s in self.suggestions:
            row = s.to_dict()
            if not include_voters:
                row.pop("voters", None)
            out["suggestions"].append(row)
        return out


def _normalize_ref(artifact_ref: Any) -> str:
    return str(artifact_ref or "").strip()


class ProposalStore:
    def __init__(self) -> None:
        self._proposals: List[Proposal] = []
        self._by_artifact: Dict[str, List[int]] = {}

    def create(
        self,
        artifact_ref: str,
        initial_amount: int,
        description: str,
        advisor: str,
        token_view: TokenView,
        rules: RulesConfig,
        now: float,
    ) -> Proposal:
        ref = _normalize_ref(artifact_ref)
        if not ref:
            raise InvalidArgument("artifact_ref is required")
        if int(initial_amount) < 0:
            raise InvalidArgument("amount must be >= 0")

        # Everything below is built on locals and only published on the
        # final append.
        snapshot = BalanceSnapshot.capture(token_view)
        prop = Proposal(
            id=len(self._proposals),
            artifact_ref=ref,
            description=str(description or ""),
            snapshot=snapshot,
            min_execution_time=rules.deadline_from(now),
            created_at=float(now),
        )
        prop.suggestions.add(int(initial_amount), advisor)

        self._proposals.append(prop)
        self._by_artifact.setdefault(ref, []).append(prop.id)
        return prop

    def get(self, proposal_id: int) -> Proposal:
        pid = int(proposal_id)
        if pid < 0 or pid >= len(self._proposals):
            raise NotFound(f"proposal {pid} not found")
        return self._proposals[pid]

    def require_active_member(self, proposal_id: int, caller: str, *, admins: tuple = ()) -> Proposal:
        prop = self.get(proposal_id)
        if prop.executed:
            raise AlreadyExecuted(f"proposal {prop.id} already executed")
        if prop.weight_of(caller) <= 0 and caller not in admins:
            raise Forbidden(f"{caller} has no voting weight for proposal {prop.id}")
        return prop

    def ids_for_artifact(self, artifact_ref: str) -> List[int]:
        return list(self._by_artifact.get(_normalize_ref(artifact_ref), []))

    def id_by_artifact(self, artifact_ref: str) -> int:
        ids = self._by_artifact.get(_normalize_ref(artifact_ref))
        if not ids:
            raise NotFound(f"no proposal for artifact {artifact_ref}")
        return ids[-1]

    def list(self) -> List[Proposal]:
        return list(self._proposals)

    def count(self) -> int:
        return len(self._proposals)

    def __len__(self) -> int:
        return len(self._proposals)
