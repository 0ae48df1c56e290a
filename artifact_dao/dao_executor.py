from __future__ import annotations

"""
artifact_dao engine

Single entry point for every governance operation:

- roles: owner (rules, execution, role changes) and assignee (proposals)
- proposal creation with a balance snapshot taken from the token view
- price suggestions, vote casting and O(1) vote reassignment
- one-shot quorum tally after the debate period

Every public method runs under one re-entrant lock and checks all of its
preconditions before writing anything, so a raised GovernanceError always
leaves the store exactly as it was. Time is never waited on: callers pass
`now`, or the injected clock is read once per call.
"""

import logging
import os
import threading
import time
from typing import Any, Callable, Dict, List, Optional

from . import config as dao_config
from .dao_runtime import events as ev
from .dao_runtime.errors import InvalidArgument, TooEarly, Unauthorized
from .dao_runtime.events import EventLog
from .dao_runtime.proposals import ProposalStore
from .dao_runtime.rules import RulesConfig
from .dao_runtime.tally import TallyResult
from .dao_runtime.token_view import InMemoryTokenView, TokenView

log = logging.getLogger(__name__)


def _clean_id(value: Any, what: str) -> str:
    s = str(value or "").strip()
    if not s:
        raise InvalidArgument(f"{what} is required")
    return s


class GovernanceEngine:
    def __init__(
        self,
        token_view: TokenView,
        *,
        owner: str,
        assignee: str,
        rules: Optional[RulesConfig] = None,
        clock: Callable[[], float] = time.time,
        events: Optional[EventLog] = None,
    ) -> None:
        self.token_view = token_view
        self._owner = _clean_id(owner, "owner")
        self._assignee = _clean_id(assignee, "assignee")
        self._rules = rules or RulesConfig()
        self._clock = clock
        self.events = events if events is not None else EventLog()
        self.store = ProposalStore()
        self._lock = threading.RLock()

    # ----------------------- helpers -------------------

    def _now(self, now: Optional[float]) -> float:
        return float(self._clock() if now is None else now)

    def _admins(self) -> tuple:
        return (self._owner, self._assignee)

    def _require_owner(self, caller: str, action: str) -> None:
        if caller != self._owner:
            log.debug("rejected %s by %s: not owner", action, caller)
            raise Unauthorized(f"{action} requires the owner")

    def _require_assignee(self, caller: str, action: str) -> None:
        if caller != self._assignee:
            log.debug("rejected %s by %s: not assignee", action, caller)
            raise Unauthorized(f"{action} requires the assignee")

    # ----------------------- roles ---------------------

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def assignee(self) -> str:
        return self._assignee

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        with self._lock:
            self._require_owner(caller, "transfer_ownership")
            new_owner = _clean_id(new_owner, "new_owner")
            previous, self._owner = self._owner, new_owner
            log.info("ownership transferred %s -> %s", previous, new_owner)
            self.events.emit(ev.OWNERSHIP_TRANSFERRED, previous_owner=previous, new_owner=new_owner)

    def change_assignee(self, caller: str, new_assignee: str) -> None:
        with self._lock:
            self._require_owner(caller, "change_assignee")
            new_assignee = _clean_id(new_assignee, "new_assignee")
            previous, self._assignee = self._assignee, new_assignee
            log.info("assignee changed %s -> %s", previous, new_assignee)
            self.events.emit(ev.ASSIGNEE_CHANGED, previous_assignee=previous, new_assignee=new_assignee)

    # ----------------------- rules ---------------------

    @property
    def rules(self) -> RulesConfig:
        return self._rules

    def change_rules(self, caller: str, quorum: int, debate_period: int) -> RulesConfig:
        with self._lock:
            self._require_owner(caller, "change_rules")
            new_rules = RulesConfig(quorum_threshold=int(quorum), debate_period=int(debate_period))
            self._rules = new_rules
            log.info("rules changed quorum=%s debate_period=%ss", new_rules.quorum_threshold, new_rules.debate_period)
            self.events.emit(
                ev.RULES_CHANGED,
                quorum=new_rules.quorum_threshold,
                debate_period=new_rules.debate_period,
            )
            return new_rules

    # ----------------------- proposals -----------------

    def create_proposal(
        self,
        caller: str,
        artifact_ref: str,
        amount: int,
        description: str = "",
        now: Optional[float] = None,
    ) -> int:
        with self._lock:
            self._require_assignee(caller, "create_proposal")
            ts = self._now(now)
            prop = self.store.create(
                artifact_ref=artifact_ref,
                initial_amount=amount,
                description=description,
                advisor=caller,
                token_view=self.token_view,
                rules=self._rules,
                now=ts,
            )
            log.info(
                "proposal %s added for artifact %s (holders=%s, deadline=%s)",
                prop.id, prop.artifact_ref, len(prop.snapshot), prop.min_execution_time,
            )
            self.events.emit(
                ev.PROPOSAL_ADDED,
                proposal_id=prop.id,
                artifact_ref=prop.artifact_ref,
                amount=int(amount),
                description=prop.description,
                min_execution_time=prop.min_execution_time,
            )
            return prop.id

    def add_suggestion(self, caller: str, proposal_id: int, amount: int) -> int:
        with self._lock:
            prop = self.store.require_active_member(proposal_id, caller, admins=self._admins())
            sid = prop.suggestions.add(amount, caller)
            log.info("suggestion %s added to proposal %s by %s (amount=%s)", sid, prop.id, caller, amount)
            self.events.emit(
                ev.SUGGESTION_ADDED,
                proposal_id=prop.id,
                suggestion_id=sid,
                advisor=caller,
                amount=int(amount),
            )
            return sid

    def cast_vote(self, caller: str, proposal_id: int, suggestion_id: int) -> int:
        with self._lock:
            prop = self.store.require_active_member(proposal_id, caller, admins=self._admins())
            pos = prop.cast_vote(caller, suggestion_id)
            s = prop.suggestions.get(suggestion_id)
            log.info("vote cast on proposal %s by %s for suggestion %s", prop.id, caller, s.id)
            self.events.emit(
                ev.VOTED,
                proposal_id=prop.id,
                suggestion_id=s.id,
                voter=caller,
                weight=prop.weight_of(caller),
                vote_count=s.vote_count,
                total_weight=s.total_weight,
            )
            return pos

    def change_vote(self, caller: str, proposal_id: int, new_suggestion_id: int) -> int:
        with self._lock:
            prop = self.store.require_active_member(proposal_id, caller, admins=self._admins())
            vote = prop.votes.get(caller)
            old_sid = vote.suggestion_id if vote is not None else None
            pos = prop.change_vote(caller, new_suggestion_id)
            new = prop.suggestions.get(new_suggestion_id)
            log.info(
                "vote changed on proposal %s by %s: %s -> %s", prop.id, caller, old_sid, new.id
            )
            self.events.emit(
                ev.VOTE_CHANGED,
                proposal_id=prop.id,
                voter=caller,
                old_suggestion_id=old_sid,
                new_suggestion_id=new.id,
                weight=prop.weight_of(caller),
                vote_count=new.vote_count,
                total_weight=new.total_weight,
            )
            return pos

    def execute(self, caller: str, proposal_id: int, now: Optional[float] = None) -> TallyResult:
        with self._lock:
            self._require_owner(caller, "execute")
            prop = self.store.get(proposal_id)
            ts = self._now(now)
            if not prop.executed and ts < prop.min_execution_time:
                raise TooEarly(
                    f"proposal {prop.id} executable at {prop.min_execution_time}, now {ts}"
                )
            result = prop.finalize(self._rules)
            log.info(
                "proposal %s executed: total_cast=%s quorum=%s passed=%s result=%s",
                prop.id, result.total_cast, self._rules.quorum_threshold, prop.passed, prop.final_result,
            )
            self.events.emit(
                ev.PROPOSAL_EXECUTED,
                proposal_id=prop.id,
                passed=prop.passed,
                final_result=prop.final_result,
                total_cast=result.total_cast,
            )
            return result

    # ----------------------- queries -------------------
    #
    # Views are plain dicts copied while the lock is held. Live Proposal and
    # PriceSuggestion records never leave the engine.

    def proposal(self, proposal_id: int, include_voters: bool = False) -> Dict[str, Any]:
        with self._lock:
            return self.store.get(proposal_id).to_dict(include_voters=include_voters)

    def proposals(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [p.to_dict() for p in self.store.list()]

    def proposal_by_artifact(self, artifact_ref: str) -> Dict[str, Any]:
        with self._lock:
            return self.store.get(self.store.id_by_artifact(artifact_ref)).to_dict()

    def suggestion(self, proposal_id: int, suggestion_id: int) -> Dict[str, Any]:
        with self._lock:
            return self.store.get(proposal_id).suggestions.get(suggestion_id).to_dict()

    def vote_status(self, proposal_id: int, voter: str, suggestion_id: int) -> Dict[str, Any]:
        with self._lock:
            prop = self.store.get(proposal_id)
            return {
                "voted": prop.has_voted_for(voter, suggestion_id),
                "weight": prop.weight_of(voter),
            }

    def proposal_count(self) -> int:
        with self._lock:
            return self.store.count()

    def proposal_id_by_artifact(self, artifact_ref: str) -> int:
        with self._lock:
            return self.store.id_by_artifact(artifact_ref)

    def proposal_ids_for_artifact(self, artifact_ref: str) -> List[int]:
        with self._lock:
            return self.store.ids_for_artifact(artifact_ref)

    def suggestion_count(self, proposal_id: int) -> int:
        with self._lock:
            return len(self.store.get(proposal_id).suggestions)

    def suggestion_amount(self, proposal_id: int, suggestion_id: int) -> int:
        with self._lock:
            return self.store.get(proposal_id).suggestions.amount(suggestion_id)

    def suggestion_vote_count(self, proposal_id: int, suggestion_id: int) -> int:
        with self._lock:
            return self.store.get(proposal_id).suggestions.vote_count(suggestion_id)

    def suggestion_total_weight(self, proposal_id: int, suggestion_id: int) -> int:
        with self._lock:
            return self.store.get(proposal_id).suggestions.total_weight(suggestion_id)

    def is_executed(self, proposal_id: int) -> bool:
        with self._lock:
            return self.store.get(proposal_id).executed

    def is_passed(self, proposal_id: int) -> bool:
        with self._lock:
            return self.store.get(proposal_id).passed

    def final_result(self, proposal_id: int) -> int:
        with self._lock:
            return self.store.get(proposal_id).final_result

    def has_voted_for(self, proposal_id: int, voter: str, suggestion_id: int) -> bool:
        with self._lock:
            return self.store.get(proposal_id).has_voted_for(voter, suggestion_id)

    def voter_weight(self, proposal_id: int, voter: str) -> int:
        with self._lock:
            return self.store.get(proposal_id).weight_of(voter)

    def status(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "owner": self._owner,
                "assignee": self._assignee,
                "rules": self._rules.to_dict(),
                "proposal_count": self.store.count(),
                "events": len(self.events),
            }


def build_engine(cfg: Dict[str, Any], token_view: Optional[TokenView] = None, **kwargs: Any) -> GovernanceEngine:
    view = token_view if token_view is not None else InMemoryTokenView.from_mapping(
        dao_config.get_token_balances(cfg)
    )
    rules = RulesConfig(
        quorum_threshold=dao_config.get_quorum(cfg),
        debate_period=dao_config.get_debate_period_sec(cfg),
    )
    return GovernanceEngine(
        view,
        owner=dao_config.get_owner(cfg),
        assignee=dao_config.get_assignee(cfg),
        rules=rules,
        **kwargs,
    )


REPO_ROOT = os.environ.get("DAO_REPO_ROOT", os.getcwd())

engine = build_engine(dao_config.load_config(REPO_ROOT))
