# artifact_dao/dao_runtime/events.py
from __future__ import annotations

"""
Governance notifications.

Side channel for observers and indexers. Events are appended to an
in-memory log (sequence-numbered, oldest first) and pushed to any
registered subscriber. A subscriber that raises is logged and skipped;
it never fails the engine operation that emitted the event.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

log = logging.getLogger(__name__)

PROPOSAL_ADDED = "ProposalAdded"
SUGGESTION_ADDED = "SuggestionAdded"
VOTED = "Voted"
VOTE_CHANGED = "VoteChanged"
RULES_CHANGED = "RulesChanged"
PROPOSAL_EXECUTED = "ProposalExecuted"
OWNERSHIP_TRANSFERRED = "OwnershipTransferred"
ASSIGNEE_CHANGED = "AssigneeChanged"


@dataclass(frozen=True)
class Event:
    seq: int
    type: str
    data: Dict[str, Any]
    ts: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {"seq": self.seq, "type": self.type, "data": dict(self.data), "ts": self.ts}


Subscriber = Callable[[Event], None]


class EventLog:
    def __init__(self, max_events: int = 10_000) -> None:
        self._events: List[Event] = []
        self._subscribers: List[Subscriber] = []
        self._next_seq = 0
        self.max_events = int(max_events)

    def subscribe(self, fn: Subscriber) -> None:
        self._subscribers.append(fn)

    def emit(self, typ: str, **data: Any) -> Event:
        ev = Event(seq=self._next_seq, type=typ, data=data)
        self._next_seq += 1
        self._events.append(ev)
        if self.max_events > 0 and len(self._events) > self.max_events:
            del self._events[: len(self._events) - self.max_events]

        log.debug("event %s %s", typ, data)
        for fn in list(self._subscribers):
            try:
                fn(ev)
            except Exception:
                log.exception("event subscriber failed for %s", typ)
        return ev

    def list(self, typ: Optional[str] = None, since: int = 0) -> List[Event]:
        return [e for e in self._events if e.seq >= since and (typ is None or e.type == typ)]

    def __len__(self) -> int:
        return len(self._events)
