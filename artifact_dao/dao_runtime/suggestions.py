# artifact_dao/dao_runtime/suggestions.py
from __future__ import annotations

"""
Price suggestions attached to a single proposal.

Each suggestion keeps a dense voter list. The list is only ever appended
to or shrunk from the tail (see votes.VoteLedger for the swap-remove), so
`len(voters) == vote_count` holds at all times.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List

from .errors import InvalidArgument, NotFound


@dataclass
class PriceSuggestion:
    id: int
    advisor: str
    amount: int
    voters: List[str] = field(default_factory=list)
    vote_count: int = 0
    total_weight: int = 0

    def append_voter(self, voter: str, weight: int) -> int:
        self.voters.append(voter)
        self.vote_count += 1
        self.total_weight += int(weight)
        return len(self.voters) - 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "advisor": self.advisor,
            "amount": self.amount,
            "voters": list(self.voters),
            "vote_count": self.vote_count,
            "total_weight": self.total_weight,
        }


class SuggestionLedger:
    def __init__(self) -> None:
        self._items: List[PriceSuggestion] = []

    def add(self, amount: int, advisor: str) -> int:
        if int(amount) < 0:
            raise InvalidArgument("amount must be >= 0")
        sid = len(self._items)
        self._items.append(PriceSuggestion(id=sid, advisor=str(advisor), amount=int(amount)))
        return sid

    def get(self, suggestion_id: int) -> PriceSuggestion:
        sid = int(suggestion_id)
        if sid < 0 or sid >= len(self._items):
            raise NotFound(f"suggestion {sid} not found")
        return self._items[sid]

    # ----- accessors -----

    def amount(self, suggestion_id: int) -> int:
        return self.get(suggestion_id).amount

    def vote_count(self, suggestion_id: int) -> int:
        return self.get(suggestion_id).vote_count

    def total_weight(self, suggestion_id: int) -> int:
        return self.get(suggestion_id).total_weight

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[PriceSuggestion]:
        return iter(self._items)
