# artifact_dao/dao_runtime/votes.py
from __future__ import annotations

"""
VoteLedger - one live vote per (proposal, voter).

Each Vote remembers where its voter sits inside the target suggestion's
voter list. That back-reference is what makes reassignment O(1):

    old.voters = [a, b, c, d]      b moves away (position 1)
    old.voters = [a, d, c]         d takes slot 1, d's Vote.position -> 1

Invariant, before and after every call:
    for every suggestion s and every i < s.vote_count:
        votes[s.voters[i]].suggestion_id == s.id
        votes[s.voters[i]].position_in_suggestion == i
"""

from dataclasses import dataclass
from typing import Dict, Optional

from .errors import AlreadyVoted, NotVotedYet, SameSuggestion
from .suggestions import PriceSuggestion, SuggestionLedger


@dataclass
class Vote:
    cast: bool = False
    suggestion_id: int = 0
    position_in_suggestion: int = 0


class VoteLedger:
    def __init__(self) -> None:
        self._votes: Dict[str, Vote] = {}

    def get(self, voter: str) -> Optional[Vote]:
        vote = self._votes.get(voter)
        if vote is None or not vote.cast:
            return None
        return vote

    def has_voted(self, voter: str) -> bool:
        return self.get(voter) is not None

    def has_voted_for(self, voter: str, suggestion_id: int) -> bool:
        vote = self.get(voter)
        return vote is not None and vote.suggestion_id == int(suggestion_id)

    # ------------------------------------------------------------------
    # Mutations. All checks run before the first write.
    # ------------------------------------------------------------------

    def cast(self, voter: str, suggestions: SuggestionLedger, suggestion_id: int, weight: int) -> int:
        if self.has_voted(voter):
            raise AlreadyVoted(f"{voter} already voted")
        target = suggestions.get(suggestion_id)

        pos = target.append_voter(voter, weight)
        self._votes[voter] = Vote(cast=True, suggestion_id=target.id, position_in_suggestion=pos)
        return pos

    def change(self, voter: str, suggestions: SuggestionLedger, new_suggestion_id: int, weight: int) -> int:
        vote = self.get(voter)
        if vote is None:
            raise NotVotedYet(f"{voter} has not voted")
        if vote.suggestion_id == int(new_suggestion_id):
            raise SameSuggestion(f"{voter} already votes for suggestion {vote.suggestion_id}")
        new = suggestions.get(new_suggestion_id)
        old = suggestions.get(vote.suggestion_id)

        self._swap_remove(old, vote.position_in_suggestion, weight)
        vote.position_in_suggestion = new.append_voter(voter, weight)
        vote.suggestion_id = new.id
        return vote.position_in_suggestion

    def _swap_remove(self, old: PriceSuggestion, idx: int, weight: int) -> None:
        last_idx = old.vote_count - 1
        if idx != last_idx:
            last = old.voters[last_idx]
            old.voters[idx] = last
            self._votes[last].position_in_suggestion = idx
        old.voters.pop()
        old.vote_count -= 1
        old.total_weight -= int(weight)

    def __len__(self) -> int:
        return sum(1 for vote in self._votes.values() if vote.cast)
