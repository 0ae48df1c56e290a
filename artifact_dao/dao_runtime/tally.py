"""
Quorum tally over a proposal's suggestions.

One left-to-right pass: sum every suggestion's weight and remember the
heaviest one. A later suggestion only wins on a strictly greater weight,
so ties go to the lowest suggestion id.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .rules import RulesConfig
from .suggestions import PriceSuggestion


@dataclass(frozen=True)
class TallyResult:
    total_cast: int
    winning_suggestion_id: Optional[int]
    winning_amount: int
    passed: bool

    @property
    def final_result(self) -> int:
        # A failed proposal keeps its zero default even though the winner
        # was computed.
        return self.winning_amount if self.passed else 0


def tally(suggestions: Iterable[PriceSuggestion], rules: RulesConfig) -> TallyResult:
    total_cast = 0
    winner: Optional[PriceSuggestion] = None
    for s in suggestions:
        total_cast += s.total_weight
        if winner is None or s.total_weight > winner.total_weight:
            winner = s

    return TallyResult(
        total_cast=total_cast,
        winning_suggestion_id=winner.id if winner is not None else None,
        winning_amount=winner.amount if winner is not None else 0,
        passed=rules.meets_quorum(total_cast),
    )
