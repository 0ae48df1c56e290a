import pathlib
import sys

import pytest

# Ensure repo root (containing the artifact_dao package) is on sys.path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from artifact_dao.dao_executor import GovernanceEngine
from artifact_dao.dao_runtime.rules import RulesConfig
from artifact_dao.dao_runtime.token_view import InMemoryTokenView

OWNER = "@owner"
ASSIGNEE = "@assignee"
T0 = 1_000_000.0
DEBATE = 600


class FakeClock:
    def __init__(self, now: float = T0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def token_view():
    return InMemoryTokenView.from_mapping({"@alice": 60, "@bob": 50, "@carol": 10, "@dave": 5})


@pytest.fixture
def engine(token_view, clock):
    """Fresh engine per test: quorum 100, 600s debate period."""
    return GovernanceEngine(
        token_view,
        owner=OWNER,
        assignee=ASSIGNEE,
        rules=RulesConfig(quorum_threshold=100, debate_period=DEBATE),
        clock=clock,
    )


@pytest.fixture
def proposal_id(engine):
    """Proposal 0 for artifact 'art-1' with suggestions 0 (amount 100) and 1 (amount 200)."""
    pid = engine.create_proposal(ASSIGNEE, "art-1", 100, "price for art-1")
    engine.add_suggestion("@alice", pid, 200)
    return pid


def assert_swap_remove_invariant(prop):
    """Every suggestion's voter list is dense and every back-reference matches."""
    for s in prop.suggestions:
        assert len(s.voters) == s.vote_count
        for i, voter in enumerate(s.voters):
            vote = prop.votes.get(voter)
            assert vote is not None
            assert vote.suggestion_id == s.id
            assert vote.position_in_suggestion == i
