# tests/test_proposals.py

import pytest

from artifact_dao.dao_runtime.errors import (
    AlreadyExecuted,
    Forbidden,
    InvalidArgument,
    NotFound,
    Unauthorized,
)
from artifact_dao.dao_runtime.snapshot import BalanceSnapshot
from artifact_dao.dao_runtime.token_view import InMemoryTokenView
from conftest import ASSIGNEE, DEBATE, OWNER, T0


def test_create_proposal_initial_state(engine):
    """
    Creating a proposal should:
    - assign dense ids starting at 0
    - open with one suggestion carrying the initial amount
    - fix the deadline at creation time + debate period
    - start unexecuted, not passed, final result 0
    """
    pid = engine.create_proposal(ASSIGNEE, "art-1", 250, "first")
    assert pid == 0
    assert engine.proposal_count() == 1

    prop = engine.proposal(pid)
    assert prop["artifact_ref"] == "art-1"
    assert prop["description"] == "first"
    assert prop["min_execution_time"] == T0 + DEBATE
    assert prop["executed"] is False
    assert prop["passed"] is False
    assert prop["final_result"] == 0
    assert prop["voter_count"] == 0

    assert engine.suggestion_count(pid) == 1
    assert engine.suggestion_amount(pid, 0) == 250
    assert engine.suggestion_vote_count(pid, 0) == 0
    assert engine.suggestion_total_weight(pid, 0) == 0
    assert prop["suggestions"][0]["advisor"] == ASSIGNEE
    assert "voters" not in prop["suggestions"][0]

    assert engine.create_proposal(ASSIGNEE, "art-2", 10) == 1


def test_only_assignee_creates_proposals(engine):
    for caller in (OWNER, "@alice"):
        with pytest.raises(Unauthorized):
            engine.create_proposal(caller, "art-1", 100)
    assert engine.proposal_count() == 0


def test_create_proposal_rejects_bad_input(engine):
    with pytest.raises(InvalidArgument):
        engine.create_proposal(ASSIGNEE, "", 100)
    with pytest.raises(InvalidArgument):
        engine.create_proposal(ASSIGNEE, "art-1", -5)
    assert engine.proposal_count() == 0


def test_explicit_now_overrides_clock(engine):
    pid = engine.create_proposal(ASSIGNEE, "art-1", 1, now=50.0)
    assert engine.proposal(pid)["min_execution_time"] == 50.0 + DEBATE


def test_snapshot_is_frozen_at_creation(engine, token_view):
    pid = engine.create_proposal(ASSIGNEE, "art-1", 100)
    token_view.set_balance("@alice", 0)
    token_view.set_balance("@erin", 40)

    assert engine.voter_weight(pid, "@alice") == 60
    assert engine.voter_weight(pid, "@erin") == 0

    # A later proposal sees the new balances
    pid2 = engine.create_proposal(ASSIGNEE, "art-2", 100)
    assert engine.voter_weight(pid2, "@alice") == 0
    assert engine.voter_weight(pid2, "@erin") == 40


def test_snapshot_capture_copies_every_holder():
    view = InMemoryTokenView.from_mapping({"a": 3, "b": 0, "c": 7})
    snap = BalanceSnapshot.capture(view)

    assert dict(snap) == {"a": 3, "b": 0, "c": 7}
    assert snap.is_member("a")
    assert not snap.is_member("b")
    assert snap.total_weight() == 10
    with pytest.raises(TypeError):
        snap._weights["a"] = 100


def test_get_unknown_proposal(engine):
    with pytest.raises(NotFound):
        engine.proposal(0)
    engine.create_proposal(ASSIGNEE, "art-1", 1)
    with pytest.raises(NotFound):
        engine.proposal(1)
    with pytest.raises(NotFound):
        engine.proposal(-1)


def test_lookup_by_artifact(engine):
    a = engine.create_proposal(ASSIGNEE, "art-1", 1)
    engine.create_proposal(ASSIGNEE, "art-2", 1)
    c = engine.create_proposal(ASSIGNEE, "art-1", 2)

    assert engine.proposal_id_by_artifact("art-1") == c
    assert engine.proposal_ids_for_artifact("art-1") == [a, c]
    assert engine.proposal_ids_for_artifact("missing") == []
    with pytest.raises(NotFound):
        engine.proposal_id_by_artifact("missing")


def test_lookup_by_artifact_ignores_surrounding_whitespace(engine):
    pid = engine.create_proposal(ASSIGNEE, "  art-1 ", 1)

    assert engine.proposal(pid)["artifact_ref"] == "art-1"
    assert engine.proposal_id_by_artifact(" art-1  ") == pid
    assert engine.proposal_id_by_artifact("art-1") == pid
    assert engine.proposal_ids_for_artifact("\tart-1\n") == [pid]
    assert engine.proposal_by_artifact(" art-1")["id"] == pid


# ============================================================
# Suggestions
# ============================================================

def test_add_suggestion_dense_ids_and_duplicates(engine, proposal_id):
    sid = engine.add_suggestion("@bob", proposal_id, 200)
    assert sid == 2
    assert engine.suggestion_amount(proposal_id, 1) == 200
    assert engine.suggestion_amount(proposal_id, 2) == 200
    assert engine.suggestion(proposal_id, 2)["advisor"] == "@bob"


def test_add_suggestion_guards(engine, proposal_id):
    with pytest.raises(NotFound):
        engine.add_suggestion("@alice", 42, 10)
    with pytest.raises(Forbidden):
        engine.add_suggestion("@mallory", proposal_id, 10)
    with pytest.raises(InvalidArgument):
        engine.add_suggestion("@alice", proposal_id, -1)

    # admins may add suggestions without weight
    assert engine.add_suggestion(OWNER, proposal_id, 10) == 2
    assert engine.suggestion_count(proposal_id) == 3


def test_suggestion_accessors_unknown_id(engine, proposal_id):
    with pytest.raises(NotFound):
        engine.suggestion_amount(proposal_id, 2)
    with pytest.raises(NotFound):
        engine.suggestion_vote_count(proposal_id, -1)
    with pytest.raises(NotFound):
        engine.suggestion_total_weight(proposal_id, 99)


def test_guard_order_not_found_then_executed_then_forbidden(engine, clock, proposal_id):
    clock.advance(DEBATE)
    engine.execute(OWNER, proposal_id)

    with pytest.raises(NotFound):
        engine.add_suggestion("@mallory", 99, 1)
    # executed wins over forbidden
    with pytest.raises(AlreadyExecuted):
        engine.add_suggestion("@mallory", proposal_id, 1)
    with pytest.raises(AlreadyExecuted):
        engine.cast_vote("@alice", proposal_id, 0)
