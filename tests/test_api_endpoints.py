# tests/test_api_endpoints.py

import pytest
from fastapi.testclient import TestClient

from artifact_dao.api.governance import get_engine
from artifact_dao.dao_api import create_app
from conftest import ASSIGNEE, DEBATE, OWNER


@pytest.fixture
def client(engine):
    app = create_app()
    app.dependency_overrides[get_engine] = lambda: engine
    with TestClient(app) as c:
        yield c


def _as(caller):
    return {"X-DAO-Caller": caller}


def _create(client, ref="art-1", amount=100):
    resp = client.post(
        "/governance/proposals",
        json={"artifact_ref": ref, "amount": amount, "description": "d"},
        headers=_as(ASSIGNEE),
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


def test_health(client):
    assert client.get("/health").json()["ok"] is True
    summary = client.get("/health/summary").json()
    assert summary["owner"] == OWNER
    assert summary["rules"] == {"quorum": 100, "debate_period_sec": DEBATE}


def test_missing_caller_is_401(client):
    resp = client.post("/governance/proposals", json={"artifact_ref": "x", "amount": 1})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "missing_caller"


def test_full_flow_over_http(client, clock):
    pid = _create(client)

    resp = client.post(f"/governance/proposals/{pid}/suggestions", json={"amount": 150}, headers=_as("@bob"))
    assert resp.status_code == 201
    assert resp.json()["id"] == 1

    resp = client.post(f"/governance/proposals/{pid}/votes", json={"suggestion_id": 0}, headers=_as("@alice"))
    assert resp.json()["vote_index"] == 0
    resp = client.post(f"/governance/proposals/{pid}/votes", json={"suggestion_id": 0}, headers=_as("@bob"))
    assert resp.json()["vote_index"] == 1

    resp = client.put(f"/governance/proposals/{pid}/votes", json={"suggestion_id": 1}, headers=_as("@alice"))
    assert resp.status_code == 200
    assert resp.json()["vote_index"] == 0

    voted = client.get(f"/governance/proposals/{pid}/votes/@alice", params={"suggestion_id": 1}).json()
    assert voted["voted"] is True
    assert voted["weight"] == 60

    s1 = client.get(f"/governance/proposals/{pid}/suggestions/1").json()
    assert s1["vote_count"] == 1
    assert s1["total_weight"] == 60

    resp = client.post(f"/governance/proposals/{pid}/execute", headers=_as(OWNER))
    assert resp.status_code == 425
    assert resp.json()["detail"] == "too_early"

    clock.advance(DEBATE)
    resp = client.post(f"/governance/proposals/{pid}/execute", headers=_as(OWNER))
    assert resp.status_code == 200
    body = resp.json()
    assert body["passed"] is True
    assert body["final_result"] == 150
    assert body["total_cast"] == 110

    prop = client.get("/governance/artifacts/art-1/proposal").json()
    assert prop["id"] == pid
    assert prop["executed"] is True
    assert prop["voter_count"] == 2

    events = client.get("/governance/events", params={"type": "ProposalExecuted"}).json()["events"]
    assert len(events) == 1


@pytest.mark.parametrize(
    "method,path,body,caller,status,detail",
    [
        ("post", "/governance/proposals", {"artifact_ref": "a", "amount": 1}, "@alice", 403, "unauthorized"),
        ("post", "/governance/proposals/0/votes", {"suggestion_id": 0}, "@mallory", 403, "forbidden"),
        ("post", "/governance/proposals/9/votes", {"suggestion_id": 0}, "@alice", 404, "not_found"),
        ("put", "/governance/proposals/0/votes", {"suggestion_id": 0}, "@alice", 409, "not_voted_yet"),
        ("post", "/governance/rules", {"quorum": 1, "debate_period_sec": 1}, ASSIGNEE, 403, "unauthorized"),
    ],
)
def test_errors_are_mapped(client, method, path, body, caller, status, detail):
    _create(client)
    resp = getattr(client, method)(path, json=body, headers=_as(caller))
    assert resp.status_code == status
    assert resp.json()["detail"] == detail


def test_rules_roundtrip(client):
    resp = client.post("/governance/rules", json={"quorum": 5, "debate_period_sec": 60}, headers=_as(OWNER))
    assert resp.status_code == 200
    assert client.get("/governance/rules").json() == {"quorum": 5, "debate_period_sec": 60}
    assert client.get("/governance/roles").json() == {"owner": OWNER, "assignee": ASSIGNEE}


def test_validation_rejects_negative_amount(client):
    resp = client.post(
        "/governance/proposals",
        json={"artifact_ref": "a", "amount": -1},
        headers=_as(ASSIGNEE),
    )
    assert resp.status_code == 422


def test_list_and_unknown_proposal(client):
    assert client.get("/governance/proposals").json() == []
    _create(client, ref="a")
    _create(client, ref="b")
    listed = client.get("/governance/proposals").json()
    assert [p["artifact_ref"] for p in listed] == ["a", "b"]
    assert client.get("/governance/proposals/5").status_code == 404
    assert client.get("/governance/artifacts/zzz/proposal").status_code == 404


def test_artifact_ref_with_slashes(client):
    _create(client, ref="art-0")
    pid = _create(client, ref="org/repo/art-1")

    resp = client.get("/governance/artifacts/org/repo/art-1/proposal")
    assert resp.status_code == 200
    assert resp.json()["id"] == pid
    assert resp.json()["artifact_ref"] == "org/repo/art-1"
    assert client.get("/governance/artifacts/org/repo/proposal").status_code == 404
