# artifact_dao/api/governance.py
"""
artifact_dao/api/governance.py
--------------------------------------------------
Governance HTTP API.

Thin layer over the engine in `artifact_dao.dao_executor`:

- caller identity comes from the `X-DAO-Caller` header
- request bodies are validated with pydantic
- GovernanceError subclasses are translated to HTTPException using the
  error's own status code, with its stable `code` as the detail
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from pydantic import BaseModel, Field

from ..dao_executor import GovernanceEngine, engine as default_engine
from ..dao_runtime.errors import GovernanceError

router = APIRouter(prefix="/governance", tags=["governance"])


# ============================================================
# Pydantic models
# ============================================================

class RulesModel(BaseModel):
    quorum: int = Field(..., ge=0, description="Cast weight a proposal must exceed to pass")
    debate_period_sec: int = Field(..., ge=0)


class RolesResponse(BaseModel):
    owner: str
    assignee: str


class SuggestionModel(BaseModel):
    id: int
    advisor: str
    amount: int
    vote_count: int
    total_weight: int


class ProposalModel(BaseModel):
    id: int
    artifact_ref: str
    description: str = ""
    created_at: float
    min_execution_time: float
    executed: bool
    passed: bool
    final_result: int
    voter_count: int = 0
    suggestions: List[SuggestionModel] = Field(default_factory=list)


class ProposalCreate(BaseModel):
    artifact_ref: str = Field(..., min_length=1)
    amount: int = Field(..., ge=0)
    description: str = ""


class SuggestionCreate(BaseModel):
    amount: int = Field(..., ge=0)


class VoteRequest(BaseModel):
    suggestion_id: int = Field(..., ge=0)


class IdResponse(BaseModel):
    ok: bool = True
    id: int


class VoteResponse(BaseModel):
    ok: bool = True
    proposal_id: int
    suggestion_id: int
    vote_index: int


class ExecuteResponse(BaseModel):
    ok: bool = True
    proposal_id: int
    passed: bool
    final_result: int
    total_cast: int


class VotedForResponse(BaseModel):
    proposal_id: int
    voter: str
    suggestion_id: int
    voted: bool
    weight: int


# ============================================================
# Dependencies / helpers
# ============================================================

def get_engine() -> GovernanceEngine:
    return default_engine


def require_caller(x_dao_caller: Optional[str] = Header(default=None)) -> str:
    caller = (x_dao_caller or "").strip()
    if not caller:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="missing_caller")
    return caller


def _http_error(e: GovernanceError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.code)


def _proposal_model(view: Dict[str, Any]) -> ProposalModel:
    return ProposalModel(**view)


# ============================================================
# Rules & roles
# ============================================================

@router.get("/rules", response_model=RulesModel)
def get_rules(eng: GovernanceEngine = Depends(get_engine)) -> RulesModel:
    return RulesModel(**eng.rules.to_dict())


@router.post("/rules", response_model=RulesModel)
def change_rules(
    payload: RulesModel,
    caller: str = Depends(require_caller),
    eng: GovernanceEngine = Depends(get_engine),
) -> RulesModel:
    try:
        rules = eng.change_rules(caller, payload.quorum, payload.debate_period_sec)
    except GovernanceError as e:
        raise _http_error(e)
    return RulesModel(**rules.to_dict())


@router.get("/roles", response_model=RolesResponse)
def get_roles(eng: GovernanceEngine = Depends(get_engine)) -> RolesResponse:
    return RolesResponse(owner=eng.owner, assignee=eng.assignee)


# ============================================================
# Proposals
# ============================================================

@router.get("/proposals", response_model=List[ProposalModel])
def list_proposals(eng: GovernanceEngine = Depends(get_engine)) -> List[ProposalModel]:
    return [_proposal_model(p) for p in eng.proposals()]


@router.post("/proposals", response_model=IdResponse, status_code=status.HTTP_201_CREATED)
def create_proposal(
    payload: ProposalCreate,
    caller: str = Depends(require_caller),
    eng: GovernanceEngine = Depends(get_engine),
) -> IdResponse:
    try:
        pid = eng.create_proposal(caller, payload.artifact_ref, payload.amount, payload.description)
    except GovernanceError as e:
        raise _http_error(e)
    return IdResponse(id=pid)


@router.get("/proposals/{proposal_id}", response_model=ProposalModel)
def get_proposal(proposal_id: int, eng: GovernanceEngine = Depends(get_engine)) -> ProposalModel:
    try:
        return _proposal_model(eng.proposal(proposal_id))
    except GovernanceError as e:
        raise _http_error(e)


@router.get("/artifacts/{artifact_ref:path}/proposal", response_model=ProposalModel)
def get_proposal_by_artifact(artifact_ref: str, eng: GovernanceEngine = Depends(get_engine)) -> ProposalModel:
    try:
        return _proposal_model(eng.proposal_by_artifact(artifact_ref))
    except GovernanceError as e:
        raise _http_error(e)


@router.post("/proposals/{proposal_id}/execute", response_model=ExecuteResponse)
def execute_proposal(
    proposal_id: int,
    caller: str = Depends(require_caller),
    eng: GovernanceEngine = Depends(get_engine),
) -> ExecuteResponse:
    try:
        result = eng.execute(caller, proposal_id)
    except GovernanceError as e:
        raise _http_error(e)
    return ExecuteResponse(
        proposal_id=proposal_id,
        passed=result.passed,
        final_result=result.final_result,
        total_cast=result.total_cast,
    )


# ============================================================
# Suggestions
# ============================================================

@router.post(
    "/proposals/{proposal_id}/suggestions",
    response_model=IdResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_suggestion(
    proposal_id: int,
    payload: SuggestionCreate,
    caller: str = Depends(require_caller),
    eng: GovernanceEngine = Depends(get_engine),
) -> IdResponse:
    try:
        sid = eng.add_suggestion(caller, proposal_id, payload.amount)
    except GovernanceError as e:
        raise _http_error(e)
    return IdResponse(id=sid)


@router.get("/proposals/{proposal_id}/suggestions/{suggestion_id}", response_model=SuggestionModel)
def get_suggestion(
    proposal_id: int,
    suggestion_id: int,
    eng: GovernanceEngine = Depends(get_engine),
) -> SuggestionModel:
    try:
        return SuggestionModel(**eng.suggestion(proposal_id, suggestion_id))
    except GovernanceError as e:
        raise _http_error(e)


# ============================================================
# Votes
# ============================================================

@router.post("/proposals/{proposal_id}/votes", response_model=VoteResponse)
def cast_vote(
    proposal_id: int,
    payload: VoteRequest,
    caller: str = Depends(require_caller),
    eng: GovernanceEngine = Depends(get_engine),
) -> VoteResponse:
    try:
        idx = eng.cast_vote(caller, proposal_id, payload.suggestion_id)
    except GovernanceError as e:
        raise _http_error(e)
    return VoteResponse(proposal_id=proposal_id, suggestion_id=payload.suggestion_id, vote_index=idx)


@router.put("/proposals/{proposal_id}/votes", response_model=VoteResponse)
def change_vote(
    proposal_id: int,
    payload: VoteRequest,
    caller: str = Depends(require_caller),
    eng: GovernanceEngine = Depends(get_engine),
) -> VoteResponse:
    try:
        idx = eng.change_vote(caller, proposal_id, payload.suggestion_id)
    except GovernanceError as e:
        raise _http_error(e)
    return VoteResponse(proposal_id=proposal_id, suggestion_id=payload.suggestion_id, vote_index=idx)


@router.get("/proposals/{proposal_id}/votes/{voter}", response_model=VotedForResponse)
def voted_for(
    proposal_id: int,
    voter: str,
    suggestion_id: int = Query(..., ge=0),
    eng: GovernanceEngine = Depends(get_engine),
) -> VotedForResponse:
    try:
        view = eng.vote_status(proposal_id, voter, suggestion_id)
    except GovernanceError as e:
        raise _http_error(e)
    return VotedForResponse(
        proposal_id=proposal_id,
        voter=voter,
        suggestion_id=suggestion_id,
        voted=view["voted"],
        weight=view["weight"],
    )


# ============================================================
# Events
# ============================================================

@router.get("/events")
def list_events(
    type: Optional[str] = Query(default=None),
    since: int = Query(default=0, ge=0),
    eng: GovernanceEngine = Depends(get_engine),
) -> Dict[str, Any]:
    return {"ok": True, "events": [e.to_dict() for e in eng.events.list(typ=type, since=since)]}
