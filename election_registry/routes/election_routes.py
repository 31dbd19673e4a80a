from typing import List

from fastapi import APIRouter, Depends, status

from ..models.election_model import Candidate, CandidateIn, ElectionDetails
from ..registry import ElectionRegistry
from ..security import get_caller, get_registry

router = APIRouter(prefix="/election", tags=["Election"])


@router.get("/admin")
def get_admin(registry: ElectionRegistry = Depends(get_registry)):
    return {"admin": registry.get_admin()}


@router.post("/candidates", response_model=Candidate, status_code=status.HTTP_201_CREATED)
def add_candidate(
    candidate: CandidateIn,
    caller: str = Depends(get_caller),
    registry: ElectionRegistry = Depends(get_registry),
):
    return registry.add_candidate(caller, candidate.header, candidate.slogan)


@router.get("/candidates", response_model=List[Candidate])
def list_candidates(registry: ElectionRegistry = Depends(get_registry)):
    return registry.list_candidates()


@router.get("/candidates/{candidate_id}", response_model=Candidate)
def candidate_details(candidate_id: int, registry: ElectionRegistry = Depends(get_registry)):
    return registry.candidate_details(candidate_id)


@router.put("/details", response_model=ElectionDetails)
def set_election_details(
    details: ElectionDetails,
    caller: str = Depends(get_caller),
    registry: ElectionRegistry = Depends(get_registry),
):
    return registry.set_election_details(
        caller,
        details.admin_name,
        details.admin_email,
        details.admin_title,
        details.election_title,
        details.organization_title,
    )


@router.get("/details", response_model=ElectionDetails)
def get_election_details(registry: ElectionRegistry = Depends(get_registry)):
    return registry.get_election_details()


@router.post("/end")
def end_election(caller: str = Depends(get_caller), registry: ElectionRegistry = Depends(get_registry)):
    registry.end_election(caller)
    return {"ended": registry.get_end()}


@router.get("/end")
def get_end(registry: ElectionRegistry = Depends(get_registry)):
    return {"ended": registry.get_end()}


@router.get("/summary")
def get_summary(registry: ElectionRegistry = Depends(get_registry)):
    return {
        "candidates": registry.candidate_count(),
        "voters": registry.voter_count(),
        "votes": registry.total_votes(),
        "ended": registry.get_end(),
    }
