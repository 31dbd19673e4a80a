from fastapi import APIRouter, Depends

from ..models.vote_model import Vote, VoteReceipt
from ..registry import ElectionRegistry
from ..security import get_caller, get_registry

vote_router = APIRouter(prefix="/vote", tags=["Vote"])


# ------------------------------
# CAST VOTE API
# ------------------------------
@vote_router.post("/cast", response_model=VoteReceipt)
def cast_vote(
    vote: Vote,
    caller: str = Depends(get_caller),
    registry: ElectionRegistry = Depends(get_registry),
):
    """
    Casts the caller's single vote.
    Fails when the election has ended, the caller is not a verified voter
    who has yet to vote, or the candidate does not exist.
    """
    candidate = registry.vote(caller, vote.candidate_id)
    return VoteReceipt(voter=caller, candidate_id=candidate.id, vote_count=candidate.vote_count)
