from fastapi import APIRouter, Depends, status

from ..models.voter_model import Voter, VoterIn, VerifyVoterIn
from ..registry import ElectionRegistry
from ..security import get_caller, get_registry

voter_router = APIRouter(prefix="/voter", tags=["Voter"])


@voter_router.post("/register", response_model=Voter, status_code=status.HTTP_201_CREATED)
def register_as_voter(
    voter: VoterIn,
    caller: str = Depends(get_caller),
    registry: ElectionRegistry = Depends(get_registry),
):
    """Registers the calling identity; verification by the admin comes later."""
    return registry.register_as_voter(caller, voter.name, voter.phone)


@voter_router.post("/verify", response_model=Voter)
def verify_voter(
    request: VerifyVoterIn,
    caller: str = Depends(get_caller),
    registry: ElectionRegistry = Depends(get_registry),
):
    return registry.verify_voter(caller, request.approve, request.voter)


@voter_router.get("/{identity}", response_model=Voter)
def voter_details(identity: str, registry: ElectionRegistry = Depends(get_registry)):
    """
    Returns the voter record for any identity.
    Unknown identities get an empty record with every flag false.
    """
    return registry.voter_details(identity)
