"""The election registry: one authoritative state object and the operations on it.

Operations are validated against the caller identity and the election phase
before any effect is applied. Mutations are made on a copy of the state,
handed to the storage backend (if any) and only then swapped in, all under a
single lock, so a failed call never leaves a partially applied effect.
"""
import logging
import threading
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .errors import (
    AlreadyEnded,
    AlreadyRegistered,
    ElectionClosed,
    InvalidCandidate,
    NotEligible,
    NotRegistered,
    RegistryError,
    Unauthorized,
)
from .models.election_model import AdminInfo, Candidate, ElectionDetails, ElectionMeta
from .models.voter_model import Voter

logger = logging.getLogger(__name__)


class RegistryState(BaseModel):
    admin: str = Field(..., min_length=1)
    admin_info: AdminInfo = Field(default_factory=AdminInfo)
    election_meta: ElectionMeta = Field(default_factory=ElectionMeta)
    candidates: List[Candidate] = Field(default_factory=list)
    voters: Dict[str, Voter] = Field(default_factory=dict)
    ended: bool = False


class AdminPolicy:
    """Decides whether an identity may run admin-only operations."""

    def is_admin(self, identity: str) -> bool:
        raise NotImplementedError


class SingleAdminPolicy(AdminPolicy):
    def __init__(self, admin: str):
        self.admin = admin

    def is_admin(self, identity: str) -> bool:
        return identity == self.admin


class ElectionRegistry:
    def __init__(
        self,
        state: RegistryState,
        storage=None,
        admin_policy: Optional[AdminPolicy] = None,
    ):
        self._state = state
        self._storage = storage
        self._policy = admin_policy or SingleAdminPolicy(state.admin)
        self._lock = threading.RLock()

    @classmethod
    def create(cls, admin: str, storage=None, admin_policy: Optional[AdminPolicy] = None) -> "ElectionRegistry":
        """Open the registry held by ``storage``, or start a fresh one owned by ``admin``."""
        state = storage.load_state() if storage is not None else None
        if state is None:
            if not admin:
                raise ValueError("An admin identity is required to create a new registry.")
            state = RegistryState(admin=admin)
            if storage is not None:
                storage.save_state(state)
            logger.info(f"Created election registry administered by {admin}")
        else:
            if admin and admin != state.admin:
                logger.warning(
                    f"Configured admin {admin} ignored; stored registry is administered by {state.admin}"
                )
            logger.info(
                f"Loaded election registry with {len(state.candidates)} candidates and {len(state.voters)} voters"
            )
        return cls(state, storage=storage, admin_policy=admin_policy)

    @property
    def storage(self):
        return self._storage

    @property
    def state(self) -> RegistryState:
        """A detached copy of the current state."""
        with self._lock:
            return self._state.model_copy(deep=True)

    # --- internals ---

    def _draft(self) -> RegistryState:
        return self._state.model_copy(deep=True)

    def _commit(self, draft: RegistryState) -> None:
        if self._storage is not None:
            self._storage.save_state(draft)
        self._state = draft

    def _require_admin(self, caller: str, operation: str) -> None:
        if not self._policy.is_admin(caller):
            self._reject(Unauthorized(f"Only the admin may {operation}."), caller)

    @staticmethod
    def _reject(error: RegistryError, caller: str):
        logger.warning(f"Rejected call from {caller}: {error.code} ({error.detail})")
        raise error

    # --- admin ---

    def get_admin(self) -> str:
        return self._state.admin

    def add_candidate(self, caller: str, header: str, slogan: str) -> Candidate:
        with self._lock:
            self._require_admin(caller, "add candidates")
            draft = self._draft()
            candidate = Candidate(id=len(draft.candidates), header=header, slogan=slogan, vote_count=0)
            draft.candidates.append(candidate)
            self._commit(draft)
            logger.info(f"Candidate {candidate.id} added: {header}")
            return candidate.model_copy()

    def set_election_details(
        self,
        caller: str,
        admin_name: str,
        admin_email: str,
        admin_title: str,
        election_title: str,
        organization_title: str,
    ) -> ElectionDetails:
        with self._lock:
            self._require_admin(caller, "set election details")
            draft = self._draft()
            draft.admin_info = AdminInfo(name=admin_name, email=admin_email, title=admin_title)
            draft.election_meta = ElectionMeta(
                election_title=election_title, organization_title=organization_title
            )
            self._commit(draft)
            logger.info(f"Election details set: {election_title} ({organization_title})")
            return ElectionDetails.from_parts(draft.admin_info, draft.election_meta)

    def get_election_details(self) -> ElectionDetails:
        with self._lock:
            return ElectionDetails.from_parts(self._state.admin_info, self._state.election_meta)

    def end_election(self, caller: str) -> None:
        with self._lock:
            self._require_admin(caller, "end the election")
            if self._state.ended:
                self._reject(AlreadyEnded("The election has already ended."), caller)
            draft = self._draft()
            draft.ended = True
            self._commit(draft)
            logger.info("Election ended")

    def get_end(self) -> bool:
        return self._state.ended

    # --- voters ---

    def register_as_voter(self, caller: str, name: str, phone: str) -> Voter:
        with self._lock:
            if caller in self._state.voters:
                self._reject(AlreadyRegistered(f"{caller} is already registered."), caller)
            draft = self._draft()
            voter = Voter(name=name, phone=phone, is_registered=True, is_verified=False, has_voted=False)
            draft.voters[caller] = voter
            self._commit(draft)
            logger.info(f"Voter {caller} registered")
            return voter.model_copy()

    def verify_voter(self, caller: str, approve: bool, voter: str) -> Voter:
        with self._lock:
            self._require_admin(caller, "verify voters")
            record = self._state.voters.get(voter)
            if record is None or not record.is_registered:
                self._reject(NotRegistered(f"{voter} is not a registered voter."), caller)
            draft = self._draft()
            draft.voters[voter].is_verified = approve
            self._commit(draft)
            logger.info(f"Voter {voter} {'verified' if approve else 'verification revoked'}")
            return draft.voters[voter].model_copy()

    def voter_details(self, identity: str) -> Voter:
        with self._lock:
            record = self._state.voters.get(identity)
            return record.model_copy() if record is not None else Voter()

    def voter_count(self) -> int:
        return len(self._state.voters)

    # --- voting ---

    def vote(self, caller: str, candidate_id: int) -> Candidate:
        with self._lock:
            if self._state.ended:
                self._reject(ElectionClosed("Voting is closed."), caller)
            record = self._state.voters.get(caller)
            if record is None or not record.is_registered:
                self._reject(NotEligible(f"{caller} is not registered."), caller)
            if not record.is_verified:
                self._reject(NotEligible(f"{caller} is not verified."), caller)
            if record.has_voted:
                self._reject(NotEligible(f"{caller} has already voted."), caller)
            if not 0 <= candidate_id < len(self._state.candidates):
                self._reject(InvalidCandidate(f"No candidate with id {candidate_id}."), caller)

            draft = self._draft()
            draft.candidates[candidate_id].vote_count += 1
            draft.voters[caller].has_voted = True
            self._commit(draft)
            logger.info(f"Vote recorded from {caller} for candidate {candidate_id}")
            return draft.candidates[candidate_id].model_copy()

    # --- candidates ---

    def candidate_details(self, candidate_id: int) -> Candidate:
        with self._lock:
            if not 0 <= candidate_id < len(self._state.candidates):
                raise InvalidCandidate(f"No candidate with id {candidate_id}.")
            return self._state.candidates[candidate_id].model_copy()

    def list_candidates(self) -> List[Candidate]:
        with self._lock:
            return [c.model_copy() for c in self._state.candidates]

    def candidate_count(self) -> int:
        return len(self._state.candidates)

    def total_votes(self) -> int:
        with self._lock:
            return sum(c.vote_count for c in self._state.candidates)
