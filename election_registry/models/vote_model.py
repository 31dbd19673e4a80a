from pydantic import BaseModel, Field, StrictInt


class Vote(BaseModel):
    candidate_id: StrictInt


class VoteReceipt(BaseModel):
    message: str = "Vote cast successfully!"
    voter: str
    candidate_id: int
    vote_count: int = Field(..., ge=0)
