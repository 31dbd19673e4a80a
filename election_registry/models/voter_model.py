from pydantic import BaseModel, Field


class VoterIn(BaseModel):
    name: str = Field(..., example="Voter Name")
    phone: str = Field(..., example="1234567890")


class Voter(BaseModel):
    # the zero value doubles as the "not found" record
    name: str = ""
    phone: str = ""
    is_registered: bool = False
    is_verified: bool = False
    has_voted: bool = False


class VerifyVoterIn(BaseModel):
    voter: str = Field(..., min_length=1)
    approve: bool = True
