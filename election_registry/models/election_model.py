from pydantic import BaseModel, Field


class AdminInfo(BaseModel):
    name: str = ""
    email: str = ""
    title: str = ""


class ElectionMeta(BaseModel):
    election_title: str = ""
    organization_title: str = ""


class ElectionDetails(BaseModel):
    admin_name: str = Field(..., example="Admin")
    admin_email: str = Field(..., example="admin@example.com")
    admin_title: str = Field(..., example="Chair")
    election_title: str = Field(..., example="2024 Election")
    organization_title: str = Field(..., example="Example Org")

    @classmethod
    def from_parts(cls, admin_info: AdminInfo, election_meta: ElectionMeta) -> "ElectionDetails":
        return cls(
            admin_name=admin_info.name,
            admin_email=admin_info.email,
            admin_title=admin_info.title,
            election_title=election_meta.election_title,
            organization_title=election_meta.organization_title,
        )


class CandidateIn(BaseModel):
    header: str = Field(..., example="John Doe")
    slogan: str = Field(..., example="Equality for all")


class Candidate(CandidateIn):
    id: int = Field(..., ge=0)
    vote_count: int = Field(default=0, ge=0)
