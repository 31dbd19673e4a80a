import pytest
from fastapi.testclient import TestClient

from election_registry.config import Settings
from election_registry.main import create_app
from election_registry.registry import ElectionRegistry

from conftest import ADMIN, OTHER, VOTER, as_caller

DETAILS = {
    "admin_name": "Admin",
    "admin_email": "admin@example.com",
    "admin_title": "Chair",
    "election_title": "2024 Election",
    "organization_title": "Example Org",
}


def add_candidate(client, header="John Doe", slogan="Equality for all", caller=ADMIN):
    return client.post("/election/candidates", json={"header": header, "slogan": slogan}, headers=as_caller(caller))


def register(client, caller=VOTER):
    return client.post("/voter/register", json={"name": "Voter Name", "phone": "1234567890"}, headers=as_caller(caller))


def verify(client, voter=VOTER, approve=True, caller=ADMIN):
    return client.post("/voter/verify", json={"voter": voter, "approve": approve}, headers=as_caller(caller))


def cast(client, candidate_id=0, caller=VOTER):
    return client.post("/vote/cast", json={"candidate_id": candidate_id}, headers=as_caller(caller))


def test_root_and_health(client):
    assert client.get("/").status_code == 200
    assert client.get("/health").json() == {"status": "healthy", "storage": "memory"}


def test_get_admin(client):
    assert client.get("/election/admin").json() == {"admin": ADMIN}


def test_add_candidate(client):
    response = add_candidate(client)
    assert response.status_code == 201
    assert response.json() == {"id": 0, "header": "John Doe", "slogan": "Equality for all", "vote_count": 0}
    assert client.get("/election/candidates/0").json()["header"] == "John Doe"
    assert len(client.get("/election/candidates").json()) == 1


def test_non_admin_add_candidate(client):
    response = add_candidate(client, caller=OTHER)
    assert response.status_code == 403
    assert response.json()["error"] == "unauthorized"
    assert client.get("/election/candidates").json() == []


def test_missing_caller_header(client):
    response = client.post("/election/candidates", json={"header": "John Doe", "slogan": "x"})
    assert response.status_code == 401
    response = client.post("/election/candidates", json={"header": "John Doe", "slogan": "x"}, headers=as_caller("  "))
    assert response.status_code == 401


def test_unknown_candidate(client):
    response = client.get("/election/candidates/3")
    assert response.status_code == 404
    assert response.json()["error"] == "invalid_candidate"


def test_election_details(client):
    response = client.put("/election/details", json=DETAILS, headers=as_caller(ADMIN))
    assert response.status_code == 200
    assert client.get("/election/details").json() == DETAILS


def test_election_details_need_all_fields(client):
    partial = dict(DETAILS)
    del partial["admin_email"]
    response = client.put("/election/details", json=partial, headers=as_caller(ADMIN))
    assert response.status_code == 422


def test_non_admin_election_details(client):
    response = client.put("/election/details", json=DETAILS, headers=as_caller(OTHER))
    assert response.status_code == 403
    assert client.get("/election/details").json()["admin_name"] == ""


def test_voter_flow(client):
    add_candidate(client)
    assert register(client).status_code == 201
    assert client.get(f"/voter/{VOTER}").json()["is_registered"] is True
    assert verify(client).json()["is_verified"] is True

    response = cast(client)
    assert response.status_code == 200
    assert response.json() == {
        "message": "Vote cast successfully!",
        "voter": VOTER,
        "candidate_id": 0,
        "vote_count": 1,
    }
    assert client.get("/election/candidates/0").json()["vote_count"] == 1
    assert client.get(f"/voter/{VOTER}").json()["has_voted"] is True
    assert client.get("/election/summary").json() == {"candidates": 1, "voters": 1, "votes": 1, "ended": False}


def test_register_twice(client):
    register(client)
    response = register(client)
    assert response.status_code == 409
    assert response.json()["error"] == "already_registered"


def test_unknown_voter_record(client):
    assert client.get("/voter/0xnobody").json() == {
        "name": "",
        "phone": "",
        "is_registered": False,
        "is_verified": False,
        "has_voted": False,
    }


@pytest.mark.parametrize(("caller", "voter", "status", "error"), [
    (OTHER, VOTER, 403, "unauthorized"),
    (ADMIN, OTHER, 404, "not_registered"),
])
def test_verify_errors(client, caller, voter, status, error):
    register(client)
    response = verify(client, voter=voter, caller=caller)
    assert response.status_code == status
    assert response.json()["error"] == error


def test_unverified_voter_cannot_vote(client):
    add_candidate(client)
    register(client)
    response = cast(client)
    assert response.status_code == 403
    assert response.json()["error"] == "not_eligible"
    assert client.get("/election/candidates/0").json()["vote_count"] == 0


def test_vote_twice(client):
    add_candidate(client)
    register(client)
    verify(client)
    cast(client)
    response = cast(client)
    assert response.json()["error"] == "not_eligible"
    assert client.get("/election/candidates/0").json()["vote_count"] == 1


def test_vote_invalid_candidate(client):
    register(client)
    verify(client)
    response = cast(client, candidate_id=0)
    assert response.status_code == 404
    assert response.json()["error"] == "invalid_candidate"
    assert client.get(f"/voter/{VOTER}").json()["has_voted"] is False


def test_end_election(client):
    add_candidate(client)
    register(client)
    verify(client)
    assert client.post("/election/end", headers=as_caller(ADMIN)).json() == {"ended": True}
    assert client.get("/election/end").json() == {"ended": True}

    response = cast(client)
    assert response.status_code == 409
    assert response.json()["error"] == "election_closed"

    response = client.post("/election/end", headers=as_caller(ADMIN))
    assert response.status_code == 409
    assert response.json()["error"] == "already_ended"


def test_non_admin_end_election(client):
    response = client.post("/election/end", headers=as_caller(OTHER))
    assert response.status_code == 403
    assert client.get("/election/end").json() == {"ended": False}


def test_custom_caller_header(registry):
    client = TestClient(create_app(registry=registry, settings=Settings(caller_header="X-Remote-User")))
    response = client.post("/election/end", headers={"X-Remote-User": ADMIN})
    assert response.status_code == 200


def test_app_builds_registry_from_settings(tmp_path):
    settings = Settings(registry_admin=ADMIN, storage_backend="json", db_path=str(tmp_path / "registry.json"))
    client = TestClient(create_app(settings=settings))
    add_candidate(client)

    reopened = TestClient(create_app(settings=settings))
    assert reopened.get("/election/candidates/0").json()["header"] == "John Doe"


def test_app_needs_admin_for_fresh_registry():
    with pytest.raises(ValueError):
        create_app(settings=Settings())


@pytest.mark.parametrize("candidate_id", [True, "1", 1.0])
def test_vote_needs_integer_candidate_id(client, candidate_id):
    add_candidate(client)
    add_candidate(client, header="Jane Roe", slogan="Progress")
    register(client)
    verify(client)
    response = client.post("/vote/cast", json={"candidate_id": candidate_id}, headers=as_caller(VOTER))
    assert response.status_code == 422
    assert client.get(f"/voter/{VOTER}").json()["has_voted"] is False
    assert client.get("/election/summary").json()["votes"] == 0


class ClosingStorage:
    def __init__(self):
        self.closed = False

    def load_state(self):
        return None

    def save_state(self, state):
        pass

    def close(self):
        self.closed = True


def test_shutdown_closes_storage(settings):
    storage = ClosingStorage()
    registry = ElectionRegistry.create(ADMIN, storage=storage)
    with TestClient(create_app(registry=registry, settings=settings)) as client:
        assert client.get("/health").status_code == 200
        assert storage.closed is False
    assert storage.closed is True
